"""
Ledger des mouvements de stock (append-only).

Règle métier :
    quantité stockée = +|q| pour une entrée, -|q| pour une sortie
    une sortie n'est acceptée que si stock courant >= q

Le service ne commit pas : contrôle + insert forment une seule transaction,
c'est l'appelant qui la valide.
"""

from __future__ import annotations

import logging
import math

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from buildstock.app.db.models.models_v1 import Material, StockMovement, User, DEFAULT_UNIT
from buildstock.app.db.models.core_types import MovementType
from buildstock.app.schemas.movement import MovementRead
from buildstock.core.config import Settings, get_settings
from buildstock.services.catalog import get_or_create_material, get_material
from buildstock.services.errors import InsufficientStockError, StorageError, ValidationError
from buildstock.services.users import get_active_user
from buildstock.services.validator import check_sufficiency

logger = logging.getLogger(__name__)

SYSTEM_LABEL = "system"
DEFAULT_LIST_LIMIT = 1000


def parse_movement_type(value: MovementType | str) -> MovementType:
    try:
        return MovementType(value)
    except ValueError:
        raise ValidationError(f"Unknown movement type {value!r} (expected 'incoming' or 'outgoing')") from None


def validate_quantity(quantity: float) -> float:
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
        raise ValidationError("Quantity must be a number")
    if not math.isfinite(quantity):
        raise ValidationError("Quantity must be finite")
    if quantity <= 0:
        raise ValidationError("Quantity must be greater than zero")
    return float(quantity)


def record_movement(
    db: Session,
    *,
    material_name: str,
    quantity: float,
    movement_type: MovementType | str,
    user_id: int | None = None,
    location: str | None = None,
    message: str | None = None,
    unit: str | None = None,
    settings: Settings | None = None,
) -> StockMovement:
    # ---------- VALIDATION (avant tout accès DB) ----------
    qty = validate_quantity(quantity)
    mtype = parse_movement_type(movement_type)
    settings = settings or get_settings()

    try:
        if user_id is not None:
            get_active_user(db, user_id)

        material_id = get_or_create_material(db, material_name, unit or DEFAULT_UNIT)
        material = get_material(db, material_id)

        # ---------- SUFFISANCE (sorties uniquement) ----------
        if mtype == MovementType.outgoing:
            check = check_sufficiency(db, material_id, qty, lock=settings.lock_on_check)
            if not check.sufficient:
                logger.warning(
                    "Rejected outgoing movement: %r available=%.2f requested=%.2f",
                    material.name,
                    check.current_stock,
                    qty,
                )
                raise InsufficientStockError(material.name, check.current_stock, qty, material.unit)

        # ---------- INSERT ----------
        mv = StockMovement(
            material_id=material_id,
            user_id=user_id,
            quantity=-abs(qty) if mtype == MovementType.outgoing else abs(qty),
            type=mtype,
            location=location or None,
            message=message or None,
        )
        db.add(mv)
        db.flush()
    except SQLAlchemyError as exc:
        logger.exception("Failed to record %s movement for %r", mtype.value, material_name)
        raise StorageError("Could not record movement") from exc

    logger.info(
        "Recorded %s movement id=%s material=%r quantity=%s",
        mtype.value,
        mv.id,
        material.name,
        mv.quantity,
    )
    return mv


def _enriched_movements_stmt():
    return (
        select(
            StockMovement.id,
            Material.name.label("material"),
            StockMovement.quantity,
            Material.unit,
            StockMovement.type,
            StockMovement.location,
            StockMovement.message,
            StockMovement.timestamp,
            func.coalesce(User.name, SYSTEM_LABEL).label("user_name"),
        )
        .join(Material, Material.id == StockMovement.material_id)
        .outerjoin(User, User.id == StockMovement.user_id)
        .order_by(StockMovement.timestamp.desc(), StockMovement.id.desc())
    )


def list_movements(db: Session, *, limit: int = DEFAULT_LIST_LIMIT) -> list[MovementRead]:
    rows = db.execute(_enriched_movements_stmt().limit(limit)).all()
    return [MovementRead(**row._mapping) for row in rows]
