"""
Catalogue des matériaux.

Un matériau est identifié par son nom, sans tenir compte de la casse.
Il n'est jamais supprimé : seulement désactivé.
"""

from __future__ import annotations

import logging
import math

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from buildstock.app.db.models.models_v1 import Material, DEFAULT_UNIT
from buildstock.services.errors import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def _find_by_name(db: Session, name: str) -> Material | None:
    return (
        db.execute(select(Material).where(func.lower(Material.name) == func.lower(name)))
        .scalars()
        .first()
    )


def get_or_create_material(db: Session, name: str, unit: str | None = DEFAULT_UNIT) -> int:
    """
    Retourne l'id du matériau `name`, en le créant au premier usage.

    L'insert se fait dans un SAVEPOINT : si un autre appelant a créé le même
    nom entre-temps (index unique sur lower(name)), on annule le savepoint et
    on relit une fois. Le gagnant de la course n'a pas d'importance.
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Material name is required")

    material = _find_by_name(db, name)
    if material:
        return int(material.id)

    try:
        with db.begin_nested():
            material = Material(name=name, unit=(unit or DEFAULT_UNIT).strip() or DEFAULT_UNIT, min_stock=0)
            db.add(material)
    except IntegrityError:
        logger.info("Material %r created concurrently, reading it back", name)
        material = _find_by_name(db, name)
        if material is None:
            raise StorageError(f'Could not create material "{name}"')
        return int(material.id)

    logger.info("Created material %r (id=%s, unit=%s)", material.name, material.id, material.unit)
    return int(material.id)


def get_material(db: Session, material_id: int, *, active_only: bool = True) -> Material:
    material = db.get(Material, material_id)
    if material is None or (active_only and not material.active):
        raise NotFoundError(f"Material {material_id} not found")
    return material


def _check_limit(label: str, value: float | None) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValidationError(f"{label} must be a finite number")
    if value < 0:
        raise ValidationError(f"{label} must be >= 0")


def update_limits(
    db: Session,
    material_id: int,
    *,
    min_stock: float,
    max_stock: float | None,
) -> Material:
    _check_limit("min_stock", min_stock)
    _check_limit("max_stock", max_stock)
    if max_stock is not None and max_stock < min_stock:
        raise ValidationError("max_stock must be greater than or equal to min_stock")

    material = get_material(db, material_id)
    material.min_stock = float(min_stock)
    material.max_stock = float(max_stock) if max_stock is not None else None
    db.flush()
    return material


def deactivate_material(db: Session, material_id: int) -> Material:
    """active -> inactive. Les mouvements existants restent attachés."""
    material = get_material(db, material_id)
    material.active = False
    db.flush()
    logger.info("Deactivated material %r (id=%s)", material.name, material.id)
    return material


def list_active_materials(db: Session) -> list[Material]:
    return list(
        db.execute(select(Material).where(Material.active.is_(True)).order_by(Material.name))
        .scalars()
        .all()
    )
