"""
Agrégats de stock (lecture seule).

Toujours recalculés depuis le ledger :
    total = SUM(quantity) par matériau actif (0 si aucun mouvement)
    statut = low si total <= min_stock
             high si max_stock défini et total >= max_stock
             normal sinon
"""

from __future__ import annotations

from sqlalchemy import select, func, case
from sqlalchemy.orm import Session

from buildstock.app.db.models.models_v1 import Material, StockMovement
from buildstock.app.db.models.core_types import MovementType, StockStatus
from buildstock.app.schemas.stock import StockSummaryRead, DashboardRead, DashboardStats
from buildstock.services.ledger import list_movements

RECENT_MOVEMENTS_LIMIT = 20


def classify_stock(total: float, min_stock: float, max_stock: float | None) -> StockStatus:
    if total <= (min_stock or 0):
        return StockStatus.low
    if max_stock is not None and total >= max_stock:
        return StockStatus.high
    return StockStatus.normal


def stock_summary(db: Session) -> list[StockSummaryRead]:
    totals = (
        select(
            StockMovement.material_id,
            func.sum(StockMovement.quantity).label("total"),
            func.max(StockMovement.timestamp).label("last_movement_at"),
        )
        .group_by(StockMovement.material_id)
        .subquery()
    )

    rows = db.execute(
        select(
            Material,
            func.coalesce(totals.c.total, 0.0).label("total"),
            totals.c.last_movement_at,
        )
        .outerjoin(totals, totals.c.material_id == Material.id)
        .where(Material.active.is_(True))
        .order_by(Material.name, Material.id)
    ).all()

    summary = []
    for material, total, last_movement_at in rows:
        total = float(total or 0)
        summary.append(
            StockSummaryRead(
                material_id=material.id,
                material=material.name,
                total=total,
                unit=material.unit,
                min_stock=material.min_stock,
                max_stock=material.max_stock,
                last_movement_at=last_movement_at,
                status=classify_stock(total, material.min_stock, material.max_stock),
            )
        )
    return summary


def _movement_counts(db: Session) -> tuple[int, int, int]:
    total, incoming, outgoing = db.execute(
        select(
            func.count(StockMovement.id),
            func.coalesce(func.sum(case((StockMovement.type == MovementType.incoming, 1), else_=0)), 0),
            func.coalesce(func.sum(case((StockMovement.type == MovementType.outgoing, 1), else_=0)), 0),
        )
        .join(Material, Material.id == StockMovement.material_id)
        .where(Material.active.is_(True))
    ).one()
    return int(total), int(incoming), int(outgoing)


def dashboard(db: Session, *, recent_limit: int = RECENT_MOVEMENTS_LIMIT) -> DashboardRead:
    summary = stock_summary(db)
    total_movements, incoming, outgoing = _movement_counts(db)

    return DashboardRead(
        labels=[row.material for row in summary],
        values=[row.total for row in summary],
        recent_movements=list_movements(db, limit=recent_limit),
        stats=DashboardStats(
            total_materials=len(summary),
            total_movements=total_movements,
            incoming_movements=incoming,
            outgoing_movements=outgoing,
            low_stock=sum(1 for row in summary if row.total <= row.min_stock),
        ),
    )
