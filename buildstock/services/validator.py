"""
Contrôle de suffisance avant une sortie de stock.

Le stock courant = SUM(quantity) sur tous les mouvements du matériau (0 si aucun).

Le contrôle et l'insert qui suit partagent la transaction de l'appelant.
Sans verrou, deux sorties concurrentes peuvent lire le même agrégat et être
acceptées toutes les deux. Avec lock=True, la ligne du matériau est
verrouillée (FOR UPDATE) jusqu'au commit.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from buildstock.app.db.models.models_v1 import Material, StockMovement


@dataclass(frozen=True)
class StockCheck:
    sufficient: bool
    current_stock: float


def current_stock(db: Session, material_id: int) -> float:
    total = db.execute(
        select(func.coalesce(func.sum(StockMovement.quantity), 0.0))
        .where(StockMovement.material_id == material_id)
    ).scalar_one()
    return float(total)


def check_sufficiency(
    db: Session,
    material_id: int,
    requested_quantity: float,
    *,
    lock: bool = False,
) -> StockCheck:
    if lock:
        db.execute(select(Material.id).where(Material.id == material_id).with_for_update()).first()

    stock = current_stock(db, material_id)
    return StockCheck(sufficient=stock >= requested_quantity, current_stock=stock)
