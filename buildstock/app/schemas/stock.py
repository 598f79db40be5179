from datetime import datetime

from pydantic import BaseModel

from buildstock.app.db.models.core_types import StockStatus
from buildstock.app.schemas.movement import MovementRead


class StockSummaryRead(BaseModel):
    material_id: int
    material: str
    total: float  # READ ONLY : somme du ledger, jamais stockée
    unit: str
    min_stock: float
    max_stock: float | None
    last_movement_at: datetime | None
    status: StockStatus


class DashboardStats(BaseModel):
    total_materials: int
    total_movements: int
    incoming_movements: int
    outgoing_movements: int
    low_stock: int


class DashboardRead(BaseModel):
    labels: list[str]
    values: list[float]
    recent_movements: list[MovementRead]
    stats: DashboardStats
