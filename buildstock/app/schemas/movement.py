from datetime import datetime

from pydantic import BaseModel, Field

from buildstock.app.db.models.core_types import MovementType


class MovementCreate(BaseModel):
    material: str = Field(min_length=1, max_length=255)
    quantity: float = Field(gt=0, allow_inf_nan=False)
    type: MovementType
    unit: str | None = Field(default=None, min_length=1, max_length=32)
    user_id: int | None = None
    location: str | None = Field(default=None, max_length=128)
    message: str | None = None


class MovementRead(BaseModel):
    """Mouvement enrichi (matériau + utilisateur) pour l'affichage."""

    id: int
    material: str
    quantity: float
    unit: str
    type: MovementType
    location: str | None
    message: str | None
    timestamp: datetime
    user_name: str
