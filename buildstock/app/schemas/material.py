from datetime import datetime

from pydantic import BaseModel, Field


class MaterialRead(BaseModel):
    id: int
    name: str
    unit: str
    min_stock: float
    max_stock: float | None
    description: str | None
    created_at: datetime
    active: bool

    class Config:
        from_attributes = True


class MaterialLimitsUpdate(BaseModel):
    min_stock: float = Field(default=0, ge=0, allow_inf_nan=False)
    max_stock: float | None = Field(default=None, ge=0, allow_inf_nan=False)
