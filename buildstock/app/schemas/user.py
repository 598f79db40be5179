from datetime import datetime

from pydantic import BaseModel

from buildstock.app.db.models.core_types import Role


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    created_at: datetime

    class Config:
        from_attributes = True
