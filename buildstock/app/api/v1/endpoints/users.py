from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from buildstock.app.api.deps import get_db
from buildstock.app.schemas.user import UserRead
from buildstock.services.users import list_active_users

router = APIRouter(prefix="/users")


@router.get("", response_model=list[UserRead])
def list_users(db: Session = Depends(get_db)):
    return list_active_users(db)
