from __future__ import annotations

from typing import Generator

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from buildstock.app.db.session import SessionLocal
from buildstock.core.config import Settings, get_settings
from buildstock.services.errors import NotFoundError
from buildstock.services.users import get_active_user


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    x_user_id: int | None = Header(default=None, alias="X-User-Id"),
) -> int | None:
    """
    Auth désactivée : None (le payload décide).
    Auth activée : X-User-Id obligatoire et doit pointer vers un utilisateur actif.
    """
    if not settings.auth_enabled:
        return None

    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    try:
        user = get_active_user(db, x_user_id)
    except NotFoundError:
        raise HTTPException(status_code=401, detail="Unknown user") from None
    return int(user.id)
