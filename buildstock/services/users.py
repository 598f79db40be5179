from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from buildstock.app.db.models.models_v1 import User
from buildstock.app.db.models.core_types import Role
from buildstock.services.errors import NotFoundError

SYSTEM_USER_NAME = "System"
SYSTEM_USER_EMAIL = "system@buildstock.local"


def list_active_users(db: Session) -> list[User]:
    return list(db.execute(select(User).where(User.active.is_(True)).order_by(User.name)).scalars().all())


def get_active_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None or not user.active:
        raise NotFoundError(f"User {user_id} not found")
    return user


def ensure_system_user(db: Session) -> User:
    user = db.scalar(select(User).where(User.email == SYSTEM_USER_EMAIL))
    if not user:
        user = User(name=SYSTEM_USER_NAME, email=SYSTEM_USER_EMAIL, role=Role.admin, active=True)
        db.add(user)
        db.flush()
    return user
