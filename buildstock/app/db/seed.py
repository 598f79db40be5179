from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

from buildstock.app.db.base import Base
from buildstock.app.db.models import models_v1  # noqa: F401  (import for side effects)
from buildstock.app.db.session import SessionLocal, engine as default_engine, commit_or_rollback
from buildstock.services.users import ensure_system_user

logger = logging.getLogger(__name__)


def init_db(engine: Engine = default_engine) -> None:
    """Crée les tables / index manquants puis l'utilisateur système."""
    Base.metadata.create_all(bind=engine)
    run_seed(engine)


def run_seed(engine: Engine = default_engine):
    db = SessionLocal(bind=engine)
    try:
        user = ensure_system_user(db)
        commit_or_rollback(db)
        logger.info("Seed OK: system user id=%s", user.id)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    print("SEED OK: tables + system user")
