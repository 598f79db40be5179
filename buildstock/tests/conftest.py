import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from buildstock.app.api.deps import get_db
from buildstock.app.db.models.models_v1 import Base
from buildstock.app.db.session import build_engine
from buildstock.app.main import app
from buildstock.core.config import Settings, get_settings


@pytest.fixture(scope="function")
def engine():
    """
    Base SQLite en mémoire, neuve pour chaque test.
    Rien ne fuit d'un test à l'autre.
    """
    engine = build_engine("sqlite+pysqlite://")
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine) -> Session:
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite+pysqlite://")


@pytest.fixture
def client(db_session, settings):
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
