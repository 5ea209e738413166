import importlib
import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from alembic import command
from alembic.config import Config

from tests.db_utils import create_postgres_test_database

TEST_NOTICES = [
    {"id": "welcome", "content": "<p>Hi</p>"},
    {
        "id": "tour",
        "content": "<p>Take the tour</p>",
        "scope": "user",
        "style": "success",
        "screens": frozenset({"dashboard"}),
    },
    {
        "id": "maintenance",
        "content": "<p>Scheduled maintenance tonight</p>",
        "dismissible": False,
        "style": "warning",
        "capability": "manage_options",
    },
]


def _setup_app(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    os.environ["SECRET_KEY"] = "test-secret"

    import app.notices.core.config as config
    import app.notices.db.session as session
    import app.main as main
    from app.notices.services.notice import NoticeConfig

    importlib.reload(config)
    importlib.reload(session)
    importlib.reload(main)

    notices = [NoticeConfig(**definition) for definition in TEST_NOTICES]
    return main.create_app(notices=notices), session


def _run_migrations(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


@pytest.fixture()
def client(tmp_path: Path):
    database_url = os.getenv("DATABASE_URL", "")
    cleanup = None

    if database_url.startswith("postgres"):
        database_url, cleanup = create_postgres_test_database(database_url)
    else:
        db_path = tmp_path / "test.db"
        database_url = f"sqlite+pysqlite:///{db_path}"

    _run_migrations(database_url)
    app, session = _setup_app(database_url)

    with TestClient(app) as client:
        yield client

    session.engine.dispose()
    if cleanup:
        cleanup()


@pytest.fixture()
def db_session(client):
    from app.notices.db.session import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
