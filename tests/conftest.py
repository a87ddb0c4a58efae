from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the fintrack package importable when running the tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fintrack.core import config as core_config  # noqa: E402
from fintrack.db import models  # noqa: E402
from fintrack.db import session as db_session  # noqa: E402


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def db_env(tmp_path, monkeypatch):
    """Point DATABASE_URL to a temporary SQLite file and reset the settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.setenv("JWT_ISSUER", "fintrack-tests")
    monkeypatch.setenv("JWT_ALGORITHM", "HS256")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.delenv("PASSWORD_SCHEME", raising=False)
    monkeypatch.delenv("JWT_EXPIRES_SECONDS", raising=False)
    monkeypatch.delenv("PREDEFINED_CATEGORIES_PATH", raising=False)
    _clear_caches()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    try:
        models.Base.metadata.drop_all(bind=engine)
    except Exception:
        pass
    try:
        engine.dispose()
    except Exception:
        pass
    _clear_caches()


@pytest.fixture()
def session(db_env):
    with db_session.get_session() as s:
        yield s


@pytest.fixture()
def client(db_env):
    from fastapi.testclient import TestClient

    from fintrack.app import app

    return TestClient(app)
