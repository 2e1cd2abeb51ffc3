import os
import tempfile
from pathlib import Path
from uuid import uuid4

# Settings are read at import time, so point them at a throwaway database first
_TEST_DB = Path(tempfile.gettempdir()) / f"wallet_score_test_{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite+pysqlite:///{_TEST_DB}"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"
os.environ["RUN_STARTUP_DDL"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from wallet_score.core.metrics import metrics_registry  # noqa: E402
from wallet_score.db.database import Base, SessionLocal, engine  # noqa: E402
from wallet_score.main import app  # noqa: E402


@pytest.fixture(scope="session")
def db_setup():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    engine.dispose()
    _TEST_DB.unlink(missing_ok=True)


@pytest.fixture()
def client(db_setup):
    return TestClient(app)


@pytest.fixture()
def session(db_setup):
    with SessionLocal() as db:
        yield db


@pytest.fixture()
def wallet():
    """A fresh wallet address so tests never share rows."""
    return f"0x{uuid4().hex}"


@pytest.fixture()
def clean_metrics():
    metrics_registry.reset()
    yield
    metrics_registry.reset()
