import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "tutorials_test.db"
    # Point the backend at this temp DB
    os.environ["TUTORIAL_DB_PATH"] = str(path)
    from tutorial_backend.db import ensure_schema
    ensure_schema(str(path))
    return str(path)


@pytest.fixture()
def client(tmp_db_path):
    from tutorial_backend.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Safety: only ever wipe the temp DB, never a real one
    assert os.environ.get("TUTORIAL_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in ("tutorial", "operation_log", "sqlite_sequence"):
            try:
                conn.execute(f"DELETE FROM {t}")
            except sqlite3.OperationalError:
                pass
        conn.commit()
    finally:
        conn.close()
    yield
