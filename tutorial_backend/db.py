from __future__ import annotations

# tutorial_backend/db.py
import sqlite3
from contextlib import contextmanager
from typing import Iterator
import os
import yaml

# DB path resolution order:
# 1) env TUTORIAL_DB_PATH (highest priority)
# 2) config.yaml test_db_path (when running under tests)
# 3) config.yaml db_path (production default)
# 4) fallback: tutorials.db in the project root
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "tutorials.db")
SCHEMA_PATH = os.path.join(_PROJECT_ROOT, "schema.sql")

DEFAULT_CORS_ORIGINS = [
    "http://localhost:8081",
    "http://127.0.0.1:8081",
]


def read_config_yaml() -> dict:
    cfg_path = os.environ.get("TUTORIAL_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return cfg if isinstance(cfg, dict) else {}


def get_db_path() -> str:
    env_path = os.environ.get("TUTORIAL_DB_PATH")
    cfg = read_config_yaml()
    cfg_db = cfg.get("db_path")
    cfg_test = cfg.get("test_db_path")
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and isinstance(cfg_test, str) and cfg_test.strip():
        path = cfg_test.strip()
    elif isinstance(cfg_db, str) and cfg_db.strip():
        path = cfg_db.strip()
    else:
        path = _ROOT_DB

    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


DEFAULT_DB_TIMEOUT = 5.0


def get_db_timeout() -> float:
    """Seconds a connection waits on a locked database before raising."""
    raw = os.environ.get("TUTORIAL_DB_TIMEOUT")
    if raw is None:
        raw = read_config_yaml().get("db_timeout")
    try:
        return max(float(raw), 0.0) if raw is not None else DEFAULT_DB_TIMEOUT
    except (TypeError, ValueError):
        return DEFAULT_DB_TIMEOUT


def get_cors_origins() -> list[str]:
    origins = read_config_yaml().get("cors_origins")
    if isinstance(origins, list) and origins:
        return [str(o) for o in origins]
    return list(DEFAULT_CORS_ORIGINS)


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Open a SQLite connection. An explicit db_path wins over get_db_path().
    Rows come back as sqlite3.Row.
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(
        path,
        timeout=get_db_timeout(),
        check_same_thread=False,
        isolation_level=None,
    )
    try:
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


def ensure_schema(db_path: str | None = None):
    with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
        ddl = f.read()
    with get_conn(db_path) as conn:
        conn.executescript(ddl)
        conn.commit()
