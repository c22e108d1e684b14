"""
Audit trail for mutating tutorial requests.

An OperationLog is used as a `with` block around one request: the row is
written when the block exits, as OK, as an explicit result such as
NOT_FOUND, or as ERROR with the exception text. Writing the row is
best-effort; a failing audit insert is logged and never replaces the
response of the operation it describes.
"""
from __future__ import annotations

import json
import logging
import sqlite3
import time
import uuid
import datetime as dt
from typing import Any

from .db import get_conn
from .errors import TutorialValidationError

logger = logging.getLogger(__name__)

ENTITY_TYPE = "TUTORIAL"


def _dumps(obj: Any) -> str | None:
    return None if obj is None else json.dumps(obj, ensure_ascii=False)


class OperationLog:

    def __init__(self, action: str, entity_id: Any = None, payload: Any = None, user: str = "anonymous"):
        self.action = action
        self.entity_id = None if entity_id is None else str(entity_id)
        self.payload = payload
        self.user = user
        self.request_id = str(uuid.uuid4())
        self.before = None
        self.after = None
        self.result: str | None = None
        self._start = time.perf_counter()

    def __enter__(self) -> "OperationLog":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is None:
            self.record(self.result or "OK")
        elif not isinstance(exc, TutorialValidationError):
            # rejected requests never reached the store
            self.record("ERROR", str(exc) or exc_type.__name__)
        return False

    def record(self, result: str, err: str | None = None) -> bool:
        rec = {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "user": self.user,
            "action": self.action,
            "entity_type": ENTITY_TYPE,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "before_json": _dumps(self.before),
            "after_json": _dumps(self.after),
            "payload_json": _dumps(self.payload),
            "result": result,
            "err_msg": err,
            "latency_ms": int((time.perf_counter() - self._start) * 1000),
        }
        try:
            with get_conn() as conn:
                conn.execute(
                    """INSERT INTO operation_log
                    (ts,user,action,entity_type,entity_id,request_id,before_json,after_json,payload_json,result,err_msg,latency_ms)
                    VALUES(:ts,:user,:action,:entity_type,:entity_id,:request_id,:before_json,:after_json,:payload_json,:result,:err_msg,:latency_ms)""",
                    rec,
                )
        except sqlite3.Error:
            logger.exception("operation_log write failed for %s (request %s)", self.action, self.request_id)
            return False
        return True


def search_operations(
    action: str | None = None,
    entity_id: str | None = None,
    result: str | None = None,
    q: str | None = None,
    page: int = 1,
    size: int = 20,
) -> tuple[int, list[dict[str, Any]]]:
    """Newest-first slice of the tutorial audit trail plus the total match count."""
    where = ["entity_type = :entity_type"]
    params: dict[str, Any] = {"entity_type": ENTITY_TYPE}
    if action:
        where.append("action = :action")
        params["action"] = action
    if entity_id:
        where.append("entity_id = :entity_id")
        params["entity_id"] = entity_id
    if result:
        where.append("result = :result")
        params["result"] = result
    if q:
        where.append("(payload_json LIKE :q OR before_json LIKE :q OR after_json LIKE :q)")
        params["q"] = f"%{q}%"
    page, size = max(page, 1), max(size, 1)
    wh = " WHERE " + " AND ".join(where)
    with get_conn() as conn:
        total = conn.execute(f"SELECT COUNT(1) AS cnt FROM operation_log{wh}", params).fetchone()["cnt"]
        rows = conn.execute(
            f"SELECT * FROM operation_log{wh} ORDER BY id DESC LIMIT :limit OFFSET :offset",
            {**params, "limit": size, "offset": (page - 1) * size},
        ).fetchall()
    return total, [dict(r) for r in rows]
