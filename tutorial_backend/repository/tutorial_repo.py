from __future__ import annotations

from sqlite3 import Connection, Row
from typing import Any, Optional

COLUMNS = ("title", "description", "published")

# SQLite INTEGER PRIMARY KEY is a signed 64-bit value
_MIN_KEY, _MAX_KEY = -(2 ** 63), 2 ** 63 - 1


def _to_key(value: Any) -> Optional[int]:
    """Primary keys arrive as path text; anything non-integral matches no row."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        key = value
    else:
        try:
            key = int(str(value).strip())
        except (TypeError, ValueError):
            return None
    return key if _MIN_KEY <= key <= _MAX_KEY else None


def to_record(row: Row) -> dict[str, Any]:
    return {
        "id": row["id"],
        "title": row["title"],
        "description": row["description"],
        "published": bool(row["published"]),
    }


def _db_values(fields: dict[str, Any]) -> dict[str, Any]:
    out = {k: v for k, v in fields.items() if k in COLUMNS}
    if "published" in out:
        out["published"] = 1 if out["published"] else 0
    return out


def create(conn: Connection, fields: dict[str, Any]) -> dict[str, Any]:
    values = _db_values(fields)
    cols = list(values.keys())
    cur = conn.execute(
        "INSERT INTO tutorial({}) VALUES({})".format(",".join(cols), ",".join(["?"] * len(cols))),
        [values[c] for c in cols],
    )
    row = conn.execute("SELECT * FROM tutorial WHERE id=?", (cur.lastrowid,)).fetchone()
    return to_record(row)


def find_all(conn: Connection, title_contains: Optional[str] = None, published: Optional[bool] = None) -> list[dict[str, Any]]:
    sql = "SELECT id, title, description, published FROM tutorial"
    where = []
    params: list[object] = []
    if title_contains:
        # instr() keeps the match case-sensitive, unlike LIKE
        where.append("instr(title, ?) > 0")
        params.append(title_contains)
    if published is not None:
        where.append("published = ?")
        params.append(1 if published else 0)
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY id"
    return [to_record(r) for r in conn.execute(sql, params).fetchall()]


def find_by_pk(conn: Connection, tutorial_id: Any) -> Optional[dict[str, Any]]:
    key = _to_key(tutorial_id)
    if key is None:
        return None
    row = conn.execute(
        "SELECT id, title, description, published FROM tutorial WHERE id=?", (key,)
    ).fetchone()
    return to_record(row) if row else None


def update(conn: Connection, tutorial_id: Any, fields: dict[str, Any]) -> int:
    key = _to_key(tutorial_id)
    values = _db_values(fields)
    if key is None or not values:
        return 0
    assignments = ", ".join(f"{c}=?" for c in values)
    cur = conn.execute(
        f"UPDATE tutorial SET {assignments} WHERE id=?",
        [*values.values(), key],
    )
    return cur.rowcount


def destroy(conn: Connection, tutorial_id: Any = None) -> int:
    """Delete one row by id, or every row when no id is given."""
    if tutorial_id is None:
        # WHERE clause keeps SQLite off the truncate path so rowcount stays exact
        cur = conn.execute("DELETE FROM tutorial WHERE 1=1")
        return cur.rowcount
    key = _to_key(tutorial_id)
    if key is None:
        return 0
    cur = conn.execute("DELETE FROM tutorial WHERE id=?", (key,))
    return cur.rowcount
