from __future__ import annotations

from typing import Any, Iterable

from ..db import get_conn
from ..errors import TutorialValidationError
from ..logs import OperationLog
from ..repository import tutorial_repo


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def validate_request(body: dict[str, Any], fields: Iterable[str]):
    """Raise on the first required field that is missing or empty."""
    for field in fields:
        if _is_empty(body.get(field)):
            raise TutorialValidationError(f"{field} can not be empty!")


def create_tutorial(body: dict[str, Any], op: OperationLog) -> dict[str, Any]:
    validate_request(body, ["title"])
    tutorial = {
        "title": body["title"],
        "description": body.get("description"),
        "published": bool(body.get("published") or False),
    }
    with get_conn() as conn:
        data = tutorial_repo.create(conn, tutorial)
        conn.commit()
    op.entity_id = str(data["id"])
    op.after = data
    return data


def list_tutorials(title: str | None = None) -> list[dict[str, Any]]:
    with get_conn() as conn:
        return tutorial_repo.find_all(conn, title_contains=title or None)


def list_published() -> list[dict[str, Any]]:
    with get_conn() as conn:
        return tutorial_repo.find_all(conn, published=True)


def get_tutorial(tutorial_id: Any) -> dict[str, Any] | None:
    with get_conn() as conn:
        return tutorial_repo.find_by_pk(conn, tutorial_id)


def update_tutorial(tutorial_id: Any, changes: dict[str, Any], op: OperationLog) -> int:
    """
    Apply a partial update. Returns the number of rows touched (0 or 1).
    A present-but-empty title is rejected so no record ever loses its title;
    an explicit null for published leaves the stored flag alone.
    """
    changes = dict(changes)
    if "title" in changes:
        validate_request(changes, ["title"])
    if changes.get("published", False) is None:
        changes.pop("published")
    with get_conn() as conn:
        op.before = tutorial_repo.find_by_pk(conn, tutorial_id)
        num = tutorial_repo.update(conn, tutorial_id, changes)
        conn.commit()
        if num:
            op.after = tutorial_repo.find_by_pk(conn, tutorial_id)
    return num


def delete_tutorial(tutorial_id: Any, op: OperationLog) -> int:
    with get_conn() as conn:
        op.before = tutorial_repo.find_by_pk(conn, tutorial_id)
        num = tutorial_repo.destroy(conn, tutorial_id)
        conn.commit()
    return num


def delete_all_tutorials(op: OperationLog) -> int:
    with get_conn() as conn:
        num = tutorial_repo.destroy(conn)
        conn.commit()
    op.after = {"deleted": num}
    return num
