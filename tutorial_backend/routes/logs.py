from __future__ import annotations

from fastapi import APIRouter, Query

from ..logs import search_operations

router = APIRouter()


@router.get("/logs/search")
def api_logs_search(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    action: str | None = None,
    entity_id: str | None = None,
    result: str | None = None,
    query: str | None = None,
):
    total, items = search_operations(action=action, entity_id=entity_id, result=result, q=query, page=page, size=size)
    return {"total": total, "items": items}
