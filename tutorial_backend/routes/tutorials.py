from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from ..errors import TutorialValidationError, error_message
from ..logs import OperationLog
from ..services.tutorial_svc import (
    create_tutorial,
    list_tutorials,
    list_published,
    get_tutorial,
    update_tutorial,
    delete_tutorial,
    delete_all_tutorials,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class TutorialIn(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    published: Optional[bool] = None


def _fields(body: TutorialIn | None) -> dict:
    return body.model_dump(exclude_unset=True) if body else {}


def _store_failure(exc: Exception, message: str, status_code: int = 500) -> HTTPException:
    logger.error("%s: %s", message, exc)
    return HTTPException(status_code=status_code, detail=message)


@router.post("/tutorials")
def api_tutorial_create(body: TutorialIn | None = None):
    payload = _fields(body)
    try:
        with OperationLog("CREATE_TUTORIAL", payload=payload) as op:
            return create_tutorial(payload, op)
    except TutorialValidationError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        raise _store_failure(e, error_message(e, "Some error occurred while creating the Tutorial."))


@router.get("/tutorials")
def api_tutorial_list(title: str | None = Query(None)):
    try:
        return list_tutorials(title)
    except Exception as e:
        raise _store_failure(e, error_message(e, "Some error occurred while retrieving tutorials."))


# Registered ahead of /tutorials/{tutorial_id} so "published" is not read as an id
@router.get("/tutorials/published")
def api_tutorial_published():
    try:
        return list_published()
    except Exception as e:
        raise _store_failure(e, error_message(e, "Some error occurred while retrieving tutorials."))


@router.get("/tutorials/{tutorial_id}")
def api_tutorial_get(tutorial_id: str):
    try:
        data = get_tutorial(tutorial_id)
    except Exception as e:
        raise _store_failure(e, f"Error retrieving Tutorial with id={tutorial_id}")
    if data is None:
        raise HTTPException(status_code=404, detail=f"Cannot find Tutorial with id={tutorial_id}.")
    return data


@router.put("/tutorials/{tutorial_id}")
def api_tutorial_update(tutorial_id: str, body: TutorialIn | None = None):
    changes = _fields(body)
    try:
        with OperationLog("UPDATE_TUTORIAL", tutorial_id, payload=changes) as op:
            num = update_tutorial(tutorial_id, changes, op)
            if num != 1:
                op.result = "NOT_FOUND"
    except TutorialValidationError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        raise _store_failure(e, f"Error updating Tutorial with id={tutorial_id}")
    if num == 1:
        return {"message": "Tutorial was updated successfully."}
    raise HTTPException(
        status_code=400,
        detail=f"Cannot update Tutorial with id={tutorial_id}. Maybe Tutorial was not found or req.body is empty!",
    )


@router.delete("/tutorials/{tutorial_id}")
def api_tutorial_delete(tutorial_id: str):
    try:
        with OperationLog("DELETE_TUTORIAL", tutorial_id) as op:
            num = delete_tutorial(tutorial_id, op)
            if num != 1:
                op.result = "NOT_FOUND"
    except Exception as e:
        raise _store_failure(e, f"Could not delete Tutorial with id={tutorial_id}")
    if num == 1:
        return {"message": "Tutorial was deleted successfully!"}
    raise HTTPException(
        status_code=404,
        detail=f"Cannot delete Tutorial with id={tutorial_id}. Maybe Tutorial was not found!",
    )


@router.delete("/tutorials")
def api_tutorial_delete_all():
    try:
        with OperationLog("DELETE_ALL_TUTORIALS", "*") as op:
            nums = delete_all_tutorials(op)
    except Exception as e:
        raise _store_failure(e, error_message(e, "Some error occurred while removing all tutorials."))
    return {"message": f"{nums} Tutorials were deleted successfully!"}
