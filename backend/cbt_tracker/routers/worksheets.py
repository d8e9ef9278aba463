# worksheets router: append-only worksheet submissions
# submissions are never updated or deleted once stored

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from pymongo.errors import DuplicateKeyError

from cbt_tracker.models.worksheet import Worksheet, WorksheetCreate, WorksheetKind
from cbt_tracker.services.db import Database, get_db
from cbt_tracker.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/worksheets", tags=["worksheets"])


def _doc_to_worksheet(doc: dict) -> Worksheet:
    return Worksheet(
        id=str(doc["_id"]),
        user_id=doc["user_id"],
        type=doc["type"],
        data=doc.get("data", {}),
        created_at=doc["created_at"],
    )


@router.get("", response_model=list[Worksheet])
async def list_worksheets(
    kind: Optional[WorksheetKind] = Query(None, alias="type"),
    order_by: str = Query("created_at", alias="orderBy"),
    ascending: bool = Query(True),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """submissions of the current user, optionally of one worksheet type"""

    if order_by not in ("created_at", "type"):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Cannot order by {order_by}",
        )

    query = {"user_id": current_user["id"]}
    if kind is not None:
        query["type"] = kind.value

    cursor = db.worksheets.find(query).sort(order_by, 1 if ascending else -1)
    worksheets = []
    async for doc in cursor:
        worksheets.append(_doc_to_worksheet(doc))
    return worksheets


@router.post("", response_model=Worksheet, status_code=status.HTTP_201_CREATED)
async def submit_worksheet(
    body: WorksheetCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """store a worksheet submission for the current user"""

    doc = {
        "user_id": current_user["id"],
        "type": body.type.value,
        "data": body.data,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }

    try:
        result = await db.worksheets.insert_one(doc)
    except DuplicateKeyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    doc["_id"] = result.inserted_id
    logger.info(f"Worksheet submitted: {body.type.value} by user {current_user['id']}")
    return _doc_to_worksheet(doc)
