# entries router: crud for the signed-in user's mood entries
# rows are scoped to their owner, ids are mongodb objectids

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError

from cbt_tracker.models.entry import MoodEntry, MoodEntryCreate, MoodEntryUpdate
from cbt_tracker.services.db import Database, get_db
from cbt_tracker.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/entries", tags=["entries"])

ORDERABLE_FIELDS = ("created_at", "emotion_intensity", "emotion")


def _doc_to_entry(doc: dict) -> MoodEntry:
    """convert a mongodb entry document to the response model"""
    return MoodEntry(
        id=str(doc["_id"]),
        created_at=doc["created_at"],
        situation=doc.get("situation", ""),
        automatic_thought=doc.get("automatic_thought", ""),
        emotion=doc.get("emotion", ""),
        emotion_intensity=doc.get("emotion_intensity", 5),
        cognitive_distortion=doc.get("cognitive_distortion"),
        rational_response=doc.get("rational_response", ""),
        outcome=doc.get("outcome") or "",
    )


def _owned(entry_id: str, user_id: str) -> Optional[dict]:
    """query for one entry of this user, none if the id is malformed"""
    try:
        return {"_id": ObjectId(entry_id), "user_id": user_id}
    except InvalidId:
        return None


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Entry not found",
    )


@router.get("", response_model=list[MoodEntry])
async def list_entries(
    order_by: str = Query("created_at", alias="orderBy"),
    ascending: bool = Query(True),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """all entries of the current user in the requested order"""

    if order_by not in ORDERABLE_FIELDS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Cannot order by {order_by}",
        )

    cursor = db.entries.find({"user_id": current_user["id"]}).sort(order_by, 1 if ascending else -1)
    entries = []
    async for doc in cursor:
        entries.append(_doc_to_entry(doc))
    return entries


@router.post("", response_model=MoodEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(
    body: MoodEntryCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """store a new entry, the store assigns id and created_at"""

    doc = body.model_dump(mode="json")
    doc["user_id"] = current_user["id"]
    doc["created_at"] = datetime.now(timezone.utc).isoformat()

    try:
        result = await db.entries.insert_one(doc)
    except DuplicateKeyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    doc["_id"] = result.inserted_id
    logger.info(f"Entry created: {result.inserted_id} by user {current_user['id']}")
    return _doc_to_entry(doc)


@router.patch("/{entry_id}", response_model=MoodEntry)
async def update_entry(
    entry_id: str,
    body: MoodEntryUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """write only the fields present in the request"""

    update_fields = body.model_dump(mode="json", exclude_unset=True)
    if not update_fields:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="No fields to update",
        )

    query = _owned(entry_id, current_user["id"])
    if query is None:
        raise _not_found()

    try:
        result = await db.entries.update_one(query, {"$set": update_fields})
    except DuplicateKeyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    if result.matched_count == 0:
        raise _not_found()

    updated = await db.entries.find_one(query)
    logger.info(f"Entry updated: {entry_id} ({', '.join(update_fields)})")
    return _doc_to_entry(updated)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: str,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """hard delete one entry of the current user"""

    query = _owned(entry_id, current_user["id"])
    if query is None:
        raise _not_found()

    result = await db.entries.delete_one(query)
    if result.deleted_count == 0:
        raise _not_found()

    logger.info(f"Entry deleted: {entry_id} by user {current_user['id']}")
