# auth router: sign-up, sign-in, sign-out, session lookup and refresh
# each sign-in opens a session document; signing out deletes it

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError

from cbt_tracker.models.user import (
    UserCreate,
    UserLogin,
    SessionUser,
    SessionResponse,
    RefreshRequest,
)
from cbt_tracker.services.auth_service import (
    hash_password,
    verify_password,
    new_session_id,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from cbt_tracker.services.db import Database, get_db
from cbt_tracker.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_tokens(user_id: str, email: str, session_id: str) -> SessionResponse:
    claims = {"sub": user_id, "sid": session_id}
    return SessionResponse(
        accessToken=create_access_token(claims),
        refreshToken=create_refresh_token(claims),
        user=SessionUser(id=user_id, email=email),
    )


async def _open_session(user_id: str, email: str, db: Database) -> SessionResponse:
    session_id = new_session_id()
    await db.sessions.insert_one({
        "session_id": session_id,
        "user_id": user_id,
        "created_at": datetime.now(timezone.utc).isoformat(),
    })
    return _issue_tokens(user_id, email, session_id)


@router.post("/signup", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def signup(body: UserCreate, db: Database = Depends(get_db)):
    """register with email and password, returns a signed-in session"""

    existing = await db.users.find_one({"email": body.email})
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already registered",
        )

    try:
        result = await db.users.insert_one({
            "email": body.email,
            "hashed_password": hash_password(body.password),
            "created_at": datetime.now(timezone.utc).isoformat(),
        })
    except DuplicateKeyError:
        # lost a race with another sign-up for the same email
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already registered",
        )
    user_id = str(result.inserted_id)
    logger.info(f"User signed up: {user_id}")

    return await _open_session(user_id, body.email, db)


@router.post("/login", response_model=SessionResponse)
async def login(body: UserLogin, db: Database = Depends(get_db)):
    """sign in with email and password"""

    user = await db.users.find_one({"email": body.email.strip().lower()})
    if not user or not verify_password(body.password, user["hashed_password"]):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid login credentials",
        )

    user_id = str(user["_id"])
    logger.info(f"User signed in: {user_id}")
    return await _open_session(user_id, user["email"], db)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """end the current session: its access and refresh tokens stop working"""
    await db.sessions.delete_one({"session_id": current_user["session_id"]})
    logger.info(f"User signed out: {current_user['id']}")


@router.get("/session", response_model=SessionUser)
async def get_session(current_user: dict = Depends(get_current_user)):
    """the user behind a live session"""
    return SessionUser(id=current_user["id"], email=current_user["email"])


@router.post("/refresh", response_model=SessionResponse)
async def refresh_token(body: RefreshRequest, db: Database = Depends(get_db)):
    """exchange a refresh token for new tokens on the same session"""

    payload = decode_token(body.refresh_token)
    if payload is None or payload.get("type") != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )

    user_id = payload.get("sub")
    session_id = payload.get("sid")
    session = await db.sessions.find_one({"session_id": session_id, "user_id": user_id})
    if not session:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session has ended, please sign in again",
        )

    try:
        user = await db.users.find_one({"_id": ObjectId(user_id)})
    except (InvalidId, TypeError):
        user = None
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return _issue_tokens(user_id, user["email"], session_id)
