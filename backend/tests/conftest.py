# shared fixtures for backend and client tests
# provides mock db, a test user with a live session, httpx test clients and store clients

import re
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from httpx import AsyncClient, ASGITransport

from cbt_tracker.main import app
from cbt_tracker.services.db import get_db
from cbt_tracker.services.auth_service import hash_password, create_access_token
from cbt_tracker.dependencies import get_current_user
from cbt_tracker.client.store import StoreClient
from cbt_tracker.models.user import SessionResponse, SessionUser


# test ids
USER_OID = ObjectId("665f1c2ab1e4a3d9c0a10001")
OTHER_USER_OID = ObjectId("665f1c2ab1e4a3d9c0a10002")
USER_ID = str(USER_OID)
OTHER_USER_ID = str(OTHER_USER_OID)
SESSION_ID = "5e55a0f1c0ffee00000000000000a001"
USER_PASSWORD = "journal123"


# test user documents (as they'd appear from mongodb)

USER_DOC = {
    "_id": USER_OID,
    "email": "jamie@example.com",
    "hashed_password": hash_password(USER_PASSWORD),
    "created_at": "2025-06-01T00:00:00+00:00",
}

OTHER_USER_DOC = {
    "_id": OTHER_USER_OID,
    "email": "robin@example.com",
    "hashed_password": hash_password(USER_PASSWORD),
    "created_at": "2025-05-15T00:00:00+00:00",
}

SESSION_DOC = {
    "_id": ObjectId(),
    "session_id": SESSION_ID,
    "user_id": USER_ID,
    "created_at": "2025-06-10T08:00:00+00:00",
}


# sample data

SAMPLE_ENTRY = {
    "_id": ObjectId("665f1c2ab1e4a3d9c0a20001"),
    "user_id": USER_ID,
    "created_at": "2025-06-10T12:00:00+00:00",
    "situation": "Missed the bus to work",
    "automatic_thought": "The whole day is ruined",
    "emotion": "Frustration",
    "emotion_intensity": 6,
    "cognitive_distortion": "All or nothing thinking",
    "rational_response": "One late start does not decide the day",
    "outcome": "Caught the next bus",
}

SAMPLE_ENTRY_2 = {
    "_id": ObjectId("665f1c2ab1e4a3d9c0a20002"),
    "user_id": USER_ID,
    "created_at": "2025-06-13T12:00:00+00:00",
    "situation": "Friend cancelled dinner",
    "automatic_thought": "They don't want to see me",
    "emotion": "Sadness",
    "emotion_intensity": 4,
    "cognitive_distortion": None,
    "rational_response": "They said they were unwell",
    "outcome": "",
}

OTHER_USER_ENTRY = {
    "_id": ObjectId("665f1c2ab1e4a3d9c0a20003"),
    "user_id": OTHER_USER_ID,
    "created_at": "2025-06-11T12:00:00+00:00",
    "situation": "Exam results",
    "automatic_thought": "I'm not smart enough",
    "emotion": "Shame",
    "emotion_intensity": 9,
    "cognitive_distortion": "Labeling",
    "rational_response": "I passed most modules",
    "outcome": "",
}

SAMPLE_WORKSHEET = {
    "_id": ObjectId("665f1c2ab1e4a3d9c0a30001"),
    "user_id": USER_ID,
    "type": "weekly-progress",
    "data": {
        "weeklyGoals": ["Walk daily", "Call mum", ""],
        "achievements": "Walked four times",
        "challenges": "Rainy weekend",
        "nextSteps": "Try the gym",
    },
    "created_at": "2025-06-12T09:00:00+00:00",
}

NEW_ENTRY = {
    "situation": "Meeting",
    "automatic_thought": "I'll fail",
    "emotion": "Anxiety",
    "emotion_intensity": 8,
    "cognitive_distortion": "Catastrophizing",
    "rational_response": "I've prepared well",
    "outcome": "",
}


# async cursor mock

class AsyncCursorMock:
    """mock for motor's async cursor: supports async for and chained methods"""

    def __init__(self, data=None):
        self._data = data or []
        self._index = 0

    def sort(self, key, direction=1):
        self._data = sorted(
            self._data,
            key=lambda d: (d.get(key) is None, d.get(key)),
            reverse=direction == -1,
        )
        return self

    def skip(self, n):
        self._data = self._data[n:]
        return self

    def limit(self, n):
        self._data = self._data[:n]
        return self

    def __aiter__(self):
        self._index = 0
        return self

    async def __anext__(self):
        if self._index >= len(self._data):
            raise StopAsyncIteration
        item = self._data[self._index]
        self._index += 1
        return item

    async def to_list(self, length=None):
        if length is not None:
            return self._data[:length]
        return self._data


class MockCollection:
    """mock for a motor collection with async methods. reads hand out copies like motor does"""

    def __init__(self, data=None, unique=()):
        self._data = data or []
        self._unique = unique
        self.inserted = []

    def find(self, query=None, projection=None):
        results = self._data
        if query:
            results = [d for d in results if self._matches(d, query)]
        return AsyncCursorMock([dict(d) for d in results])

    async def find_one(self, query=None, projection=None):
        if not query:
            return dict(self._data[0]) if self._data else None
        for doc in self._data:
            if self._matches(doc, query):
                return dict(doc)
        return None

    async def insert_one(self, doc):
        for field in self._unique:
            if any(d.get(field) == doc.get(field) for d in self._data):
                raise DuplicateKeyError(f"E11000 duplicate key error collection: {field} dup key")
        oid = doc.get("_id", ObjectId())
        doc["_id"] = oid
        self._data.append(doc)
        self.inserted.append(doc)
        result = MagicMock()
        result.inserted_id = oid
        return result

    async def count_documents(self, query=None):
        if not query:
            return len(self._data)
        return len([d for d in self._data if self._matches(d, query)])

    async def update_one(self, query, update, upsert=False):
        result = MagicMock()
        result.matched_count = 0
        result.modified_count = 0
        for doc in self._data:
            if self._matches(doc, query):
                if "$set" in update:
                    doc.update(update["$set"])
                result.matched_count = 1
                result.modified_count = 1
                break
        return result

    async def delete_one(self, query):
        result = MagicMock()
        result.deleted_count = 0
        for i, doc in enumerate(self._data):
            if self._matches(doc, query):
                del self._data[i]
                result.deleted_count = 1
                break
        return result

    async def create_index(self, *args, **kwargs):
        return "mock_index"

    def _matches(self, doc, query):
        """basic mongodb query matching for tests"""
        for key, value in query.items():
            doc_val = doc.get(key)
            if isinstance(value, dict):
                if "$in" in value:
                    if doc_val not in value["$in"]:
                        return False
                elif "$regex" in value:
                    flags = re.IGNORECASE if value.get("$options") == "i" else 0
                    if doc_val is None or not re.search(value["$regex"], str(doc_val), flags):
                        return False
            elif doc_val != value:
                return False
        return True


class MockDatabase:
    """mock database that mimics the Database class"""

    def __init__(self):
        self.users = MockCollection([USER_DOC.copy(), OTHER_USER_DOC.copy()], unique=("email",))
        self.sessions = MockCollection([SESSION_DOC.copy()], unique=("session_id",))
        self.entries = MockCollection([
            SAMPLE_ENTRY.copy(),
            SAMPLE_ENTRY_2.copy(),
            OTHER_USER_ENTRY.copy(),
        ])
        self.worksheets = MockCollection([SAMPLE_WORKSHEET.copy()])

    async def connect(self):
        pass

    async def close(self):
        pass

    async def ensure_indexes(self):
        pass


@pytest.fixture
def mock_db():
    """create a fresh mock database for each test"""
    return MockDatabase()


def _user_dict():
    """return the user dict as get_current_user would return it"""
    doc = USER_DOC.copy()
    doc["id"] = USER_ID
    del doc["_id"]
    doc["session_id"] = SESSION_ID
    return doc


@pytest.fixture
def user_token():
    """jwt access token bound to the test user's live session"""
    return create_access_token({"sub": USER_ID, "sid": SESSION_ID})


@pytest_asyncio.fixture
async def client(mock_db):
    """httpx async test client with the mock db, real token checks"""

    async def override_get_db():
        return mock_db

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def user_client(mock_db):
    """client authenticated as the test user"""

    async def override_get_db():
        return mock_db

    async def override_get_current_user():
        return _user_dict()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def store(client):
    """store client talking to the app in-process, not signed in"""
    return StoreClient(http=client)


@pytest_asyncio.fixture
async def signed_in_store(store):
    """store client signed in as the test user"""
    await store.sign_in(USER_DOC["email"], USER_PASSWORD)
    return store


@pytest.fixture
def fake_session():
    return SessionResponse(
        accessToken="access",
        refreshToken="refresh",
        user=SessionUser(id=USER_ID, email=USER_DOC["email"]),
    )


@pytest.fixture
def fake_store(fake_session):
    """store double for controller tests: every call is an AsyncMock"""
    fake = MagicMock()
    fake.get_session = AsyncMock(return_value=fake_session)
    fake.sign_in = AsyncMock(return_value=fake_session)
    fake.sign_up = AsyncMock(return_value=fake_session)
    fake.sign_out = AsyncMock(return_value=None)
    fake.list = AsyncMock(return_value=[])
    fake.insert = AsyncMock(return_value={})
    fake.update = AsyncMock(return_value={})
    fake.delete = AsyncMock(return_value=None)
    return fake
