# store client: async http wrapper over the backend's session and record routes
# failures are raised with the store's own message, nothing is retried

import logging
from typing import Any, Optional

import httpx

from cbt_tracker.config import settings
from cbt_tracker.models.user import SessionResponse
from cbt_tracker.client.errors import AuthError, StoreError

logger = logging.getLogger(__name__)

ENTRIES = "entries"
WORKSHEETS = "worksheets"

COLLECTION_PATHS = {
    ENTRIES: "/entries",
    WORKSHEETS: "/worksheets",
}


def _error_message(resp: httpx.Response) -> str:
    """pull fastapi's detail out of an error response"""
    try:
        body = resp.json()
    except ValueError:
        body = None

    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, list):
        # request validation errors come back as a list
        return "; ".join(str(item.get("msg", item)) if isinstance(item, dict) else str(item) for item in detail)
    if detail:
        return str(detail)
    return f"Request failed with status {resp.status_code}"


def _collection_path(collection: str) -> str:
    try:
        return COLLECTION_PATHS[collection]
    except KeyError:
        raise ValueError(f"Unknown collection: {collection}")


class StoreClient:
    """authenticated access to the identity routes and the two record collections.

    the session returned by sign-in/sign-up is kept in memory and its access
    token is sent with every record request. no timeout is configured beyond
    httpx's defaults.
    """

    def __init__(self, base_url: Optional[str] = None, http: Optional[httpx.AsyncClient] = None):
        self._http = http or httpx.AsyncClient(base_url=base_url or settings.API_URL)
        self.session: Optional[SessionResponse] = None

    async def aclose(self):
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        auth: bool = True,
        error_cls: type = StoreError,
        **kwargs,
    ) -> httpx.Response:
        headers = {}
        if auth:
            if self.session is None:
                raise AuthError("Not signed in")
            headers["Authorization"] = f"Bearer {self.session.access_token}"

        try:
            resp = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise StoreError(f"Network error: {e}") from e

        if resp.status_code in (401, 403):
            raise AuthError(_error_message(resp))
        if resp.is_error:
            raise error_cls(_error_message(resp))
        return resp

    # identity

    async def sign_in(self, email: str, password: str) -> SessionResponse:
        resp = await self._request(
            "POST", "/auth/login", auth=False, error_cls=AuthError,
            json={"email": email, "password": password},
        )
        self.session = SessionResponse.model_validate(resp.json())
        logger.info(f"Signed in as {self.session.user.email}")
        return self.session

    async def sign_up(self, email: str, password: str) -> SessionResponse:
        resp = await self._request(
            "POST", "/auth/signup", auth=False, error_cls=AuthError,
            json={"email": email, "password": password},
        )
        self.session = SessionResponse.model_validate(resp.json())
        logger.info(f"Signed up as {self.session.user.email}")
        return self.session

    async def sign_out(self):
        """end the session on the server and forget it locally"""
        if self.session is None:
            return
        try:
            await self._request("POST", "/auth/logout")
        except AuthError:
            logger.info("Session had already ended on the server")
        finally:
            self.session = None

    async def get_session(self) -> Optional[SessionResponse]:
        """the current session if the server still accepts it, else none"""
        if self.session is None:
            return None
        try:
            await self._request("GET", "/auth/session")
        except AuthError as e:
            logger.info(f"Stored session rejected: {e}")
            self.session = None
            return None
        return self.session

    # records

    async def insert(self, collection: str, record: dict) -> dict:
        resp = await self._request("POST", _collection_path(collection), json=record)
        return resp.json()

    async def update(self, collection: str, record_id: str, patch: dict) -> dict:
        resp = await self._request("PATCH", f"{_collection_path(collection)}/{record_id}", json=patch)
        return resp.json()

    async def delete(self, collection: str, record_id: str):
        await self._request("DELETE", f"{_collection_path(collection)}/{record_id}")

    async def list(
        self,
        collection: str,
        order_by: str = "created_at",
        ascending: bool = True,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict]:
        params = {"orderBy": order_by, "ascending": "true" if ascending else "false"}
        if filters:
            params.update(filters)
        resp = await self._request("GET", _collection_path(collection), params=params)
        return resp.json()
