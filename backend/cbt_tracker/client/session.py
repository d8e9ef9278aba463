# session guard: gates every view on a live session
# a missing session redirects to login, there is no retry

import logging
from typing import Optional

from pydantic import BaseModel

from cbt_tracker.client.errors import TrackerError

logger = logging.getLogger(__name__)

LOGIN_ROUTE = "/auth/login"
SIGNUP_ROUTE = "/auth/signup"
DASHBOARD_ROUTE = "/dashboard"
WORKSHEETS_ROUTE = "/worksheets"


class GuardResult(BaseModel):
    allowed: bool
    user_email: Optional[str] = None
    redirect_to: Optional[str] = None


class SessionGuard:
    def __init__(self, store, login_route: str = LOGIN_ROUTE):
        self.store = store
        self.login_route = login_route

    async def check(self) -> GuardResult:
        """query the session once. any failure counts as no session."""
        try:
            session = await self.store.get_session()
        except TrackerError as e:
            logger.warning(f"Session check failed: {e}")
            session = None

        if session is None:
            return GuardResult(allowed=False, redirect_to=self.login_route)
        return GuardResult(allowed=True, user_email=session.user.email)


class ViewState(BaseModel):
    """fields every guarded view carries"""
    checking: bool = True
    user_email: Optional[str] = None
    redirect_to: Optional[str] = None


class GuardedView:
    """base for view controllers whose content needs a session.

    subclasses set `state` to a ViewState subclass and may override
    `on_activate` to load their data once the guard lets them through.
    """

    state: ViewState

    def __init__(self, store, guard: Optional[SessionGuard] = None):
        self.store = store
        self.guard = guard or SessionGuard(store)

    def _update(self, **fields):
        self.state = self.state.model_copy(update=fields)

    async def activate(self) -> bool:
        result = await self.guard.check()
        if not result.allowed:
            self._update(redirect_to=result.redirect_to)
            return False
        self._update(user_email=result.user_email, checking=False)
        await self.on_activate()
        return True

    async def on_activate(self):
        pass

    async def sign_out(self):
        try:
            await self.store.sign_out()
        except TrackerError as e:
            logger.warning(f"Sign out did not reach the server: {e}")
        self.state = type(self.state)(checking=False, redirect_to=LOGIN_ROUTE)
