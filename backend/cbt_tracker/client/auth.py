# login and sign-up form controller

import logging
from typing import Optional

from pydantic import BaseModel

from cbt_tracker.client.errors import TrackerError
from cbt_tracker.client.session import DASHBOARD_ROUTE

logger = logging.getLogger(__name__)


class AuthFormState(BaseModel):
    email: str = ""
    password: str = ""
    error: Optional[str] = None
    loading: bool = False
    redirect_to: Optional[str] = None


class AuthFormController:
    def __init__(self, store):
        self.store = store
        self.state = AuthFormState()

    def _update(self, **fields):
        self.state = self.state.model_copy(update=fields)

    def set_email(self, email: str):
        self._update(email=email)

    def set_password(self, password: str):
        self._update(password=password)

    async def sign_in(self) -> bool:
        return await self._submit(self.store.sign_in)

    async def sign_up(self) -> bool:
        return await self._submit(self.store.sign_up)

    async def _submit(self, action) -> bool:
        if self.state.loading:
            return False
        if not self.state.email or not self.state.password:
            self._update(error="Email and password are required")
            return False

        self._update(loading=True, error=None)
        try:
            await action(self.state.email, self.state.password)
        except TrackerError as e:
            self._update(loading=False, error=str(e))
            return False

        self._update(loading=False, redirect_to=DASHBOARD_ROUTE)
        return True
