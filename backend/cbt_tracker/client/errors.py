# client-side error taxonomy
# every one of these ends up as a message in the view state, none is retried

from typing import Optional


class TrackerError(Exception):
    """base for errors shown to the user"""


class AuthError(TrackerError):
    """bad credentials, or a session that expired or was signed out"""


class StoreError(TrackerError):
    """network failure, permission denial or a constraint the store rejected"""


class ValidationError(TrackerError):
    """a draft that cannot be sent: caught before any store call"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
