"""
AMEE API Session Storage

Keeps the auth token handed out by POST /auth together with the time it
stops being valid.
"""

import time
from typing import Optional


class MemorySession:
    """
    In-memory session storage (default).

    Not thread-safe: one client instance owns one session.
    """

    def __init__(self) -> None:
        self._token: Optional[str] = None
        self._expires_at: float = 0

    def get_token(self) -> Optional[str]:
        """Get the stored auth token."""
        return self._token

    def get_expires_at(self) -> float:
        """Get session expiration timestamp."""
        return self._expires_at

    def set_token(self, token: str, expires_in: int) -> None:
        """Store token with expiration."""
        self._token = token
        self._expires_at = time.time() + expires_in

    def touch(self, expires_in: int) -> None:
        """Extend the session after a successful request."""
        self._expires_at = time.time() + expires_in

    def clear(self) -> None:
        """Clear token and expiration."""
        self._token = None
        self._expires_at = 0

    def is_active(self) -> bool:
        """Check if there is a token that has not expired yet."""
        return bool(self._token) and self._expires_at > 0 and self._expires_at > time.time()
