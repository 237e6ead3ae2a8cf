"""
Session context
Holds the bearer token and company for the signed-in user and owns the single
logout channel. Passed by reference to the backend client at construction.
"""

import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

LogoutListener = Callable[[str], None]


class SessionContext:
    """Authenticated session shared by every API call of one user"""

    def __init__(self, token: Optional[str], company_id: Optional[str], user: Optional[dict] = None):
        self.token = token
        self.company_id = company_id
        self.user = user or {}
        self._listeners: List[LogoutListener] = []
        self._logged_out = False

    @property
    def is_active(self) -> bool:
        return bool(self.token) and not self._logged_out

    def auth_headers(self) -> dict[str, str]:
        """Build request headers for the current session"""
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def on_logout(self, listener: LogoutListener) -> Callable[[], None]:
        """Register a logout listener; returns a function that removes it"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def force_logout(self, reason: str = "Session expired. Logging out...") -> bool:
        """
        Terminate the session and notify listeners.

        Idempotent: only the first call clears state and notifies, so several
        in-flight requests failing together produce a single logout.

        Returns:
            True if this call performed the logout
        """
        if self._logged_out:
            logger.debug("Session already terminated, ignoring repeated logout")
            return False

        self._logged_out = True
        self.token = None
        self.company_id = None
        self.user = {}
        logger.warning(f"⚠️ Forced logout: {reason}")

        for listener in list(self._listeners):
            try:
                listener(reason)
            except Exception as e:
                logger.error(f"❌ Logout listener failed: {e}")
        return True
