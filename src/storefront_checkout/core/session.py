"""
Explicit storefront session context: auth token plus a lazily created guest session id.
"""

import random
import string
import time
from typing import Dict, Optional

_BASE36 = string.digits + string.ascii_lowercase


def generate_guest_session_id() -> str:
    """Guest cart session id, e.g. ``session_1718000000000_k3j9x0a2b``."""
    suffix = "".join(random.choice(_BASE36) for _ in range(9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


class SessionContext:
    """Per-customer session state handed to the cart, checkout and API client."""

    def __init__(self, auth_token: Optional[str] = None, session_id: Optional[str] = None):
        self.auth_token = auth_token
        self._session_id = session_id

    @property
    def session_id(self) -> str:
        if self._session_id is None:
            self._session_id = generate_guest_session_id()
        return self._session_id

    @property
    def is_authenticated(self) -> bool:
        return bool(self.auth_token)

    def set_auth_token(self, token: Optional[str]):
        self.auth_token = token

    def logout(self):
        self.auth_token = None

    def reset_guest_session(self):
        """Drop the guest session id; a fresh one is created on next use."""
        self._session_id = None

    def headers(self, include_auth: bool = False, include_session: bool = False,
                session_id: Optional[str] = None) -> Dict[str, str]:
        headers = {}

        if include_auth and self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"

        if include_session:
            headers["x-session-id"] = session_id or self.session_id

        return headers
