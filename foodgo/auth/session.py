from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import secrets
from typing import Dict, Optional

from fastapi import Header, Request

from foodgo.core.exceptions.app_exception import AppHttpException
from foodgo.models.cart.cart import Cart


@dataclass
class CustomerSession:
    token: str
    user_id: str
    first_name: str = ""
    acquired_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    active: bool = True
    cart: Cart = field(default_factory=Cart)


class SessionRegistry:
    """In-memory customer sessions keyed by token; each session owns one cart."""

    def __init__(self):
        self._sessions: Dict[str, CustomerSession] = {}

    def login(self, user_id: str, first_name: str = "") -> CustomerSession:
        session = CustomerSession(token=secrets.token_urlsafe(24), user_id=user_id, first_name=first_name)
        self._sessions[session.token] = session
        logging.info(f"SYSTEM >>> Session opened for user {user_id}")
        return session

    def logout(self, token: str) -> bool:
        session = self._sessions.pop(token, None)
        if session is None:
            return False
        session.active = False
        session.cart.clear_cart()
        logging.info(f"SYSTEM >>> Session closed for user {session.user_id}")
        return True

    def get(self, token: Optional[str]) -> Optional[CustomerSession]:
        if not token:
            return None
        session = self._sessions.get(token)
        if session is None or not session.active:
            return None
        return session


def get_customer_session(
    request: Request,
    x_session_token: Optional[str] = Header(default=None),
) -> CustomerSession:
    session = request.app.state.services.sessions.get(x_session_token)
    if session is None:
        raise AppHttpException(
            status_code=401,
            detail="Please login to continue",
            solution="Open a session with POST /session and send its token in X-Session-Token.",
        )
    return session
