"""
Who is the current actor?

Two interchangeable strategies, picked by the web layer: the login kept in the server-side session,
or a signed token kept in a cookie. The services never see either; they receive a RequestContext.
"""

import base64
import hashlib
import hmac
import json
from typing import Any, MutableMapping, Optional, Protocol

from kanban.core.config import Settings
from kanban.core.context import RequestContext
from kanban.core.exceptions import UnauthorizedError
from kanban.core.models import Login


class UserConnection(Protocol):
    def connect(self, login: Login) -> None: ...

    def is_connected(self) -> bool: ...

    def disconnect(self) -> None: ...

    def current_actor(self) -> Optional[Login]: ...


class SessionUserConnection:
    """Login stored as-is in the (server-side) session mapping."""

    SESSION_KEY = "_connected_user"

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self.session = session

    def connect(self, login: Login) -> None:
        self.session[self.SESSION_KEY] = login

    def is_connected(self) -> bool:
        return self.SESSION_KEY in self.session

    def disconnect(self) -> None:
        self.session.pop(self.SESSION_KEY, None)

    def current_actor(self) -> Optional[Login]:
        return self.session.get(self.SESSION_KEY)


class TokenUserConnection:
    """Login stored in an HMAC-SHA256 signed token, kept in a cookie mapping."""

    COOKIE_NAME = "auth_token"

    def __init__(self, cookies: MutableMapping[str, str], secret: str) -> None:
        self.cookies = cookies
        self.secret = secret

    @classmethod
    def from_settings(cls, cookies: MutableMapping[str, str], settings: Settings) -> "TokenUserConnection":
        return cls(cookies, settings.token_secret)

    def connect(self, login: Login) -> None:
        self.cookies[self.COOKIE_NAME] = self.encode({"login": login})

    def is_connected(self) -> bool:
        return self.current_actor() is not None

    def disconnect(self) -> None:
        self.cookies.pop(self.COOKIE_NAME, None)

    def current_actor(self) -> Optional[Login]:
        token = self.cookies.get(self.COOKIE_NAME)
        if not token:
            return None
        payload = self.decode(token)
        if not isinstance(payload, dict):
            return None
        return payload.get("login")

    def encode(self, payload: dict[str, Any]) -> str:
        body = base64.urlsafe_b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")
        return f"{body}.{self._sign(body)}"

    def decode(self, token: str) -> Optional[dict[str, Any]]:
        """Payload of a token, or None if it was not signed with our secret."""
        if "." not in token:
            return None
        body, signature = token.rsplit(".", 1)
        if not hmac.compare_digest(signature.encode("utf-8"), self._sign(body).encode("utf-8")):
            return None
        try:
            return json.loads(base64.urlsafe_b64decode(body.encode("ascii")))
        except ValueError:
            return None

    def _sign(self, body: str) -> str:
        return hmac.new(self.secret.encode("utf-8"), body.encode("utf-8"), hashlib.sha256).hexdigest()


def context_from(connection: UserConnection) -> RequestContext:
    """Build the request context, refusing anonymous requests."""
    login = connection.current_actor()
    if login is None:
        raise UnauthorizedError("You must be logged in.")
    return RequestContext(actor_login=login)
