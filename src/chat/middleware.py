"""Authentication for realtime connections.

Browsers cannot set headers on a WebSocket upgrade, so the JWT access token
travels as the `token` query parameter: `/ws?token=<jwt>`.
"""

import typing as t
from urllib.parse import parse_qs

import structlog
from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser
from ninja_jwt.authentication import JWTBaseAuthentication
from ninja_jwt.exceptions import AuthenticationFailed, TokenError

from accounts.models import HuddleUser

logger = structlog.get_logger(__name__)


def extract_token(scope: dict[str, t.Any]) -> str | None:
    """Read the `token` query parameter from an ASGI scope."""
    query_string: str | bytes = scope.get("query_string", b"")
    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")
    token = parse_qs(str(query_string)).get("token", [None])[0]
    return token or None


@database_sync_to_async
def get_user_for_token(token: str) -> HuddleUser:
    """Validate an access token and load its user.

    Raises:
        AuthenticationFailed: If the user is missing or inactive, or the token is invalid.
        TokenError: If the token cannot be decoded.
    """
    jwt_auth = JWTBaseAuthentication()
    validated = jwt_auth.get_validated_token(token)
    return t.cast(HuddleUser, jwt_auth.get_user(validated))


class JWTQueryStringAuthMiddleware(BaseMiddleware):
    """Populate `scope["user"]` from the `token` query parameter.

    Connections without a token are anonymous. A token that fails validation
    sets `scope["auth_error"]`; the consumer refuses such connections.
    """

    async def __call__(self, scope: dict[str, t.Any], receive: t.Any, send: t.Any) -> t.Any:
        """Resolve the user and hand over to the inner application."""
        scope = dict(scope)
        scope["user"] = AnonymousUser()
        scope["auth_error"] = None
        if token := extract_token(scope):
            try:
                scope["user"] = await get_user_for_token(token)
            except (AuthenticationFailed, TokenError) as exc:
                logger.warning("realtime_auth_failed", error=str(exc))
                scope["auth_error"] = str(exc)
        return await super().__call__(scope, receive, send)
