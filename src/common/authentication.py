import typing as t

import structlog
from django.http import HttpRequest
from ninja_jwt.authentication import JWTAuth


class HuddleJWTAuth(JWTAuth):
    """JWT authentication that binds the authenticated user to the log context.

    The token's user id is the opaque identity every endpoint works with.

    Usage:
        @route.get("/endpoint", auth=HuddleJWTAuth())
        def my_endpoint(request):
            user = request.user
    """

    def authenticate(self, request: HttpRequest, token: str) -> t.Any:
        """Authenticate the request and bind `user_id` for structured logs.

        Raises:
            AuthenticationFailed: If authentication fails
            InvalidToken: If the token is invalid
        """
        user = super().authenticate(request, token)
        if user is not None:
            structlog.contextvars.bind_contextvars(user_id=str(user.pk))
        return user
