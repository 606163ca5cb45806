"""This module contains the controllers for the authentication app."""

import typing as t

import structlog
from ninja_extra import api_controller, route
from ninja_jwt.controller import TokenObtainPairController
from ninja_jwt.schema import (
    TokenObtainPairInputSchema,
    TokenObtainPairOutputSchema,
    TokenRefreshInputSchema,
    TokenRefreshOutputSchema,
)

from accounts import schema
from accounts.models import HuddleUser
from common.authentication import HuddleJWTAuth
from common.throttling import AuthThrottle

logger = structlog.get_logger(__name__)


@api_controller("/auth", tags=["Auth"], throttle=AuthThrottle())
class AuthController(TokenObtainPairController):
    @route.post("/token/pair", response=TokenObtainPairOutputSchema, url_name="token_obtain_pair")
    def obtain_token(self, user_token: TokenObtainPairInputSchema) -> TokenObtainPairOutputSchema:
        """Authenticate with username and password to obtain JWT access/refresh tokens.

        The access token is sent as `Authorization: Bearer <token>` on the HTTP API and as
        the `token` query parameter when opening the realtime connection at `/ws`.
        """
        user = t.cast(HuddleUser, user_token._user)
        logger.info("token_obtained", user_id=str(user.pk))
        return t.cast(TokenObtainPairOutputSchema, user_token.to_response_schema())  # type: ignore[no-untyped-call]

    @route.post("/token/refresh", response=TokenRefreshOutputSchema, url_name="token_refresh")
    def refresh_token(self, refresh_token: TokenRefreshInputSchema) -> TokenRefreshOutputSchema:
        """Exchange a refresh token for a new access token."""
        return t.cast(TokenRefreshOutputSchema, refresh_token.to_response_schema())  # type: ignore[no-untyped-call]

    @route.get("/user", response=schema.HuddleUserSchema, url_name="current_user", auth=HuddleJWTAuth())
    def current_user(self) -> HuddleUser:
        """Retrieve the authenticated user's profile."""
        return t.cast(HuddleUser, self.context.request.user)  # type: ignore[union-attr]
