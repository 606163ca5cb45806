import typing as t

import pytest_asyncio
from channels.testing import WebsocketCommunicator
from ninja_jwt.tokens import RefreshToken

from accounts.models import HuddleUser
from events.tests.conftest import event  # noqa: F401
from huddle.asgi import application

OpenConnection = t.Callable[..., t.Awaitable[WebsocketCommunicator]]


def access_token(user: HuddleUser) -> str:
    return str(RefreshToken.for_user(user).access_token)  # type: ignore[attr-defined]


@pytest_asyncio.fixture
async def open_connection() -> t.AsyncIterator[OpenConnection]:
    """Open realtime connections, optionally authenticated, and close them all afterwards."""
    communicators: list[WebsocketCommunicator] = []

    async def _open(user: HuddleUser | None = None) -> WebsocketCommunicator:
        path = f"/ws?token={access_token(user)}" if user else "/ws"
        communicator = WebsocketCommunicator(application, path, headers=[(b"origin", b"http://localhost")])
        connected, _ = await communicator.connect()
        assert connected
        communicators.append(communicator)
        return communicator

    yield _open

    for communicator in communicators:
        await communicator.disconnect()
