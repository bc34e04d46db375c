"""Shared test fixtures for gqlhttp tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from typing import Any

import httpx
import pytest
import pytest_asyncio

from gqlhttp.client import GraphQLClient
from gqlhttp.config import ClientConfig

ENDPOINT = "https://api.example.com/graphql"

Handler = Callable[[httpx.Request], Any]


@pytest.fixture
def recorded() -> list[httpx.Request]:
    """Requests seen by the mock transport, in arrival order."""
    return []


@pytest.fixture
def parse_multipart() -> Callable[[bytes, str], list[EmailMessage]]:
    """Split a ``multipart/form-data`` body into its parts with the stdlib MIME parser."""

    def parse(body: bytes, content_type: str) -> list[EmailMessage]:
        head = f"Content-Type: {content_type}\r\n\r\n".encode("ascii")
        message = BytesParser(policy=policy.HTTP).parsebytes(head + body)
        assert message.is_multipart()
        assert message.defects == []
        return list(message.iter_parts())

    return parse


@pytest_asyncio.fixture
async def make_client(recorded: list[httpx.Request]) -> AsyncIterator[Callable[..., GraphQLClient]]:
    """Build clients backed by ``httpx.MockTransport`` and close them afterwards."""
    http_clients: list[httpx.AsyncClient] = []

    def factory(handler: Handler, **config: Any) -> GraphQLClient:
        async def recording_handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            response = handler(request)
            if not isinstance(response, httpx.Response):
                response = await response
            return response

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
        http_clients.append(http_client)
        return GraphQLClient(ClientConfig(endpoint=ENDPOINT, **config), http_client=http_client)

    yield factory

    for http_client in http_clients:
        await http_client.aclose()
