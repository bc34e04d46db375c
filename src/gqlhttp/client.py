"""Async GraphQL-over-HTTP client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import MutableMapping
from types import TracebackType
from typing import Any, TypeVar

import httpx

from gqlhttp.config import ClientConfig
from gqlhttp.encoding import JSON_ACCEPT, JSON_CONTENT_TYPE, encode_json_body
from gqlhttp.envelope import decode_response
from gqlhttp.exceptions import RequestTimeoutError, TransportError
from gqlhttp.multipart import encode_multipart
from gqlhttp.request import Request

_LOG = logging.getLogger(__name__)

T = TypeVar("T")


class GraphQLClient:
    """Executes :class:`~gqlhttp.request.Request` objects against one endpoint.

    Requests without files are posted as a JSON body; requests with files are
    posted as ``multipart/form-data`` following the GraphQL multipart request
    convention. Each call performs exactly one HTTP exchange.

    The client is safe to share between concurrent tasks. When no
    ``http_client`` is given, one is built from the config and closed by
    :meth:`aclose` (or ``async with``); a caller-supplied client is left open.

    Example:
        async with GraphQLClient("https://api.example.com/graphql") as client:
            req = Request("query($id: ID!) { user(id: $id) { name } }")
            req.set_variable("id", "42")
            data = await client.execute(req)
    """

    def __init__(
        self,
        config: ClientConfig | str,
        *,
        http_client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if isinstance(config, str):
            config = ClientConfig(endpoint=config)
        self._config = config
        self._logger = logger or _LOG
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            headers=config.headers,
            limits=httpx.Limits(
                max_connections=config.max_connections,
                max_keepalive_connections=config.max_keepalive_connections,
            ),
            timeout=httpx.Timeout(config.timeout),
        )

    @property
    def endpoint(self) -> str:
        return self._config.endpoint

    @property
    def close_connection(self) -> bool:
        return self._config.close_connection

    async def __aenter__(self) -> GraphQLClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()

    async def execute(
        self,
        request: Request,
        response_model: type[T] | None = None,
        *,
        timeout: float | None = None,
    ) -> T | Any:
        """Execute *request* and return the decoded ``data``.

        Args:
            request: The operation to send. It is not modified.
            response_model: Type ``data`` is validated into (a pydantic model,
                dataclass, ``TypedDict``...). ``None`` returns plain JSON.
            timeout: Deadline in seconds for the whole exchange.

        Returns:
            The decoded ``data`` payload.

        Raises:
            EncodeError: The request body could not be serialized.
            FileTransferError: A file's content could not be read.
            RequestTimeoutError: The deadline expired.
            TransportError: The HTTP exchange failed.
            NonSuccessStatusError: Non-200 response without a GraphQL envelope.
            MalformedResponseError: 200 response without a valid envelope.
            GraphQLOperationError: The server reported GraphQL errors.
        """
        if request.files:
            body, content_type = self._encode_multipart(request)
        else:
            body, content_type = self._encode_json(request)

        headers = self._build_headers(request, content_type)
        self._trace(">> headers: %s", headers)

        status_code, payload = await self._send(body, headers, timeout)
        self._trace("<< %s", payload.decode("utf-8", errors="replace"))

        return decode_response(status_code, payload, response_model)

    async def execute_into(
        self,
        request: Request,
        destination: MutableMapping[str, Any],
        *,
        timeout: float | None = None,
    ) -> MutableMapping[str, Any]:
        """Execute *request* and merge the returned ``data`` object into *destination*."""
        data = await self.execute(request, dict[str, Any], timeout=timeout)
        if data is not None:
            destination.update(data)
        return destination

    def _encode_json(self, request: Request) -> tuple[bytes, str]:
        body = encode_json_body(request)
        self._trace(">> variables: %s", request.variables)
        self._trace(">> query: %s", request.document)
        return body, JSON_CONTENT_TYPE

    def _encode_multipart(self, request: Request) -> tuple[bytes, str]:
        encoded = encode_multipart(request, self.endpoint)
        self._trace(">> operations: %s", encoded.operations)
        self._trace(">> map: %s", encoded.map)
        self._trace(">> files: %d", len(request.files))
        self._trace(">> query: %s", request.document)
        return encoded.content, encoded.content_type

    def _build_headers(self, request: Request, content_type: str) -> httpx.Headers:
        defaults = {"Content-Type": content_type, "Accept": JSON_ACCEPT}
        if self.close_connection:
            defaults["Connection"] = "close"
        overridden = {key.lower() for key in request.headers.keys()}
        items: list[tuple[Any, Any]] = [(key, value) for key, value in defaults.items() if key.lower() not in overridden]
        items.extend(request.headers.raw)
        return httpx.Headers(items)

    async def _send(self, body: bytes, headers: httpx.Headers, timeout: float | None) -> tuple[int, bytes]:
        try:
            async with asyncio.timeout(timeout):
                async with self._http_client.stream("POST", self.endpoint, content=body, headers=headers) as response:
                    payload = await response.aread()
        except TimeoutError as exc:
            raise RequestTimeoutError(f"graphql: request timed out after {timeout}s", timeout=timeout) from exc
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"graphql: request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"graphql: {exc}") from exc
        return response.status_code, payload

    def _trace(self, message: str, *args: Any) -> None:
        if self._config.debug:
            self._logger.debug(message, *args)
