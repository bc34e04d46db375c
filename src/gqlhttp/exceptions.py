"""Custom exception hierarchy for gqlhttp.

All gqlhttp exceptions inherit from :class:`GraphQLClientError`, making it easy
to catch any library error with a single ``except`` clause while still allowing
callers to handle specific failure modes.
"""

from __future__ import annotations

from typing import Any


class GraphQLClientError(Exception):
    """Base exception for all gqlhttp errors."""


class ConfigError(GraphQLClientError):
    """Configuration loading or validation failure."""


class EncodeError(GraphQLClientError):
    """Raised when the outgoing request body cannot be serialized."""


class FileTransferError(GraphQLClientError):
    """Raised when a file content source fails while being copied into the body."""

    def __init__(self, message: str, *, part: str, filename: str) -> None:
        super().__init__(message)
        self.part = part
        self.filename = filename


class MultipartFinalizeError(GraphQLClientError):
    """Raised when the multipart writer cannot be finalized."""


class TransportError(GraphQLClientError):
    """Raised when the HTTP exchange itself fails (connect, DNS, TLS, read)."""


class RequestTimeoutError(TransportError):
    """Raised when the exchange does not complete before its deadline."""

    def __init__(self, message: str, *, timeout: float | None = None) -> None:
        super().__init__(message)
        self.timeout = timeout


class NonSuccessStatusError(GraphQLClientError):
    """Raised when a non-200 response body is not a GraphQL envelope.

    Attributes:
        status_code: HTTP status code of the response.
    """

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"graphql: server returned a non-200 status code: {status_code}")


class MalformedResponseError(GraphQLClientError):
    """Raised when a 200 response body cannot be decoded as an envelope."""


class GraphQLOperationError(GraphQLClientError):
    """The server answered with at least one entry in ``errors``.

    The exception describes the first error; every error the server returned
    is available on :attr:`errors`.

    Attributes:
        message: Message of the first error.
        path: Response path of the first error, if reported.
        locations: Document locations of the first error, if reported.
        extensions: Extensions of the first error, if reported.
        errors: All errors from the response, in order.
    """

    def __init__(
        self,
        message: str,
        *,
        path: list[str | int] | None = None,
        locations: list[dict[str, int]] | None = None,
        extensions: dict[str, Any] | None = None,
        errors: tuple[Any, ...] = (),
    ) -> None:
        super().__init__(f"graphql: {message}")
        self.message = message
        self.path = path
        self.locations = locations
        self.extensions = extensions
        self.errors = errors
