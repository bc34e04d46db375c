"""Public API surface for gqlhttp."""

from gqlhttp.client import GraphQLClient
from gqlhttp.config import ClientConfig, load_config
from gqlhttp.envelope import GraphQLErrorDetail, GraphQLResponse
from gqlhttp.exceptions import (
    ConfigError,
    EncodeError,
    FileTransferError,
    GraphQLClientError,
    GraphQLOperationError,
    MalformedResponseError,
    MultipartFinalizeError,
    NonSuccessStatusError,
    RequestTimeoutError,
    TransportError,
)
from gqlhttp.request import File, Request

__all__ = [
    "ClientConfig",
    "ConfigError",
    "EncodeError",
    "File",
    "FileTransferError",
    "GraphQLClient",
    "GraphQLClientError",
    "GraphQLErrorDetail",
    "GraphQLOperationError",
    "GraphQLResponse",
    "MalformedResponseError",
    "MultipartFinalizeError",
    "NonSuccessStatusError",
    "Request",
    "RequestTimeoutError",
    "TransportError",
    "load_config",
]
