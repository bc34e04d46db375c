"""JSON body encoding for file-free GraphQL requests."""

from __future__ import annotations

import json
from typing import Any

from gqlhttp.exceptions import EncodeError
from gqlhttp.request import Request

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
JSON_ACCEPT = "application/json; charset=utf-8"


def operation_payload(request: Request, variables: Any) -> dict[str, Any]:
    """Build the ``{query, variables}`` object sent for *request*.

    ``variables`` is always present (``None`` serializes as ``null``);
    ``operationName`` only appears when the request names its operation.
    """
    payload: dict[str, Any] = {"query": request.document, "variables": variables}
    if request.operation_name:
        payload["operationName"] = request.operation_name
    return payload


def dumps(payload: Any) -> str:
    """Serialize *payload* to compact JSON, raising :class:`EncodeError` on failure."""
    try:
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"graphql: encode body: {exc}") from exc


def encode_json_body(request: Request) -> bytes:
    """Encode a file-free request as a UTF-8 JSON body."""
    if request.files:
        raise EncodeError("graphql: requests with files must use the multipart encoder")
    return dumps(operation_payload(request, request.variables)).encode("utf-8")
