"""Decoding of the GraphQL response envelope ``{data, errors}``."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from gqlhttp.exceptions import GraphQLOperationError, MalformedResponseError, NonSuccessStatusError

T = TypeVar("T")

HTTP_OK = 200


class GraphQLErrorDetail(BaseModel):
    """A single entry of the response ``errors`` array."""

    message: str
    path: list[str | int] | None = None
    locations: list[dict[str, int]] | None = None
    extensions: dict[str, Any] | None = None

    model_config = {"extra": "allow", "frozen": True}


class GraphQLResponse(BaseModel):
    """Top-level response envelope. ``data`` stays raw until decoded."""

    data: Any = None
    errors: list[GraphQLErrorDetail] | None = None
    extensions: dict[str, Any] | None = None


def decode_response(status_code: int, body: bytes, response_model: type[T] | Any = None) -> T | Any:
    """Decode *body* and return its ``data`` as *response_model*.

    Args:
        status_code: HTTP status of the response.
        body: Complete response body.
        response_model: Destination type for ``data``; ``None`` keeps plain JSON.

    Returns:
        The decoded ``data``, or ``None`` when the server sent none.

    Raises:
        NonSuccessStatusError: Body is not an envelope and the status is not 200.
        MalformedResponseError: Body is not an envelope despite a 200 status.
        GraphQLOperationError: The envelope carries at least one error.
    """
    try:
        envelope = GraphQLResponse.model_validate_json(body)
    except ValidationError as exc:
        raise _undecodable(status_code, exc) from exc

    # Partial data next to errors need not match response_model.
    if envelope.errors:
        first = envelope.errors[0]
        raise GraphQLOperationError(
            first.message,
            path=first.path,
            locations=first.locations,
            extensions=first.extensions,
            errors=tuple(envelope.errors),
        )

    if response_model is None or envelope.data is None:
        return envelope.data
    try:
        return TypeAdapter(response_model).validate_python(envelope.data)
    except ValidationError as exc:
        raise _undecodable(status_code, exc) from exc


def _undecodable(status_code: int, exc: ValidationError) -> NonSuccessStatusError | MalformedResponseError:
    if status_code != HTTP_OK:
        return NonSuccessStatusError(status_code)
    return MalformedResponseError(f"graphql: decoding response: {exc}")
