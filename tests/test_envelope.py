from __future__ import annotations

from dataclasses import dataclass

import pytest
from pydantic import BaseModel, ValidationError

from gqlhttp.envelope import GraphQLErrorDetail, GraphQLResponse, decode_response
from gqlhttp.exceptions import GraphQLOperationError, MalformedResponseError, NonSuccessStatusError


class Viewer(BaseModel):
    login: str


class ViewerData(BaseModel):
    viewer: Viewer


@dataclass
class ValueData:
    value: str


def test_untyped_data_is_returned_as_json() -> None:
    assert decode_response(200, b'{"data":{"v":"x"}}') == {"v": "x"}


def test_data_is_validated_into_pydantic_model() -> None:
    data = decode_response(200, b'{"data":{"viewer":{"login":"octocat"}}}', ViewerData)

    assert data == ViewerData(viewer=Viewer(login="octocat"))


def test_data_is_validated_into_dataclass() -> None:
    assert decode_response(200, b'{"data":{"value":"some data"}}', ValueData) == ValueData(value="some data")


def test_missing_data_returns_none_even_with_model() -> None:
    assert decode_response(200, b"{}", ViewerData) is None
    assert decode_response(200, b'{"data":null}', ViewerData) is None


def test_non_json_body_with_error_status_reports_status_code() -> None:
    with pytest.raises(NonSuccessStatusError) as exc_info:
        decode_response(500, b"Internal Server Error")

    assert exc_info.value.status_code == 500
    assert str(exc_info.value) == "graphql: server returned a non-200 status code: 500"
    assert "Internal Server Error" not in str(exc_info.value)


def test_non_json_body_with_ok_status_is_malformed() -> None:
    with pytest.raises(MalformedResponseError, match="decoding response") as exc_info:
        decode_response(200, b"<html>oops</html>")

    assert isinstance(exc_info.value.__cause__, ValidationError)


def test_non_object_json_is_malformed() -> None:
    with pytest.raises(MalformedResponseError):
        decode_response(200, b'["data"]')


def test_empty_body_is_malformed() -> None:
    with pytest.raises(MalformedResponseError):
        decode_response(200, b"")


def test_data_shape_mismatch_is_malformed_on_ok_status() -> None:
    with pytest.raises(MalformedResponseError):
        decode_response(200, b'{"data":{"viewer":{"name":"no login"}}}', ViewerData)


def test_data_shape_mismatch_reports_status_on_error_status() -> None:
    with pytest.raises(NonSuccessStatusError) as exc_info:
        decode_response(502, b'{"data":{"viewer":42}}', ViewerData)

    assert exc_info.value.status_code == 502


def test_errors_envelope_wins_over_error_status() -> None:
    with pytest.raises(GraphQLOperationError) as exc_info:
        decode_response(400, b'{"errors":[{"message":"bad"}]}')

    assert exc_info.value.message == "bad"
    assert str(exc_info.value) == "graphql: bad"


def test_first_error_is_raised_and_all_are_kept() -> None:
    body = (
        b'{"data":{"user":null},"errors":['
        b'{"message":"not found","path":["user"],"locations":[{"line":1,"column":2}],'
        b'"extensions":{"code":"NOT_FOUND"}},'
        b'{"message":"second"}]}'
    )

    with pytest.raises(GraphQLOperationError) as exc_info:
        decode_response(200, body)

    err = exc_info.value
    assert err.message == "not found"
    assert err.path == ["user"]
    assert err.locations == [{"line": 1, "column": 2}]
    assert err.extensions == {"code": "NOT_FOUND"}
    assert [detail.message for detail in err.errors] == ["not found", "second"]


def test_errors_are_raised_before_partial_data_is_validated() -> None:
    body = b'{"data":{"viewer":null},"errors":[{"message":"not found","path":["viewer"]}]}'

    with pytest.raises(GraphQLOperationError) as exc_info:
        decode_response(200, body, ViewerData)

    assert exc_info.value.message == "not found"
    assert exc_info.value.path == ["viewer"]


def test_errors_with_partial_data_win_over_error_status() -> None:
    with pytest.raises(GraphQLOperationError, match="graphql: forbidden"):
        decode_response(403, b'{"data":{"viewer":{}},"errors":[{"message":"forbidden"}]}', ViewerData)


def test_error_without_message_is_not_an_envelope() -> None:
    with pytest.raises(MalformedResponseError):
        decode_response(200, b'{"errors":[{"code":1}]}')


def test_envelope_models() -> None:
    envelope = GraphQLResponse.model_validate_json(b'{"data":{"a":1},"errors":[{"message":"m","custom":true}]}')

    assert envelope.data == {"a": 1}
    assert envelope.errors == [GraphQLErrorDetail(message="m", custom=True)]
    assert envelope.extensions is None


def test_null_errors_means_success() -> None:
    assert decode_response(200, b'{"data":{"ok":true},"errors":null}') == {"ok": True}


def test_empty_errors_means_success() -> None:
    assert decode_response(200, b'{"data":{"ok":true},"errors":[]}') == {"ok": True}
