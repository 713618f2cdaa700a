import json
from dataclasses import dataclass
from http import HTTPStatus

from tamarin.errors import (
    EndpointError,
    fail_with_error_message,
    fail_with_json_status,
    succeed_with_json_status,
)
from tamarin.messages import ResponseWriter


@dataclass
class ResponseBody:
    I: int
    S: str


def test_fail_with_error_message():
    result = fail_with_error_message(-1, "", None)
    assert isinstance(result, EndpointError)
    assert result.status == -1
    assert result.cause is None

    cause = NotImplementedError("unsupported operation")
    result = fail_with_error_message(1, "two", cause)
    assert result.cause is cause
    assert result.__cause__ is cause
    assert result.status == 1
    assert result.message == "two"
    assert str(result) == "unsupported operation"


def test_fail_with_json_status_of_none():
    result = fail_with_json_status(-1, None, None)
    assert result.status == -1
    assert result.message == "null"


def test_fail_with_json_status_encodes_body():
    cause = NotImplementedError("unsupported operation")
    in_body = ResponseBody(I=100, S="one hundred")
    result = fail_with_json_status(HTTPStatus.NOT_FOUND, in_body, cause)
    assert result.cause is cause
    assert result.status == HTTPStatus.NOT_FOUND
    out_body = ResponseBody(**json.loads(result.message))
    assert out_body == in_body


def test_fail_with_json_status_unencodable_becomes_500():
    result = fail_with_json_status(-1, object(), ValueError("original"))
    assert result.status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert result.message == ""
    assert "original" in str(result.cause)


def test_succeed_with_json_status_without_body_or_writer():
    result = succeed_with_json_status(None, None)
    assert result.status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert result.message == "Internal Server Error"


def test_succeed_with_json_status_writes_body():
    in_body = ResponseBody(I=123, S="one two thre")
    writer = ResponseWriter()
    result = succeed_with_json_status(in_body, writer)
    assert result is None
    assert writer.status == HTTPStatus.OK
    assert bytes(writer.body) == b'{"I":123,"S":"one two thre"}'


def test_succeed_with_json_status_unencodable():
    writer = ResponseWriter()
    result = succeed_with_json_status(object(), writer)
    assert isinstance(result, EndpointError)
    assert result.status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert writer.status is None
    assert bytes(writer.body) == b""