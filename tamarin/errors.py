"""Errors that carry the status and body a client should see."""

from __future__ import annotations

import dataclasses
import json
from http import HTTPStatus
from typing import Any

from .messages import ResponseWriter

_INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class EndpointError(Exception):
    """An error together with the response status and message for the client."""

    def __init__(self, status: int, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.cause = cause
        self.__cause__ = cause

    def __str__(self) -> str:
        return str(self.cause) if self.cause is not None else self.message

    def __repr__(self) -> str:
        return f"EndpointError(status={self.status!r}, message={self.message!r}, cause={self.cause!r})"


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _encode_json(value: Any) -> str:
    return json.dumps(value, default=_json_default, separators=(",", ":"), allow_nan=False)


def fail_with_error_message(code: int, message: str, cause: BaseException | None) -> EndpointError:
    """Build an EndpointError whose response body is ``message``."""
    return EndpointError(code, message, cause)


def fail_with_json_status(code: int, value: Any, cause: BaseException | None) -> EndpointError:
    """Build an EndpointError whose response body is ``value`` encoded as JSON.

    If ``value`` cannot be encoded, the error becomes a 500 with an empty body.
    """
    try:
        message = _encode_json(value)
    except (TypeError, ValueError) as exc:
        wrapped = RuntimeError(
            f"failed to marshal response JSON : {exc}. Original error was : {cause}"
        )
        return EndpointError(int(HTTPStatus.INTERNAL_SERVER_ERROR), "", wrapped)
    return EndpointError(code, message, cause)


def succeed_with_json_status(response_body: Any, writer: ResponseWriter | None) -> EndpointError | None:
    """Write a 200 response with ``response_body`` as JSON.

    Returns an EndpointError instead when there is nothing to write or the
    body cannot be encoded.
    """
    if response_body is None or writer is None:
        return fail_with_error_message(
            int(HTTPStatus.INTERNAL_SERVER_ERROR),
            _INTERNAL_ERROR_MESSAGE,
            ValueError("response body or writer was None"),
        )
    try:
        encoded = _encode_json(response_body)
    except (TypeError, ValueError) as exc:
        return fail_with_error_message(
            int(HTTPStatus.INTERNAL_SERVER_ERROR),
            _INTERNAL_ERROR_MESSAGE,
            ValueError(f"unable to marshal response body : {exc}"),
        )
    writer.write_header(int(HTTPStatus.OK))
    writer.write(encoded.encode())
    return None