"""Helpers for reading request bodies."""

from __future__ import annotations

import dataclasses
import json
from typing import Any, TypeVar

from .messages import Headers, Request

T = TypeVar("T")


def get_request_body_and_header(request: Request | None) -> tuple[bytes, Headers]:
    """Read the whole request body and return it with the request headers.

    A streamed body is replaced by the bytes read, so it can be read again.
    """
    if request is None:
        raise ValueError("request is None")
    if request.body is None:
        raise ValueError("request body is None")
    if request.headers is None:
        raise ValueError("request headers are None")
    body = request.body
    if not isinstance(body, (bytes, bytearray, memoryview)):
        try:
            body = body.read()
        except OSError as exc:
            raise ValueError(f"unable to read request body : {exc}") from exc
    data = bytes(body)
    request.body = data
    return data, request.headers


def unmarshal_json_request_body(request: Request | None, target: T) -> tuple[T, Headers]:
    """Decode the JSON request body into a value shaped like ``target``.

    Fields present in the JSON replace those of ``target``; the rest keep the
    values ``target`` has. A JSON ``null`` leaves ``target`` unchanged.
    """
    try:
        body, headers = get_request_body_and_header(request)
    except ValueError as exc:
        raise ValueError(f"invalid request : {exc}") from exc
    try:
        value = _decode_into(target, json.loads(body))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"unable to unmarshal request body to target type : {exc}") from exc
    return value, headers


def _json_kind(data: Any) -> str:
    if isinstance(data, dict):
        return "object"
    if isinstance(data, list):
        return "array"
    if isinstance(data, str):
        return "string"
    if isinstance(data, bool):
        return "boolean"
    return "number"


def _mismatch(template: Any, data: Any) -> TypeError:
    return TypeError(f"cannot decode JSON {_json_kind(data)} into {type(template).__name__}")


def _match_key(data: dict[str, Any], name: str) -> str | None:
    if name in data:
        return name
    folded = name.casefold()
    return next((key for key in data if key.casefold() == folded), None)


def _decode_into(template: Any, data: Any) -> Any:
    if template is None:
        return data
    if data is None:
        return template
    if dataclasses.is_dataclass(template) and not isinstance(template, type):
        if not isinstance(data, dict):
            raise _mismatch(template, data)
        changes = {}
        for spec in dataclasses.fields(template):
            if not spec.init:
                continue
            key = _match_key(data, spec.name)
            if key is not None:
                changes[spec.name] = _decode_into(getattr(template, spec.name), data[key])
        return dataclasses.replace(template, **changes)
    if isinstance(template, bool):
        if not isinstance(data, bool):
            raise _mismatch(template, data)
        return data
    if isinstance(template, int):
        if isinstance(data, bool) or not isinstance(data, int):
            raise _mismatch(template, data)
        return data
    if isinstance(template, float):
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise _mismatch(template, data)
        return float(data)
    if isinstance(template, str):
        if not isinstance(data, str):
            raise _mismatch(template, data)
        return data
    if isinstance(template, dict):
        if not isinstance(data, dict):
            raise _mismatch(template, data)
        merged = dict(template)
        merged.update(data)
        return merged
    if isinstance(template, (list, tuple)):
        if not isinstance(data, list):
            raise _mismatch(template, data)
        return type(template)(data)
    if isinstance(data, type(template)):
        return data
    raise _mismatch(template, data)