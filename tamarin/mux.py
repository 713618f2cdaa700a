"""A request multiplexer routing by method and path pattern."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from http import HTTPStatus
from typing import Any, Optional

from .endpoint import Endpoint, EndpointHandler
from .messages import Headers, Request, ResponseWriter

logger = logging.getLogger(__name__)

VARIABLE_INDICATOR = "{}"
STATIC_INDICATOR = "{*}"

GET = "GET"
POST = "POST"
PATCH = "PATCH"
OPTIONS = "OPTIONS"

_METHODS = (GET, POST, PATCH)

_CORS_HEADERS = (
    ("Access-Control-Allow-Origin", "*"),
    ("Access-Control-Allow-Methods", "GET, POST, PATCH, OPTIONS, PUT, DELETE"),
    ("Access-Control-Allow-Headers", "*"),
)

Handler = Callable[[ResponseWriter, Request], Any]


class RouteKind(Enum):
    """How a registered path is matched against request paths."""

    EXACT = ""
    VARIABLE = " [URL contains variable]"
    STATIC = " [URL refers to static content]"

    @property
    def label(self) -> str:
        return self.value


def _name_template(method: str, kind: RouteKind) -> str:
    # Column widths and trailing spaces follow the established startup log layout.
    if method == GET:
        padding = {RouteKind.EXACT: 33, RouteKind.VARIABLE: 9, RouteKind.STATIC: 2}[kind]
        trailing = " " if kind is RouteKind.STATIC else ""
    else:
        padding = {RouteKind.EXACT: 32, RouteKind.VARIABLE: 8, RouteKind.STATIC: 1}[kind]
        trailing = "" if kind is RouteKind.EXACT else " "
    return f"[{method}]{kind.label}{' ' * padding}-> {{}}{trailing}"


def path_is_static(path: str) -> bool:
    """Return whether ``path`` refers to static content."""
    return STATIC_INDICATOR in path


def path_is_variable(path: str) -> bool:
    """Return whether ``path`` holds a variable segment."""
    return VARIABLE_INDICATOR in path


def _prefix_before(path: str, indicator: str) -> str:
    idx = path.find(indicator)
    return path if idx < 1 else path[:idx]


def static_prefix(path: str) -> str:
    """Return the part of ``path`` before the static indicator."""
    return _prefix_before(path, STATIC_INDICATOR)


def variable_prefix(path: str) -> str:
    """Return the part of ``path`` before the first variable indicator."""
    return _prefix_before(path, VARIABLE_INDICATOR)


def _classify(path: str) -> RouteKind:
    if path_is_variable(path):
        return RouteKind.VARIABLE
    if path_is_static(path):
        return RouteKind.STATIC
    return RouteKind.EXACT


def _same(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


def _set_cors_headers(headers: Headers) -> None:
    for name, value in _CORS_HEADERS:
        headers.set(name, value)


def handle_options(writer: ResponseWriter, request: Request) -> None:
    """Answer a CORS preflight request with open permissions and 204."""
    _set_cors_headers(writer.headers)
    writer.write_header(int(HTTPStatus.NO_CONTENT))


class Mux:
    """Routes requests to handlers by method and by exact, variable or static path."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose
        self._routes: dict[str, dict[RouteKind, dict[str, list[Handler]]]] = {
            method: {kind: {} for kind in RouteKind} for method in _METHODS
        }

    def _register(self, path: str, method: str, handlers: Iterable[Optional[Handler]]) -> None:
        table = self._routes[method][_classify(path)]
        table[path] = [handler for handler in handlers if handler is not None]

    def get(self, path: str, *args: EndpointHandler) -> Mux:
        """Register an endpoint sequence for GET requests to ``path``."""
        return self.with_endpoint(Endpoint(path).with_handlers(*args).with_method(GET))

    def post(self, path: str, *args: EndpointHandler) -> Mux:
        """Register an endpoint sequence for POST requests to ``path``."""
        return self.with_endpoint(Endpoint(path).with_handlers(*args).with_method(POST))

    def patch(self, path: str, *args: EndpointHandler) -> Mux:
        """Register an endpoint sequence for PATCH requests to ``path``."""
        return self.with_endpoint(Endpoint(path).with_handlers(*args).with_method(PATCH))

    def get_f(self, path: str, *args: Handler) -> Mux:
        """Register plain handlers for GET requests to ``path``."""
        self._register(path, GET, args)
        return self

    def post_f(self, path: str, *args: Handler) -> Mux:
        """Register plain handlers for POST requests to ``path``."""
        self._register(path, POST, args)
        return self

    def patch_f(self, path: str, *args: Handler) -> Mux:
        """Register plain handlers for PATCH requests to ``path``."""
        self._register(path, PATCH, args)
        return self

    def with_endpoint(self, endpoint: Endpoint | None) -> Mux:
        """Register ``endpoint`` under its own path and method."""
        if endpoint is None:
            return self
        if endpoint.method in self._routes:
            self._register(endpoint.path, endpoint.method, [endpoint.handle])
        else:
            logger.warning("Don't yet handle the HTTP Method '%s'", endpoint.method)
        return self

    def with_get_endpoint(self, endpoint: Endpoint | None) -> Mux:
        """Register ``endpoint`` for GET requests."""
        if endpoint is None:
            return self
        endpoint.method = GET
        return self.with_endpoint(endpoint)

    def with_post_endpoint(self, endpoint: Endpoint | None) -> Mux:
        """Register ``endpoint`` for POST requests."""
        if endpoint is None:
            return self
        endpoint.method = POST
        return self.with_endpoint(endpoint)

    def with_patch_endpoint(self, endpoint: Endpoint | None) -> Mux:
        """Register ``endpoint`` for PATCH requests."""
        if endpoint is None:
            return self
        endpoint.method = PATCH
        return self.with_endpoint(endpoint)

    def with_handle_funcs(self, path: str, method: str, *args: Handler | None) -> Mux:
        """Register plain handlers for ``method`` requests to ``path``."""
        if method in self._routes:
            self._register(path, method, args)
        elif method != OPTIONS:
            logger.warning("Don't yet handle the HTTP Method '%s'", method)
        return self

    def handler_names(self) -> list[str]:
        """Describe every registered route, one line each."""
        return [
            _name_template(method, kind).format(path)
            for method, kinds in self._routes.items()
            for kind, table in kinds.items()
            for path in table
        ]

    def _variable_handlers(self, path: str, method: str) -> list[Handler] | None:
        candidates = self._routes.get(method)
        if candidates is None:
            return None
        for candidate, handlers in candidates[RouteKind.VARIABLE].items():
            prefix = variable_prefix(candidate)
            if len(path) < len(prefix) or not _same(prefix, path[: len(prefix)]):
                continue
            candidate_parts = candidate.split("/")
            input_parts = path.split("/")
            if len(candidate_parts) != len(input_parts):
                continue
            if all(
                part == VARIABLE_INDICATOR or _same(part, given)
                for part, given in zip(candidate_parts, input_parts)
            ):
                return handlers
        return None

    def _static_handlers(self, path: str, method: str) -> list[Handler] | None:
        candidates = self._routes.get(method)
        if candidates is None:
            return None
        for candidate, handlers in candidates[RouteKind.STATIC].items():
            prefix = static_prefix(candidate)
            if len(path) >= len(prefix) and _same(prefix, path[: len(prefix)]):
                return handlers
        return None

    def _lookup(self, path: str, method: str) -> list[Handler] | None:
        exact = self._routes.get(method, {}).get(RouteKind.EXACT, {})
        if path in exact:
            return exact[path]
        handlers = self._variable_handlers(path, method)
        if handlers is None:
            handlers = self._static_handlers(path, method)
        return handlers

    def serve_http(self, writer: ResponseWriter | None, request: Request | None) -> None:
        """Dispatch ``request`` to its handlers, answering 404 if none match."""
        if writer is None or request is None or request.path is None:
            return
        if request.method == OPTIONS:
            handle_options(writer, request)
            return
        _set_cors_headers(writer.headers)
        path = request.path
        if self.verbose:
            logger.info("Received request for '%s'", path)
        handlers = self._lookup(path, request.method)
        if handlers is None:
            if self.verbose:
                logger.info("don't have a handler for %s", path)
            writer.write_header(int(HTTPStatus.NOT_FOUND))
            return
        for handler in handlers:
            handler(writer, request)
        if self.verbose:
            logger.info("Handled request for '%s'", path)

    def __call__(self, environ: dict[str, Any], start_response: Callable[..., Any]) -> list[bytes]:
        """Serve as a WSGI application."""
        request = _request_from_environ(environ)
        writer = ResponseWriter()
        self.serve_http(writer, request)
        status = writer.status if writer.status is not None else int(HTTPStatus.OK)
        start_response(_status_line(status), list(writer.headers.items()))
        return [bytes(writer.body)]


def _status_line(code: int) -> str:
    try:
        phrase = HTTPStatus(code).phrase
    except ValueError:
        phrase = "Unknown"
    return f"{code} {phrase}"


def _wsgi_text(raw: str) -> str:
    try:
        return raw.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return raw


def _request_from_environ(environ: dict[str, Any]) -> Request:
    headers = Headers()
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            headers.add(key[5:].replace("_", "-").title(), value)
        elif key in ("CONTENT_TYPE", "CONTENT_LENGTH") and value:
            headers.add(key.replace("_", "-").title(), value)
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    stream = environ.get("wsgi.input")
    body = stream.read(length) if stream is not None and length > 0 else b""
    return Request(
        method=environ.get("REQUEST_METHOD", ""),
        path=_wsgi_text(environ.get("PATH_INFO", "")),
        headers=headers,
        body=body,
        query=environ.get("QUERY_STRING", ""),
    )