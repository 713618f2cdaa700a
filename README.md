# tamarin

A small HTTP request multiplexer. Routes are registered per method (GET, POST,
PATCH) and per path, and each route runs a sequence of handlers in order. A
`tamarin.mux.Mux` is also a WSGI application, so any WSGI server can serve it.

## Installation

```
pip install tamarin
```

## Modules

- `tamarin.messages`: `Request`, `ResponseWriter` and `Headers`.
- `tamarin.errors`: `EndpointError`, `fail_with_error_message`,
  `fail_with_json_status`, `succeed_with_json_status`.
- `tamarin.endpoint`: `Endpoint`, a path and method with a sequence of handlers.
- `tamarin.mux`: `Mux`, plus the path helpers `path_is_variable`,
  `path_is_static`, `variable_prefix`, `static_prefix` and `handle_options`.
- `tamarin.utilities`: `get_request_body_and_header` and
  `unmarshal_json_request_body`.

## Paths

Three kinds of path are recognised:

- **Exact** paths such as `/health` match only themselves.
- **Variable** paths contain `{}` for a segment, e.g. `/users/{}/orders`. A
  request matches when it starts with the part before the first `{}`, has the
  same number of `/`-separated segments, and every fixed segment is equal,
  ignoring case.
- **Static** paths contain `{*}`, e.g. `/assets/{*}`. Any request whose path
  starts with the part before `{*}` (ignoring case) matches.

Exact routes are tried first, then variable routes, then static routes. A
request that matches nothing gets `404`. Registering the same path and method
again replaces the earlier handlers.

Every dispatched response carries open CORS headers
(`Access-Control-Allow-Origin: *` and friends), and `OPTIONS` requests are
answered with `204 No Content` without reaching any handler.

## Requests and responses

`Request` is a dataclass with `method`, `path`, `headers`, `body` (bytes or a
readable binary stream) and `query`. `ResponseWriter` collects `status`,
`headers` and `body`: the first status written with `write_header` is kept,
and calling `write` before any status implies `200`. `Headers` is a
case-insensitive, multi-valued collection with `get`, `get_all`, `set` and
`add`.

## Endpoints and errors

An endpoint handler takes a `ResponseWriter` and a `Request`. It returns `None`
to let the sequence go on, or returns (or raises) an `EndpointError` to stop
it. When the sequence stops, the error's `status` and `message` are written to
the client and the cause is logged.

```python
from tamarin.mux import Mux
from tamarin.errors import fail_with_error_message, succeed_with_json_status
from tamarin.utilities import get_request_body_and_header


def require_body(writer, request):
    body, _headers = get_request_body_and_header(request)
    if not body:
        return fail_with_error_message(400, "Body required", ValueError("empty body"))
    return None


def echo(writer, request):
    body, _headers = get_request_body_and_header(request)
    return succeed_with_json_status({"length": len(body)}, writer)


app = (
    Mux(verbose=True)
    .post("/echo", require_body, echo)
    .get("/users/{}", lambda writer, request: succeed_with_json_status({"ok": True}, writer))
)

for line in app.handler_names():
    print(line)
```

`succeed_with_json_status(body, writer)` writes `200` with the body encoded as
compact JSON (dataclasses are encoded as objects). It returns an
`EndpointError` with status `500` instead if the body or writer is `None` or
the body cannot be encoded.

`fail_with_json_status(code, value, cause)` builds an error with a JSON body
instead of plain text. If the value cannot be encoded, the status becomes
`500` and the body is empty.

Endpoints can also be built directly and registered with `with_endpoint`,
`with_get_endpoint`, `with_post_endpoint` or `with_patch_endpoint`:

```python
from tamarin.endpoint import Endpoint

app.with_get_endpoint(Endpoint("/health").with_handlers(echo))
```

## Plain handlers

`get_f`, `post_f`, `patch_f` and `with_handle_funcs(path, method, ...)` register
plain functions that take a writer and a request. All of them run in order;
their return values are ignored.

```python
def hello(writer, request):
    writer.write_header(200)
    writer.write(b"hello")

app = Mux().get_f("/hello", hello)
```

## Reading bodies

`get_request_body_and_header(request)` reads the whole body and returns it
with the request headers; a streamed body is replaced by the bytes read, so it
can be read again. It raises `ValueError` if the request, its body or its
headers are `None`.

`unmarshal_json_request_body(request, target)` decodes the body as JSON into
the shape of `target` (a dataclass, dict, list, str, int, float or bool) and
returns the decoded value together with the request headers. Dataclass fields
are matched by name, ignoring case; fields missing from the JSON keep the
values of `target`. A body that does not fit the target raises `ValueError`.

## Serving

`Mux` instances are WSGI applications:

```python
from wsgiref.simple_server import make_server

with make_server("localhost", 8000, app) as server:
    server.serve_forever()
```

## Logging

Messages go through the standard `logging` module under the `tamarin.mux` and
`tamarin.endpoint` loggers. With `Mux(verbose=True)` each request is logged at
INFO level.

## What it does not do

- It has no command-line program and no server of its own; use any WSGI server.
- Only GET, POST and PATCH routes can be registered. Other methods are logged
  and ignored at registration, and requests with them get `404` (except
  `OPTIONS`, which always gets `204`).
- The CORS headers are fixed and fully open; they cannot be configured.
- Path variables are matched but not extracted; handlers read them from
  `request.path` themselves.