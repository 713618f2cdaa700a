from types import SimpleNamespace

import pytest

from tamarin.endpoint import Endpoint
from tamarin.errors import fail_with_error_message


class RecordingWriter:
    """Collects what a handler sends back."""

    def __init__(self):
        self.codes = []
        self.messages = []

    def write_header(self, status):
        self.codes.append(status)

    def write(self, data):
        text = data.decode() if isinstance(data, (bytes, bytearray)) else str(data)
        self.messages.append(text)
        return len(data)

    @property
    def last_code(self):
        return self.codes[-1] if self.codes else -1

    @property
    def last_message(self):
        return self.messages[-1] if self.messages else ""


@pytest.fixture
def request_obj():
    return SimpleNamespace(method="GET", path="/test")


def test_new_endpoint_handles_nothing(request_obj):
    ep = Endpoint("")
    writer = RecordingWriter()
    ep.handle(writer, request_obj)
    assert writer.codes == []
    assert writer.messages == []


def test_with_method_sets_method_and_chains():
    ep = Endpoint("")
    assert ep.with_method("GET") is ep
    assert ep.method == "GET"


def test_with_handlers_chains():
    ep = Endpoint("")
    assert ep.with_handlers() is ep
    assert ep.with_handlers(lambda w, r: None) is ep


def test_handle_good_handler(request_obj):
    def good(writer, request):
        writer.write_header(999)
        writer.write(b"passed")
        return None

    ep = Endpoint("/test").with_handlers(good).with_method("GET")
    writer = RecordingWriter()
    ep.handle(writer, request_obj)
    assert writer.last_code == 999
    assert writer.last_message == "passed"


def test_handle_bad_handler(request_obj):
    def bad(writer, request):
        return fail_with_error_message(
            -666, "you are a bad person", RuntimeError("failing on purpose")
        )

    ep = Endpoint("/test").with_handlers(bad).with_method("GET")
    writer = RecordingWriter()
    ep.handle(writer, request_obj)
    assert writer.last_code == -666
    assert writer.last_message == "you are a bad person"


def test_handle_runs_in_order_and_stops_on_error(request_obj):
    calls = []

    def first(writer, request):
        calls.append("first")
        return None

    def failing(writer, request):
        calls.append("failing")
        return fail_with_error_message(400, "bad input", ValueError("nope"))

    def never(writer, request):
        calls.append("never")
        return None

    ep = Endpoint("/test").with_handlers(first, failing).with_handlers(never)
    writer = RecordingWriter()
    ep.handle(writer, request_obj)
    assert calls == ["first", "failing"]
    assert writer.codes == [400]
    assert writer.last_message == "bad input"


def test_handle_runs_all_when_no_error(request_obj):
    def make(name):
        def step(writer, request):
            writer.write(name.encode())
            return None

        return step

    ep = Endpoint("/test").with_handlers(make("a"), make("b"), make("c"))
    writer = RecordingWriter()
    ep.handle(writer, request_obj)
    assert writer.messages == ["a", "b", "c"]
    assert writer.codes == []