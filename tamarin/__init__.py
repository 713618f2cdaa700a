"""HTTP request multiplexer with sequenced endpoint handlers, served over WSGI."""

__version__ = "0.1.0"
__all__ = ["endpoint", "errors", "messages", "mux", "utilities"]