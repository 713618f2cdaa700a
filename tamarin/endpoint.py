"""Endpoints: a path, a method and a sequence of handlers run in order."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional

from .errors import EndpointError
from .messages import Request, ResponseWriter

logger = logging.getLogger(__name__)

EndpointHandler = Callable[[ResponseWriter, Request], Optional[EndpointError]]


@dataclass
class Endpoint:
    """A path served by a sequence of handlers that stops at the first error."""

    path: str = ""
    method: str = ""
    sequence: list[EndpointHandler] = field(default_factory=list)

    def with_method(self, method: str) -> Endpoint:
        """Set the HTTP method and return the endpoint."""
        self.method = method
        return self

    def with_handlers(self, *args: EndpointHandler | None) -> Endpoint:
        """Append handlers to the sequence, skipping ``None``, and return the endpoint."""
        self.sequence.extend(handler for handler in args if handler is not None)
        return self

    def handle(self, writer: ResponseWriter, request: Request) -> None:
        """Run the handlers in order, answering with the first error met.

        A handler signals failure by returning or raising an EndpointError.
        """
        for handler in self.sequence:
            try:
                error = handler(writer, request)
            except EndpointError as exc:
                error = exc
            if error is None:
                continue
            writer.write_header(error.status)
            writer.write(error.message.encode())
            logger.warning("Stopping sequence for '%s' due to error : %s", self.path, error.cause)
            logger.warning(
                "User will see Error Code : %d / Message : %s", error.status, error.message
            )
            break