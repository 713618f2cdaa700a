"""Request, response and header objects that handlers work with."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import BinaryIO, Union

Body = Union[bytes, bytearray, memoryview, BinaryIO]


class Headers:
    """Case-insensitive, multi-valued collection of HTTP header fields."""

    def __init__(
        self,
        initial: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> None:
        self._fields: dict[str, tuple[str, list[str]]] = {}
        if initial is None:
            return
        pairs = initial.items() if isinstance(initial, Mapping) else initial
        for name, value in pairs:
            self.add(name, value)

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the first value stored for ``name``, or ``default``."""
        entry = self._fields.get(name.lower())
        return entry[1][0] if entry else default

    def get_all(self, name: str) -> list[str]:
        """Return every value stored for ``name``, in insertion order."""
        entry = self._fields.get(name.lower())
        return list(entry[1]) if entry else []

    def set(self, name: str, value: str) -> None:
        """Replace any values of ``name`` with ``value``."""
        self._fields[name.lower()] = (name, [str(value)])

    def add(self, name: str, value: str) -> None:
        """Append ``value`` to the values of ``name``."""
        entry = self._fields.get(name.lower())
        if entry is None:
            self.set(name, value)
        else:
            entry[1].append(str(value))

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield one ``(name, value)`` pair per stored value."""
        for name, values in self._fields.values():
            for value in values:
                yield name, value

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._fields

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Headers({list(self.items())!r})"


@dataclass
class Request:
    """An incoming HTTP request.

    ``path`` is ``None`` when the request carries no URL; ``body`` may be raw
    bytes or a readable binary stream.
    """

    method: str = ""
    path: str | None = "/"
    headers: Headers | None = field(default_factory=Headers)
    body: Body | None = None
    query: str = ""


@dataclass
class ResponseWriter:
    """Collects the status, headers and body of a response.

    The first status written is kept; writing body data before any status
    implies 200 OK.
    """

    headers: Headers = field(default_factory=Headers)
    status: int | None = None
    body: bytearray = field(default_factory=bytearray)

    def write_header(self, status: int) -> None:
        """Set the response status unless one has already been written."""
        if self.status is None:
            self.status = status

    def write(self, data: bytes | str) -> int:
        """Append ``data`` to the body and return the number of bytes written."""
        if isinstance(data, str):
            data = data.encode()
        if self.status is None:
            self.status = int(HTTPStatus.OK)
        self.body.extend(data)
        return len(data)