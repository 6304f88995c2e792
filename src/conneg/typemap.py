"""Apache-style type maps.

A type map lists the variants of one resource and the headers each
variant would be served with (see mod_negotiation)::

    URI: index.html.en
    Content-Type: text/html; charset=utf-8

    URI: index.json
    Content-Type: application/json

A blank line ends an entry. Lines starting with ``#`` are comments.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from conneg.http.headers import format_header_value, parse_header
from conneg.tuples import ValueTuple

logger = logging.getLogger("conneg.typemap")


@dataclass(frozen=True, slots=True)
class TypeMapEntry:
    """One variant of a resource. Header names are lower-cased."""

    uri: str
    headers: Mapping[str, tuple[ValueTuple, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        headers = {name.lower(): tuple(values) for name, values in self.headers.items()}
        object.__setattr__(self, "headers", headers)

    def get(self, name: str) -> tuple[ValueTuple, ...]:
        """Values declared for header *name*, empty when absent."""
        return self.headers.get(name.lower(), ())

    @property
    def content_type(self) -> tuple[ValueTuple, ...]:
        return self.get("content-type")

    @property
    def content_encoding(self) -> tuple[ValueTuple, ...]:
        return self.get("content-encoding")


class _EntryBuilder:
    """Accumulates the lines of one entry until a blank line flushes it."""

    __slots__ = ("headers", "malformed", "uri")

    def __init__(self) -> None:
        self.uri: str | None = None
        self.headers: dict[str, list[ValueTuple]] = {}
        self.malformed = False

    def add(self, line: str) -> None:
        name, sep, value = line.partition(":")
        if not sep:
            self.malformed = True
            return
        name = name.strip().lower()
        value = value.strip()
        if name == "uri":
            self.uri = value
        else:
            self.headers[name] = parse_header(value)

    def build(self, lineno: int) -> TypeMapEntry | None:
        if self.malformed or not self.uri:
            logger.debug("Dropped typemap entry ending at line %d (uri=%r)", lineno, self.uri)
            return None
        return TypeMapEntry(self.uri, {k: tuple(v) for k, v in self.headers.items()})


def parse_typemap(text: str) -> list[TypeMapEntry]:
    """Parse type map text into entries, in file order.

    An entry containing a line without ``:`` is dropped as a whole, as is
    an entry without a ``URI``. End of input flushes the last entry.
    """
    entries: list[TypeMapEntry] = []
    builder: _EntryBuilder | None = None
    lineno = 0

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if line.startswith("#"):
            continue

        if not line:
            if builder is not None:
                entry = builder.build(lineno)
                if entry is not None:
                    entries.append(entry)
                builder = None
            continue

        if builder is None:
            builder = _EntryBuilder()
        builder.add(line)

    if builder is not None:
        entry = builder.build(lineno)
        if entry is not None:
            entries.append(entry)

    return entries


def _title_case(name: str) -> str:
    return "-".join(part.capitalize() for part in name.split("-"))


def format_typemap(entries: Iterable[TypeMapEntry]) -> str:
    """Serialize entries back to type map text, one blank line between entries."""
    blocks: list[str] = []
    for entry in entries:
        lines = [f"URI: {entry.uri}"]
        lines.extend(
            f"{_title_case(name)}: {format_header_value(values)}"
            for name, values in entry.headers.items()
        )
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n" if blocks else ""


def negotiable_headers(entries: Sequence[TypeMapEntry]) -> list[str]:
    """Header names declared by any entry, in first-seen order."""
    seen: dict[str, None] = {}
    for entry in entries:
        for name in entry.headers:
            seen.setdefault(name, None)
    return list(seen)
