"""Header value tokenizing and immutable, case-insensitive HTTP headers.

``split_header_value`` / ``parse_value_tuple`` turn list-valued header
text into ValueTuples; ``format_value_tuple`` goes the other way.
``Headers`` stores raw byte pairs from the ASGI scope and decodes on
access, keeping repeated occurrences of a header in arrival order.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping

from conneg.tuples import ValueTuple, coerce_q

_WHITESPACE = re.compile(r"\s+")


def split_header_value(header: str) -> list[str]:
    """Split a ``,``-delimited header value into its elements.

    All whitespace is removed first. Empty elements (``a,,b`` or a
    trailing comma) are dropped per the RFC 7230 list rule::

        >>> split_header_value("gzip, br;q=0.9, identity;q=0.1")
        ['gzip', 'br;q=0.9', 'identity;q=0.1']
    """
    return [token for token in _WHITESPACE.sub("", header).split(",") if token]


def split_header_values(values: Iterable[str]) -> list[str]:
    """Flatten several occurrences of one header into a single token list."""
    tokens: list[str] = []
    for value in values:
        tokens.extend(split_header_value(value))
    return tokens


def parse_value_tuple(token: str) -> ValueTuple:
    """Parse ``name;param=value;...`` into a ValueTuple.

    ``q`` is parsed as a float clamped to [0, 1] (unparseable or non-finite
    weights become ``0.0``); every other parameter value is kept as an
    opaque string. A parameter with no ``=`` is stored with an empty value.
    No default ``q`` is inserted.
    """
    value, *segments = token.split(";")
    properties: dict[str, str | float] = {}
    for segment in segments:
        if not segment:
            continue
        name, _, raw = segment.partition("=")
        if name == "q":
            properties[name] = coerce_q(raw)
        else:
            properties[name] = raw
    return ValueTuple(value, properties)


def parse_header(header: str) -> list[ValueTuple]:
    """Shorthand: ``split_header_value`` then ``parse_value_tuple`` each token."""
    return [parse_value_tuple(token) for token in split_header_value(header)]


def _format_param(value: str | float) -> str:
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return value


def format_value_tuple(vt: ValueTuple) -> str:
    """Serialize a ValueTuple back to header syntax (``br;q=0.9``)."""
    parts = [vt.value]
    parts.extend(f"{name}={_format_param(value)}" for name, value in vt.properties.items())
    return ";".join(parts)


def format_header_value(tuples: Iterable[ValueTuple]) -> str:
    """Serialize ValueTuples to a ``,``-delimited header value."""
    return ", ".join(format_value_tuple(vt) for vt in tuples)


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header (e.g. repeated ``Accept``).
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        object.__setattr__(self, "_raw", raw)

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[tuple[str, str] | Mapping[str, str]],
    ) -> Headers:
        """Build Headers from ``(name, value)`` pairs or ``{key, value}`` records.

        The record shape is what gateway-style event payloads carry for
        repeated headers::

            Headers.from_pairs([{"key": "Accept", "value": "text/html"}])
        """
        raw: list[tuple[bytes, bytes]] = []
        for pair in pairs:
            if isinstance(pair, Mapping):
                name, value = pair["key"], pair["value"]
            else:
                name, value = pair
            raw.append((name.encode("latin-1"), value.encode("latin-1")))
        return cls(tuple(raw))

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower().encode("latin-1")
        for name, value in self._raw:
            if name.lower() == key_lower:
                return value.decode("latin-1")
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower().encode("latin-1")
        return any(name.lower() == key_lower for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.decode("latin-1").lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*, in the order they arrived."""
        key_lower = key.lower().encode("latin-1")
        return [value.decode("latin-1") for name, value in self._raw if name.lower() == key_lower]

    def get_tokens(self, key: str) -> list[str]:
        """Return every list element across all occurrences of *key*."""
        return split_header_values(self.get_list(key))

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Access raw header byte pairs for ASGI compatibility."""
        return self._raw
