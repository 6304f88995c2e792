"""Matchers and comparators.

A matcher decides whether one server tuple satisfies one client tuple and
is invoked as ``match(server, client)``. A comparator picks the client
tuple that *best* satisfies a server tuple: ``compare(server, a, b)``
returns a negative number when ``a`` is preferable, ``0`` when they are
equivalent and a positive number when ``b`` is preferable. Comparators
are only ever handed client tuples that already passed the paired
matcher against the same server tuple.

Matchers and comparators always travel together as a ``Strategy``:
``Accept`` uses ``MEDIA_RANGE``, ``Accept-Encoding`` uses ``WILDCARD``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

from conneg.tuples import ValueTuple

Matcher: TypeAlias = Callable[[ValueTuple, ValueTuple], bool]
Comparator: TypeAlias = Callable[[ValueTuple, ValueTuple, ValueTuple], int]

WILDCARD_TOKEN = "*"


def _sign(x: float) -> int:
    return (x > 0) - (x < 0)


# -- Parameters --


def parameter_match(server: ValueTuple, client: ValueTuple) -> bool:
    """Check the parameter sets of *server* and *client* against each other.

    Every server parameter the client also names must carry the same
    value; a parameter the client omits is accepted implicitly. The
    client may not name a parameter the server never declared. ``q`` is
    ignored on both sides.
    """
    sp = server.properties
    cp = client.properties

    for name, value in sp.items():
        if name == "q" or name not in cp:
            continue
        if cp[name] != value:
            return False

    return all(name == "q" or name in sp for name in cp)


def parameter_compare(server: ValueTuple, a: ValueTuple, b: ValueTuple) -> int:
    """Prefer the client tuple sharing more parameters with *server*, then higher ``q``."""
    sp = server.properties
    a_count = sum(1 for name in a.properties if name != "q" and name in sp)
    b_count = sum(1 for name in b.properties if name != "q" and name in sp)
    if a_count != b_count:
        return _sign(b_count - a_count)
    return _sign(b.q - a.q)


# -- Exact values --


def exact_value_match(server: ValueTuple, client: ValueTuple) -> bool:
    return server.value == client.value and parameter_match(server, client)


def exact_value_compare(server: ValueTuple, a: ValueTuple, b: ValueTuple) -> int:
    return parameter_compare(server, a, b)


# -- Wildcards --


def wildcard_value_match(server: ValueTuple, client: ValueTuple) -> bool:
    """Match equal values, or any server value against a client ``*``.

    Asymmetric: a server ``*`` is not satisfied by a literal client value.
    """
    if server.value != client.value and client.value != WILDCARD_TOKEN:
        return False
    return parameter_match(server, client)


def wildcard_value_compare(server: ValueTuple, a: ValueTuple, b: ValueTuple) -> int:
    """Literal values outrank ``*``; otherwise fall back to parameters."""
    a_wild = a.value == WILDCARD_TOKEN
    b_wild = b.value == WILDCARD_TOKEN
    if a_wild != b_wild:
        return 1 if a_wild else -1
    return parameter_compare(server, a, b)


# -- Media ranges --

_NO_PARAMS: dict[str, str | float] = {}


def _split_media_range(vt: ValueTuple) -> tuple[ValueTuple, ValueTuple]:
    """Split ``type/subtype`` into a bare type tuple and a subtype tuple with the params."""
    main, _, sub = vt.value.partition("/")
    return ValueTuple(main, _NO_PARAMS), ValueTuple(sub, vt.properties)


def media_range_value_match(server: ValueTuple, client: ValueTuple) -> bool:
    """Match ``type/subtype`` ranges, e.g. ``text/plain`` against ``text/*``."""
    s_type, s_sub = _split_media_range(server)
    c_type, c_sub = _split_media_range(client)
    return wildcard_value_match(s_type, c_type) and wildcard_value_match(s_sub, c_sub)


def media_range_value_compare(server: ValueTuple, a: ValueTuple, b: ValueTuple) -> int:
    """Order by type specificity, then subtype specificity, parameters and ``q``.

    exact/exact > exact/* > */exact > */*.
    """
    s_type, s_sub = _split_media_range(server)
    a_type, a_sub = _split_media_range(a)
    b_type, b_sub = _split_media_range(b)

    c = wildcard_value_compare(s_type, a_type, b_type)
    if c != 0:
        return c
    return wildcard_value_compare(s_sub, a_sub, b_sub)


def is_wildcard(vt: ValueTuple) -> bool:
    """Whether a client tuple is ``*``, ``*/*`` or ``type/*``."""
    main, _, sub = vt.value.partition("/")
    return main == WILDCARD_TOKEN or sub == WILDCARD_TOKEN


@dataclass(frozen=True, slots=True)
class Strategy:
    """A matcher paired with the comparator that ranks its matches."""

    name: str
    match: Matcher
    compare: Comparator


EXACT = Strategy("exact", exact_value_match, exact_value_compare)
WILDCARD = Strategy("wildcard", wildcard_value_match, wildcard_value_compare)
MEDIA_RANGE = Strategy("media-range", media_range_value_match, media_range_value_compare)
