"""ValueTuple — the unit every negotiation works on.

List-valued HTTP headers are made of ``,``-separated values, each with
optional ``;``-separated parameters. ``Accept-Encoding: gzip, br;q=0.9``
becomes::

    [ValueTuple("gzip"), ValueTuple("br", {"q": 0.9})]

The ``q`` parameter is ordinary data inside ``properties``; the ``q``
property reads it with the RFC default of 1.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


def coerce_q(raw: object) -> float:
    """Parse a quality weight, clamped to [0, 1].

    Unparseable and non-finite weights (``nan``, ``inf``) become ``0.0``.
    """
    try:
        q = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(q):
        return 0.0
    return min(max(q, 0.0), 1.0)


@dataclass(frozen=True, slots=True)
class ValueTuple:
    """A header value plus its parameters. Immutable after creation.

    ``properties`` is copied into a read-only mapping on construction, so
    mutating the mapping a tuple was built from never reaches the tuple.
    ``score`` is only set on tuples produced by negotiation. Tuples are
    hashable and can be used in sets and as dict keys.
    """

    value: str
    properties: Mapping[str, str | float] = field(default_factory=dict)
    score: float | None = None

    def __post_init__(self) -> None:
        props = dict(self.properties)
        if "q" in props:
            props["q"] = coerce_q(props["q"])
        object.__setattr__(self, "properties", MappingProxyType(props))

    def __hash__(self) -> int:
        return hash((self.value, frozenset(self.properties.items()), self.score))

    @property
    def q(self) -> float:
        """Quality weight, ``1.0`` when unspecified."""
        return self.properties.get("q", 1.0)  # type: ignore[return-value]

    @property
    def has_explicit_q(self) -> bool:
        return "q" in self.properties

    def with_score(self, score: float) -> ValueTuple:
        """Return a copy annotated with a negotiation score."""
        return ValueTuple(self.value, self.properties, score)

    def with_q(self, q: float) -> ValueTuple:
        """Return a copy whose properties carry an explicit ``q``."""
        return ValueTuple(self.value, {**self.properties, "q": float(q)}, self.score)

    def __str__(self) -> str:
        from conneg.http.headers import format_value_tuple

        return format_value_tuple(self)
