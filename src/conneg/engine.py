"""Generic negotiation engine.

Iterates *server* offers in the outer loop, so a winner is always a
concrete value the server declared and never a client wildcard.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Sequence
from typing import NamedTuple

from conneg.matching import Comparator, Matcher, Strategy
from conneg.tuples import ValueTuple

logger = logging.getLogger("conneg.engine")


class Match(NamedTuple):
    """A server offer, the client preference that best matched it, and their score."""

    offer: ValueTuple
    preference: ValueTuple
    score: float


def rank(
    client_values: Sequence[ValueTuple],
    server_values: Sequence[ValueTuple],
    strategy: Strategy,
) -> list[Match]:
    """Score every server offer against the client preferences.

    For each offer the matching client tuples are sorted with the
    strategy's comparator (stable) and the first one is taken; the score
    is ``preference.q * offer.q``. Offers with no match or a score
    ``<= 0`` are dropped. The result is sorted by descending score, ties
    keeping server declaration order.
    """
    matches: list[Match] = []
    for sv in server_values:
        candidates = [cv for cv in client_values if strategy.match(sv, cv)]
        if not candidates:
            continue

        key = functools.cmp_to_key(functools.partial(strategy.compare, sv))
        best = sorted(candidates, key=key)[0]

        score = best.q * sv.q
        if score <= 0:
            logger.debug("Rejected %s via %s (score %s)", sv.value, best.value, score)
            continue
        matches.append(Match(sv, best, score))

    matches.sort(key=lambda m: m.score, reverse=True)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "%s ranking: %s",
            strategy.name,
            ", ".join(f"{m.offer.value}={m.score:g}" for m in matches) or "<empty>",
        )
    return matches


def perform_negotiation(
    client_values: Sequence[ValueTuple],
    server_values: Sequence[ValueTuple],
    matcher: Matcher,
    comparator: Comparator,
) -> list[ValueTuple]:
    """Rank the server values acceptable to the client, best first.

    Each result is a copy of a server tuple annotated with its ``score``.
    An empty list means nothing is mutually acceptable.
    """
    strategy = Strategy(getattr(matcher, "__name__", "custom"), matcher, comparator)
    return [m.offer.with_score(m.score) for m in rank(client_values, server_values, strategy)]
