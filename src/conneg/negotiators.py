"""Header-specific negotiation built on the generic engine.

- ``perform_encoding_negotiation`` — ``Accept-Encoding`` with the implicit
  ``identity`` coding of RFC 7231 §5.3.4.
- ``perform_type_negotiation`` — ``Accept`` media ranges with Apache's
  default wildcard weights.
- ``perform_typemap_negotiation`` — picks a typemap entry by its
  ``Content-Type`` variants.

None of these raise for "nothing acceptable": they return ``None``.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping, Sequence

from conneg.config import DEFAULT_CONFIG, NegotiationConfig
from conneg.engine import rank
from conneg.matching import MEDIA_RANGE, WILDCARD, is_wildcard, wildcard_value_match
from conneg.tuples import ValueTuple
from conneg.typemap import TypeMapEntry

logger = logging.getLogger("conneg.negotiation")

IDENTITY = "identity"
FULL_WILDCARD = "*/*"


def with_implicit_identity(
    client_values: Sequence[ValueTuple],
    identity_q: float = 1.0,
) -> list[ValueTuple]:
    """Prepend ``identity`` unless a client value already covers it.

    An explicit ``identity`` or ``*`` (including ``;q=0``) overrides the
    implicit default, so clients can still refuse unencoded content.
    """
    identity = ValueTuple(IDENTITY, {"q": identity_q})
    if any(wildcard_value_match(identity, cv) for cv in client_values):
        return list(client_values)
    return [identity, *client_values]


def _pick_max_q(
    server_values: Sequence[ValueTuple],
    whitelist: Collection[str] | None,
) -> ValueTuple | None:
    best: ValueTuple | None = None
    for sv in server_values:
        if whitelist is not None and sv.value != IDENTITY and sv.value not in whitelist:
            continue
        if sv.q <= 0:
            continue
        if best is None or sv.q > best.q:
            best = sv
    return best


def perform_encoding_negotiation(
    client_values: Sequence[ValueTuple],
    server_values: Sequence[ValueTuple],
    whitelist: Collection[str] | None = None,
    *,
    config: NegotiationConfig | None = None,
) -> ValueTuple | None:
    """Select a content coding for the response.

    With no ``Accept-Encoding`` values the client accepts anything: the
    server value with the highest ``q`` wins outright (first declared on
    ties), restricted to *whitelist* plus ``identity`` when given.
    """
    config = config or DEFAULT_CONFIG
    if whitelist is None:
        whitelist = config.encoding_whitelist

    if not client_values:
        best = _pick_max_q(server_values, whitelist)
        if best is None:
            logger.debug("No acceptable encoding among %d offers", len(server_values))
            return None
        return best.with_score(best.q)

    clients = with_implicit_identity(client_values, config.identity_q)
    ranked = rank(clients, server_values, WILDCARD)
    if not ranked:
        logger.debug("No acceptable encoding among %d offers", len(server_values))
        return None
    winner = ranked[0]
    return winner.offer.with_score(winner.score)


def apply_default_wildcard_weights(
    client_values: Sequence[ValueTuple],
    config: NegotiationConfig | None = None,
) -> list[ValueTuple]:
    """Give q-less wildcards Apache's low default weights.

    A wildcard type (``*/*``, ``*/html``, ``*``) gets ``full_wildcard_q``;
    a wildcard subtype (``text/*``) gets ``subtype_wildcard_q``.

    Only applies when no client value carries an explicit ``q``; otherwise
    the values come back unchanged. Never mutates the given tuples.
    """
    config = config or DEFAULT_CONFIG
    if any(cv.has_explicit_q for cv in client_values):
        return list(client_values)

    weighted: list[ValueTuple] = []
    for cv in client_values:
        main, _, sub = cv.value.partition("/")
        if main == "*":
            cv = cv.with_q(config.full_wildcard_q)
        elif sub == "*":
            cv = cv.with_q(config.subtype_wildcard_q)
        weighted.append(cv)
    return weighted


def perform_type_negotiation(
    client_values: Sequence[ValueTuple],
    server_values: Sequence[ValueTuple],
    whitelist: Collection[str] | None = None,
    *,
    config: NegotiationConfig | None = None,
) -> ValueTuple | None:
    """Select a media type for the response.

    No ``Accept`` values means ``*/*``. When *whitelist* is given, a
    result reached only through a client wildcard must have its server
    value in the whitelist; otherwise the next-ranked result is tried.
    """
    config = config or DEFAULT_CONFIG
    if whitelist is None:
        whitelist = config.type_whitelist

    clients = list(client_values) or [ValueTuple(FULL_WILDCARD)]
    clients = apply_default_wildcard_weights(clients, config)

    for match in rank(clients, server_values, MEDIA_RANGE):
        if whitelist is not None and is_wildcard(match.preference) and match.offer.value not in whitelist:
            logger.debug(
                "Skipped %s: matched only by %s and not whitelisted",
                match.offer.value,
                match.preference.value,
            )
            continue
        return match.offer.with_score(match.score)

    logger.debug("No acceptable media type among %d offers", len(server_values))
    return None


def perform_typemap_negotiation(
    client_headers: Mapping[str, Sequence[ValueTuple]],
    server_typemap: Sequence[TypeMapEntry],
    whitelist_map: Mapping[str, Collection[str]] | None = None,
    *,
    config: NegotiationConfig | None = None,
) -> TypeMapEntry | None:
    """Return the first typemap entry whose ``Content-Type`` the client accepts.

    *client_headers* and *whitelist_map* are keyed by lower-cased request
    header name (``accept``). Entries are tried in declaration order.
    """
    whitelist_map = whitelist_map or {}
    accept = client_headers.get("accept", ())
    whitelist = whitelist_map.get("accept")

    for entry in server_typemap:
        if perform_type_negotiation(accept, entry.get("content-type"), whitelist, config=config) is not None:
            logger.debug("Typemap selected %s", entry.uri)
            return entry

    logger.debug("No acceptable typemap entry among %d", len(server_typemap))
    return None
