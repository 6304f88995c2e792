"""Request-level negotiation — reads headers, returns the chosen representation.

Thin wrappers that pull every occurrence of the relevant request header
out of a ``Headers`` (or any ``MultiValueMapping``), parse it and hand
it to the core negotiators::

    headers = Headers.from_pairs([("Accept-Encoding", "gzip, br;q=0.9")])
    negotiate_encoding(headers, ["br", "gzip;q=0.8", "identity;q=0.1"])

By default an unsatisfiable request yields ``None``. Pass ``strict=True``
to raise ``NotAcceptable`` (406) instead.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping, Sequence
from typing import TypeAlias

from conneg._internal.multimap import MultiValueMapping
from conneg.config import NegotiationConfig
from conneg.errors import NotAcceptable
from conneg.http.headers import parse_value_tuple, split_header_values
from conneg.negotiators import (
    IDENTITY,
    perform_encoding_negotiation,
    perform_type_negotiation,
    perform_typemap_negotiation,
)
from conneg.tuples import ValueTuple
from conneg.typemap import TypeMapEntry, negotiable_headers

Offer: TypeAlias = ValueTuple | str

# Typemap (response) header -> request header that negotiates it
_REQUEST_HEADERS = {
    "content-type": "accept",
    "content-encoding": "accept-encoding",
    "content-language": "accept-language",
    "content-charset": "accept-charset",
}


def _offers(offers: Iterable[Offer]) -> list[ValueTuple]:
    return [o if isinstance(o, ValueTuple) else parse_value_tuple(o) for o in offers]


def _client_values(headers: MultiValueMapping, name: str) -> list[ValueTuple]:
    return [parse_value_tuple(token) for token in split_header_values(headers.get_list(name))]


def negotiate_encoding(
    headers: MultiValueMapping,
    offers: Iterable[Offer],
    whitelist: Collection[str] | None = None,
    *,
    config: NegotiationConfig | None = None,
    strict: bool = False,
) -> ValueTuple | None:
    """Choose a content coding from the request's ``Accept-Encoding``.

    A header that is present but empty accepts only ``identity``.
    """
    clients = _client_values(headers, "Accept-Encoding")
    if not clients and "Accept-Encoding" in headers:
        clients = [ValueTuple(IDENTITY)]
    result = perform_encoding_negotiation(clients, _offers(offers), whitelist, config=config)
    if result is None and strict:
        raise NotAcceptable("Accept-Encoding")
    return result


def negotiate_type(
    headers: MultiValueMapping,
    offers: Iterable[Offer],
    whitelist: Collection[str] | None = None,
    *,
    config: NegotiationConfig | None = None,
    strict: bool = False,
) -> ValueTuple | None:
    """Choose a media type from the request's ``Accept``."""
    clients = _client_values(headers, "Accept")
    result = perform_type_negotiation(clients, _offers(offers), whitelist, config=config)
    if result is None and strict:
        raise NotAcceptable("Accept")
    return result


def negotiate_typemap(
    headers: MultiValueMapping,
    typemap: Sequence[TypeMapEntry],
    whitelist_map: Mapping[str, Collection[str]] | None = None,
    *,
    config: NegotiationConfig | None = None,
    strict: bool = False,
) -> TypeMapEntry | None:
    """Choose a typemap variant for the request.

    Client values are collected for every header the typemap declares,
    mapped to its request counterpart (``content-type`` -> ``accept``).
    """
    client_headers: dict[str, list[ValueTuple]] = {}
    for name in negotiable_headers(typemap):
        request_name = _REQUEST_HEADERS.get(name)
        if request_name is not None and request_name in headers:
            client_headers[request_name] = _client_values(headers, request_name)

    result = perform_typemap_negotiation(client_headers, typemap, whitelist_map, config=config)
    if result is None and strict:
        raise NotAcceptable("Accept")
    return result
