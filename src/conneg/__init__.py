"""Conneg — HTTP content negotiation.

Chooses the representation that best satisfies both the client's stated
preferences (``Accept``, ``Accept-Encoding``) and the server's weighted
offers, following RFC 7231 §5.3, with Apache-style type map support.

Basic usage::

    from conneg import parse_header, perform_type_negotiation

    best = perform_type_negotiation(
        parse_header("text/html, application/json;q=0.9, */*"),
        parse_header("application/json;q=0.5, text/html"),
    )
    best.value  # "text/html"

From a request::

    from conneg import Headers, negotiate_encoding

    headers = Headers.from_pairs([("Accept-Encoding", "gzip, br")])
    negotiate_encoding(headers, ["br", "gzip;q=0.9"])
"""

__version__ = "0.1.0-dev"
__all__ = [
    "DEFAULT_CONFIG",
    "EXACT",
    "MEDIA_RANGE",
    "WILDCARD",
    "ConfigurationError",
    "ConnegError",
    "HTTPError",
    "Headers",
    "NegotiationConfig",
    "NotAcceptable",
    "Strategy",
    "TypeMapEntry",
    "ValueTuple",
    "format_header_value",
    "format_typemap",
    "negotiate_encoding",
    "negotiate_type",
    "negotiate_typemap",
    "parse_header",
    "parse_typemap",
    "parse_value_tuple",
    "perform_encoding_negotiation",
    "perform_negotiation",
    "perform_type_negotiation",
    "perform_typemap_negotiation",
    "split_header_value",
    "split_header_values",
    "with_implicit_identity",
]

# Public name -> defining module. Resolved on first access.
_LAZY_IMPORTS: dict[str, str] = {
    "DEFAULT_CONFIG": "conneg.config",
    "NegotiationConfig": "conneg.config",
    "ConfigurationError": "conneg.errors",
    "ConnegError": "conneg.errors",
    "HTTPError": "conneg.errors",
    "NotAcceptable": "conneg.errors",
    "EXACT": "conneg.matching",
    "MEDIA_RANGE": "conneg.matching",
    "WILDCARD": "conneg.matching",
    "Strategy": "conneg.matching",
    "ValueTuple": "conneg.tuples",
    "Headers": "conneg.http.headers",
    "format_header_value": "conneg.http.headers",
    "parse_header": "conneg.http.headers",
    "parse_value_tuple": "conneg.http.headers",
    "split_header_value": "conneg.http.headers",
    "split_header_values": "conneg.http.headers",
    "perform_negotiation": "conneg.engine",
    "perform_encoding_negotiation": "conneg.negotiators",
    "perform_type_negotiation": "conneg.negotiators",
    "perform_typemap_negotiation": "conneg.negotiators",
    "with_implicit_identity": "conneg.negotiators",
    "TypeMapEntry": "conneg.typemap",
    "format_typemap": "conneg.typemap",
    "parse_typemap": "conneg.typemap",
    "negotiate_encoding": "conneg.http.negotiate",
    "negotiate_type": "conneg.http.negotiate",
    "negotiate_typemap": "conneg.http.negotiate",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import conneg`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
