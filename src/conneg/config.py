"""Negotiation configuration.

NegotiationConfig is a frozen dataclass — immutable after creation,
validated once, safe to share between threads and requests.
"""

from dataclasses import dataclass

from conneg.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class NegotiationConfig:
    """Tunable weights and defaults for the high-level negotiators.

    All fields have sensible defaults. Override what you need::

        config = NegotiationConfig(identity_q=0.1, encoding_whitelist=frozenset({"gzip"}))
    """

    # Accept-Encoding
    identity_q: float = 1.0  # Weight of the implicit identity coding (RFC 7231 §5.3.4)
    encoding_whitelist: frozenset[str] | None = None

    # Accept — Apache-style defaults for wildcards without an explicit q
    full_wildcard_q: float = 0.01  # */*
    subtype_wildcard_q: float = 0.02  # type/*
    type_whitelist: frozenset[str] | None = None

    def __post_init__(self) -> None:
        for name in ("identity_q", "full_wildcard_q", "subtype_wildcard_q"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                msg = f"{name} must be within [0, 1], got {value!r}"
                raise ConfigurationError(msg)
        for name in ("encoding_whitelist", "type_whitelist"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, frozenset):
                object.__setattr__(self, name, frozenset(value))


DEFAULT_CONFIG = NegotiationConfig()
