"""Conneg exception hierarchy.

Negotiation itself never raises: "nothing acceptable" is an empty ranking
or ``None``. These types cover invalid configuration and the optional
strict request-level adapters that surface a 406.
"""

from dataclasses import dataclass


class ConnegError(Exception):
    """Base for all conneg-specific errors."""


class ConfigurationError(ConnegError):
    """Raised when a ``NegotiationConfig`` is invalid.

    Typically raised from ``NegotiationConfig.__post_init__``.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(ConnegError):
    """An error that maps directly to an HTTP status code."""

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotAcceptable(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """406 — no server representation satisfies the client's preferences.

    Carries a ``Vary`` header naming the request header that was
    negotiated, so caches key the error on it.
    """

    def __init__(self, header: str, detail: str = "") -> None:
        default_detail = f"No acceptable representation for {header}"
        super().__init__(
            status=406,
            detail=detail or default_detail,
            headers=(("Vary", header),),
        )
