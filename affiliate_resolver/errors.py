"""Error types raised while resolving a link."""

from __future__ import annotations


class ResolutionError(Exception):
    """Base class for failures surfaced to callers of the resolver."""


class InvalidInputError(ResolutionError):
    """The input is not a usable http(s) URL. Raised before any request is made."""


class NetworkError(ResolutionError):
    """Transport level failure (DNS, connect, TLS, timeout) on a hop."""


class TooManyHopsError(ResolutionError):
    """The hop ceiling was reached before the chain settled."""


class MalformedRedirectTargetError(ResolutionError):
    """A redirect target could not be turned into an absolute http(s) URL.

    Never leaves the resolver: the candidate is dropped and the next
    heuristic is tried.
    """


__all__ = [
    "ResolutionError",
    "InvalidInputError",
    "NetworkError",
    "TooManyHopsError",
    "MalformedRedirectTargetError",
]
