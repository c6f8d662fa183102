"""Affiliate link resolver package."""

from .errors import (
    InvalidInputError,
    MalformedRedirectTargetError,
    NetworkError,
    ResolutionError,
    TooManyHopsError,
)
from .resolver import AffiliateResolver, Resolution, resolve
from .url_tools import Platform, clean_url, detect_platform

__all__ = [
    "AffiliateResolver",
    "Resolution",
    "resolve",
    "Platform",
    "clean_url",
    "detect_platform",
    "ResolutionError",
    "InvalidInputError",
    "NetworkError",
    "TooManyHopsError",
    "MalformedRedirectTargetError",
]

__version__ = "0.1.0"
