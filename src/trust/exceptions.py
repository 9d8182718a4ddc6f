"""Custom exceptions for the trust aggregation engine.

The aggregation core sanitizes its inputs and never raises for bad signals.
These exceptions cover configuration and persistence failures only.
"""


class TrustError(Exception):
    """Base exception for all trust engine errors."""


class ProfileError(TrustError):
    """Raised when a weight profile table is malformed (negative or non-numeric weights)."""


class PersistenceError(TrustError):
    """Raised by the score store when a read or write cannot be performed."""
