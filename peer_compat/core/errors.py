"""Exception hierarchy for compatibility negotiation."""

from __future__ import annotations

from typing import Optional


class CompatError(Exception):
    """Base error for the package."""


class ConfigurationError(CompatError):
    """Raised when local configuration or a version provider is unusable."""

    def __init__(self, message: str, *, feature: Optional[str] = None) -> None:
        super().__init__(message)
        self.feature = feature


class VerificationError(CompatError):
    """Raised when a strict-mode verification fails.

    This signals a bug in the calling code or a corrupted payload, never an
    ordinary incompatibility verdict.
    """


class InvalidVersionRangeError(CompatError, ValueError):
    """Raised when an acceptable-range specification cannot be parsed."""

    def __init__(self, message: str, *, spec: str) -> None:
        super().__init__(message)
        self.spec = spec


__all__ = [
    "CompatError",
    "ConfigurationError",
    "VerificationError",
    "InvalidVersionRangeError",
]
