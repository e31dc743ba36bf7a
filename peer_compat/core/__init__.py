"""Core utilities for configuration, logging, verification, and errors."""

__all__ = [
    "config",
    "logging",
    "verification",
    "errors",
]
