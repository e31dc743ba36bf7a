"""Verification helpers for checks that only run in development builds."""

from __future__ import annotations

from typing import Any

from peer_compat.core.config import get_settings
from peer_compat.core.errors import VerificationError


def verify(condition: bool, template: str, *args: Any) -> None:
    """Raise ``VerificationError`` with the formatted message unless ``condition`` holds."""

    if not condition:
        raise VerificationError(template % args if args else template)


def verify_strict(condition: bool, template: str, *args: Any) -> None:
    """Like :func:`verify`, but only when strict validation is enabled."""

    if get_settings().strict_validation:
        verify(condition, template, *args)


__all__ = ["verify", "verify_strict"]
