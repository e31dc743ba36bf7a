"""Peer compatibility negotiation over multi-feature version strings."""

from importlib import metadata


def get_version() -> str:
    """Return the installed package version."""
    try:
        return metadata.version("peer-compat")
    except metadata.PackageNotFoundError:  # pragma: no cover - fallback for source checkouts
        return "0.0.0"


__all__ = ["get_version"]
