"""Catalog of independently-versioned features.

The order of :class:`Feature` members is the order of versions on the wire, so
new features may only ever be appended. ``ROOT`` must stay first: its version
gates every other feature.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, Dict

from peer_compat.core.config import get_settings

VersionProvider = Callable[[], str]


class Feature(Enum):
    """Features tracked by the compatibility version, in wire order."""

    ROOT = "root"
    TRANSLATIONS = "translations"
    EMOJIS = "emojis"

    @property
    def wire_index(self) -> int:
        return _WIRE_ORDER.index(self)

    def current_version(self) -> str:
        """Return the locally-running version text for this feature."""
        return version_provider(self)()

    @classmethod
    def from_name(cls, name: str) -> "Feature":
        """Look up a feature by member name or value, case-insensitively."""
        lowered = name.strip().lower()
        for feature in cls:
            if lowered in (feature.value, feature.name.lower()):
                return feature
        raise KeyError(name)


_WIRE_ORDER = tuple(Feature)

_DEFAULT_PROVIDERS: Dict[Feature, VersionProvider] = {
    Feature.ROOT: lambda: get_settings().root_version,
    Feature.TRANSLATIONS: lambda: get_settings().translations_version,
    Feature.EMOJIS: lambda: get_settings().emojis_version,
}

_providers_lock = threading.Lock()
_providers: Dict[Feature, VersionProvider] = dict(_DEFAULT_PROVIDERS)


def register_version_provider(feature: Feature, provider: VersionProvider) -> None:
    """Install the host's producer of the local version for ``feature``.

    Providers are read once, when the current compatibility version is first built.
    """
    with _providers_lock:
        _providers[feature] = provider


def reset_version_providers() -> None:
    """Restore the settings-backed providers for every feature.

    Only meaningful before the current compatibility version is first built.
    """
    with _providers_lock:
        _providers.clear()
        _providers.update(_DEFAULT_PROVIDERS)


def version_provider(feature: Feature) -> VersionProvider:
    with _providers_lock:
        return _providers[feature]


def catalog() -> tuple[Feature, ...]:
    """Return every known feature in wire order, ``ROOT`` first."""
    return _WIRE_ORDER


if _WIRE_ORDER[0] is not Feature.ROOT or set(_DEFAULT_PROVIDERS) != set(_WIRE_ORDER):
    raise RuntimeError("Feature catalog must start with ROOT and have a provider for every feature")


__all__ = [
    "Feature",
    "VersionProvider",
    "catalog",
    "register_version_provider",
    "version_provider",
]
