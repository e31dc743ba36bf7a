"""Compatibility-version model and its comparison algorithm."""

from .compatibility import (
    LEGACY_SENTINEL,
    VERSION_SEPARATOR,
    CompatibilityVersion,
    current,
    current_compatible,
    from_string,
)
from .features import Feature, catalog, register_version_provider
from .ranges import UNBOUNDED_RANGE, VersionRange
from .version import FeatureVersion

__all__ = [
    "CompatibilityVersion",
    "Feature",
    "FeatureVersion",
    "LEGACY_SENTINEL",
    "UNBOUNDED_RANGE",
    "VERSION_SEPARATOR",
    "VersionRange",
    "catalog",
    "current",
    "current_compatible",
    "from_string",
    "register_version_provider",
]
