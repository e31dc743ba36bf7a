"""Compatibility version exchanged between peers before they interoperate.

The compatibility version is a list of feature versions joined by ``;``, one per
:class:`~peer_compat.protocol.features.Feature` in catalog order. Partitioning
the version by feature lets one feature change (say, a removed translation
key) without touching the others.

There is always at least one part, the ``ROOT`` version. If the root versions
are incompatible, every other feature is incompatible too.

A receiver accepts any number of parts, including more than the features it
knows about; the extras belong to features added by newer releases and are
ignored. Fewer parts means the peer does not know the trailing features.
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Callable, Dict, Generic, Mapping, Optional, TypeVar, Union

from peer_compat.core.config import get_settings
from peer_compat.core.errors import ConfigurationError
from peer_compat.core.logging import get_logger
from peer_compat.core.verification import verify, verify_strict
from peer_compat.protocol.features import Feature, catalog
from peer_compat.protocol.ranges import UNBOUNDED_RANGE, RangeLike, VersionRange, coerce_range
from peer_compat.protocol.version import FeatureVersion

LOG = get_logger(__name__)

VERSION_SEPARATOR = ";"
# Releases predating the versioned protocol sent this marker; they are 1.0.0 throughout.
LEGACY_SENTINEL = "yes"
LEGACY_VERSION = "1.0.0;1.0.0;1.0.0"

T = TypeVar("T")


class _Lazy(Generic[T]):
    """Compute-once cell; concurrent first access still builds a single value."""

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._value: Optional[T] = None

    def get(self) -> T:
        value = self._value
        if value is None:
            with self._lock:
                value = self._value
                if value is None:
                    value = self._factory()
                    self._value = value
        return value


class CompatibilityVersion:
    """Immutable snapshot of one endpoint's feature versions."""

    __slots__ = ("_versions",)

    def __init__(self, versions: Mapping[Feature, FeatureVersion]) -> None:
        ordered = {feature: versions[feature] for feature in catalog() if feature in versions}
        self._versions: Mapping[Feature, FeatureVersion] = MappingProxyType(ordered)

    @classmethod
    def of(cls, versions: Mapping[Feature, Union[FeatureVersion, str]]) -> "CompatibilityVersion":
        """Build a snapshot from feature versions or their text."""

        return cls({
            feature: version if isinstance(version, FeatureVersion) else FeatureVersion.parse(version)
            for feature, version in versions.items()
        })

    @classmethod
    def from_string(cls, version: str) -> "CompatibilityVersion":
        """Parse a peer's wire string. Malformed parts never raise in production."""

        if version == LEGACY_SENTINEL:
            LOG.warning("Peer sent legacy compatibility marker", marker=version, assumed=LEGACY_VERSION)
            version = LEGACY_VERSION

        parts = version.split(VERSION_SEPARATOR)
        while parts and not parts[-1].strip():
            parts.pop()
        verify_strict(len(parts) > 0, "Missing root version in version string %r", version)

        features = catalog()
        if len(parts) > len(features):
            LOG.debug("Ignoring unknown trailing features", known=len(features), received=len(parts))

        return cls({feature: FeatureVersion.parse(part) for feature, part in zip(features, parts)})

    def get(self, feature: Feature) -> Optional[FeatureVersion]:
        return self._versions.get(feature)

    @property
    def features(self) -> tuple[Feature, ...]:
        return tuple(self._versions)

    def as_dict(self) -> Dict[str, str]:
        return {feature.value: str(version) for feature, version in self._versions.items()}

    def is_compatible(
        self,
        other: "CompatibilityVersion",
        feature: Feature,
        acceptable_range: Optional[RangeLike] = None,
    ) -> bool:
        """Return whether ``other`` may interoperate with us on ``feature``.

        The root feature's major versions must agree (its minor version is not
        checked); the requested feature must then agree on major and minor and
        fall inside ``acceptable_range`` (unbounded when omitted).
        """
        return self._is_compatible_raw(other, Feature.ROOT, UNBOUNDED_RANGE, check_minor=False) and (
            self._is_compatible_raw(other, feature, coerce_range(acceptable_range), check_minor=True)
        )

    def _is_compatible_raw(
        self,
        other: "CompatibilityVersion",
        feature: Feature,
        acceptable_range: VersionRange,
        *,
        check_minor: bool,
    ) -> bool:
        ours = self.get(feature)
        theirs = other.get(feature)
        if ours is None or theirs is None:
            LOG.debug(
                "Feature missing",
                feature=feature.value,
                ours=str(ours) if ours is not None else None,
                theirs=str(theirs) if theirs is not None else None,
            )
            return False

        if ours.major != theirs.major:
            LOG.debug("Major version mismatch", feature=feature.value, ours=str(ours), theirs=str(theirs))
            return False

        if get_settings().strict_validation:
            verify(
                acceptable_range.contains(ours),
                "Acceptable version range %s is not compatible with our own version %s",
                acceptable_range,
                ours,
            )

        if not acceptable_range.contains(theirs):
            LOG.debug(
                "Version outside acceptable range",
                feature=feature.value,
                theirs=str(theirs),
                acceptable_range=str(acceptable_range),
            )
            return False

        # Patch versions are additive and never compared.
        if check_minor and ours.minor != theirs.minor:
            LOG.debug("Minor version mismatch", feature=feature.value, ours=str(ours), theirs=str(theirs))
            return False
        return True

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, CompatibilityVersion):
            return NotImplemented
        return dict(self._versions) == dict(other._versions)

    def __hash__(self) -> int:
        return hash(frozenset(self._versions.items()))

    def __str__(self) -> str:
        return VERSION_SEPARATOR.join(str(version) for version in self._versions.values())

    def __repr__(self) -> str:
        return f"CompatibilityVersion({str(self)!r})"


def _build_current() -> CompatibilityVersion:
    versions: Dict[Feature, FeatureVersion] = {}
    for feature in catalog():
        try:
            text = feature.current_version()
        except Exception as exc:
            raise ConfigurationError(
                f"Could not determine local version of feature {feature.value!r}", feature=feature.value
            ) from exc
        # One wire part per feature; a separator here would shift every later feature.
        if not isinstance(text, str) or VERSION_SEPARATOR in text or not text.strip():
            raise ConfigurationError(
                f"Local version of feature {feature.value!r} is not a single version: {text!r}",
                feature=feature.value,
            )
        versions[feature] = FeatureVersion.parse(text)
    current_version = CompatibilityVersion(versions)
    LOG.info("Built current compatibility version", version=str(current_version))
    return current_version


_CURRENT: _Lazy[CompatibilityVersion] = _Lazy(_build_current)


def current() -> CompatibilityVersion:
    """Return this process's compatibility version, building it on first use."""

    return _CURRENT.get()


def from_string(version: str) -> CompatibilityVersion:
    return CompatibilityVersion.from_string(version)


def current_compatible(
    other: Union[str, CompatibilityVersion, None],
    feature: Feature,
    acceptable_range: Optional[RangeLike] = None,
) -> bool:
    """Return whether the peer's version (text or snapshot) is compatible with ours.

    ``None`` and blank text are treated as incompatible rather than as errors.
    """
    if other is None:
        return False
    if isinstance(other, str):
        if not other.strip():
            return False
        other = CompatibilityVersion.from_string(other)
    return current().is_compatible(other, feature, acceptable_range)


__all__ = [
    "CompatibilityVersion",
    "LEGACY_SENTINEL",
    "VERSION_SEPARATOR",
    "current",
    "current_compatible",
    "from_string",
]
