"""Three-component feature versions with lenient parsing.

A feature version has the form ``major.minor.patch[-qualifier]``:

- the *major* version is bumped for breaking changes; only equal majors interoperate.
- the *minor* version is bumped for feature removals; peers must agree exactly.
- the *patch* version is bumped for additive changes and is never compared.

Parsing never raises on malformed text: a component that is not a whole number
is read as ``0``, so a peer speaking some future format degrades to an
incompatible verdict instead of an error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import total_ordering
from typing import Optional, Tuple

from peer_compat.core.logging import get_logger

LOG = get_logger(__name__)

QUALIFIER_SEPARATOR = "-"
COMPONENT_SEPARATOR = "."

# Rank of well-known qualifiers relative to a plain release (None).
_QUALIFIER_RANKS = {
    "alpha": 0,
    "a": 0,
    "beta": 1,
    "b": 1,
    "milestone": 2,
    "m": 2,
    "rc": 3,
    "cr": 3,
    "snapshot": 4,
    "ga": 5,
    "final": 5,
    "release": 5,
    "sp": 6,
}
_RELEASE_RANK = 5
_UNKNOWN_RANK = 7


def _parse_component(raw: str, text: str, position: str) -> int:
    raw = raw.strip()
    if raw.isascii() and raw.isdigit():
        return int(raw)
    LOG.debug("Unparseable version component", text=text, position=position, component=raw)
    return 0


@total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class FeatureVersion:
    """Parsed version of a single feature."""

    major: int
    minor: int = 0
    patch: int = 0
    qualifier: Optional[str] = None
    text: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if self.qualifier == "":
            object.__setattr__(self, "qualifier", None)
        if not self.text:
            text = f"{self.major}.{self.minor}.{self.patch}"
            if self.qualifier:
                text = f"{text}{QUALIFIER_SEPARATOR}{self.qualifier}"
            object.__setattr__(self, "text", text)

    @classmethod
    def parse(cls, text: str) -> "FeatureVersion":
        """Parse ``text`` without ever failing; bad components fall back to 0."""

        original = text
        text = text.strip()
        numeric, sep, qualifier = text.partition(QUALIFIER_SEPARATOR)
        components = numeric.split(COMPONENT_SEPARATOR)
        if len(components) > 3:
            LOG.debug("Ignoring extra version components", text=original, extra=components[3:])
        components = (components + ["0", "0"])[:3]
        major, minor, patch = (
            _parse_component(raw, original, position)
            for raw, position in zip(components, ("major", "minor", "patch"))
        )
        return cls(
            major=major,
            minor=minor,
            patch=patch,
            qualifier=qualifier if sep and qualifier else None,
            text=text,
        )

    @classmethod
    def of(cls, major: int, minor: int = 0, patch: int = 0, qualifier: Optional[str] = None) -> "FeatureVersion":
        """Build a version from its components, rendering the canonical text."""

        return cls(major=major, minor=minor, patch=patch, qualifier=qualifier)

    @property
    def triple(self) -> Tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def _sort_key(self) -> Tuple[int, int, int, int, str]:
        if self.qualifier is None:
            return (*self.triple, _RELEASE_RANK, "")
        lowered = self.qualifier.lower()
        rank = _QUALIFIER_RANKS.get(lowered, _UNKNOWN_RANK)
        return (*self.triple, rank, lowered if rank == _UNKNOWN_RANK else "")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FeatureVersion):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __lt__(self, other: "FeatureVersion") -> bool:
        if not isinstance(other, FeatureVersion):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        return self.text


__all__ = ["FeatureVersion", "QUALIFIER_SEPARATOR"]
