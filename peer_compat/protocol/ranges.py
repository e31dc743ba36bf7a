"""Acceptable version ranges in interval notation.

A range spec is one or more comma-joined intervals::

    [0,)            anything >= 0
    [2.0,3.0)       2.0 <= v < 3.0
    (,1.0],[1.2,)   v <= 1.0 or v >= 1.2
    [1.5]           exactly 1.5

Square brackets are inclusive, parentheses exclusive, and an empty bound is
unbounded. Bounds are read with :meth:`FeatureVersion.parse`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from peer_compat.core.errors import InvalidVersionRangeError
from peer_compat.protocol.version import FeatureVersion

_OPENERS = "[("
_CLOSERS = "])"


@dataclass(frozen=True, slots=True)
class Interval:
    """A single interval of a version range."""

    lower: Optional[FeatureVersion]
    upper: Optional[FeatureVersion]
    lower_inclusive: bool = True
    upper_inclusive: bool = False

    def contains(self, version: FeatureVersion) -> bool:
        if self.lower is not None:
            if version < self.lower or (version == self.lower and not self.lower_inclusive):
                return False
        if self.upper is not None:
            if version > self.upper or (version == self.upper and not self.upper_inclusive):
                return False
        return True

    def __str__(self) -> str:
        if self.lower is not None and self.lower == self.upper:
            return f"[{self.lower}]"
        opener = "[" if self.lower_inclusive else "("
        closer = "]" if self.upper_inclusive else ")"
        lower = str(self.lower) if self.lower is not None else ""
        upper = str(self.upper) if self.upper is not None else ""
        return f"{opener}{lower},{upper}{closer}"


def _parse_bound(raw: str) -> Optional[FeatureVersion]:
    raw = raw.strip()
    return FeatureVersion.parse(raw) if raw else None


def _parse_interval(body: str, opener: str, closer: str, spec: str) -> Interval:
    lower_inclusive = opener == "["
    upper_inclusive = closer == "]"

    if "," not in body:
        if not (lower_inclusive and upper_inclusive) or not body.strip():
            raise InvalidVersionRangeError(f"Single-version interval must be written [v]: {spec!r}", spec=spec)
        pinned = FeatureVersion.parse(body)
        return Interval(pinned, pinned, True, True)

    lower_raw, _, upper_raw = body.partition(",")
    if "," in upper_raw:
        raise InvalidVersionRangeError(f"Interval has more than two bounds: {spec!r}", spec=spec)
    lower = _parse_bound(lower_raw)
    upper = _parse_bound(upper_raw)

    if lower is None and lower_inclusive:
        raise InvalidVersionRangeError(f"Unbounded lower limit must be exclusive: {spec!r}", spec=spec)
    if upper is None and upper_inclusive:
        raise InvalidVersionRangeError(f"Unbounded upper limit must be exclusive: {spec!r}", spec=spec)
    if lower is not None and upper is not None:
        if upper < lower or (upper == lower and not (lower_inclusive and upper_inclusive)):
            raise InvalidVersionRangeError(f"Interval is empty: {spec!r}", spec=spec)
    return Interval(lower, upper, lower_inclusive, upper_inclusive)


@dataclass(frozen=True, slots=True)
class VersionRange:
    """Union of intervals that a peer version must fall into."""

    intervals: Tuple[Interval, ...]

    @classmethod
    def from_spec(cls, spec: str) -> "VersionRange":
        """Parse an interval-notation spec, raising ``InvalidVersionRangeError`` on bad input."""

        rest = spec.strip()
        if not rest:
            raise InvalidVersionRangeError("Version range spec is blank", spec=spec)

        intervals: List[Interval] = []
        while rest:
            opener = rest[0]
            if opener not in _OPENERS:
                raise InvalidVersionRangeError(f"Expected '[' or '(' in range spec: {spec!r}", spec=spec)
            ends = [idx for idx in (rest.find(c) for c in _CLOSERS) if idx != -1]
            if not ends:
                raise InvalidVersionRangeError(f"Unterminated interval in range spec: {spec!r}", spec=spec)
            end = min(ends)
            intervals.append(_parse_interval(rest[1:end], opener, rest[end], spec))

            rest = rest[end + 1:].strip()
            if rest:
                if not rest.startswith(","):
                    raise InvalidVersionRangeError(f"Intervals must be separated by ',': {spec!r}", spec=spec)
                rest = rest[1:].strip()
                if not rest:
                    raise InvalidVersionRangeError(f"Trailing ',' in range spec: {spec!r}", spec=spec)

        return cls(tuple(intervals))

    def contains(self, version: Union[FeatureVersion, str]) -> bool:
        if isinstance(version, str):
            version = FeatureVersion.parse(version)
        return any(interval.contains(version) for interval in self.intervals)

    def __contains__(self, version: object) -> bool:
        if not isinstance(version, (FeatureVersion, str)):
            return False
        return self.contains(version)

    def __str__(self) -> str:
        return ",".join(str(interval) for interval in self.intervals)


UNBOUNDED_RANGE = VersionRange.from_spec("[0,)")

RangeLike = Union[VersionRange, str]


def coerce_range(value: Optional[RangeLike]) -> VersionRange:
    """Accept a ``VersionRange``, a spec string, or ``None`` (unbounded)."""

    if value is None:
        return UNBOUNDED_RANGE
    if isinstance(value, VersionRange):
        return value
    return VersionRange.from_spec(value)


__all__ = ["Interval", "VersionRange", "UNBOUNDED_RANGE", "RangeLike", "coerce_range"]
