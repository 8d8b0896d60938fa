from dataclasses import dataclass
from math import isfinite
from typing import Iterable, Sequence

import numpy as np

from .defs import (
    HALF_TURN,
    MAX_SPEED_FLOAT,
    QUARTER_TURN,
    REFERENCE_ANGLES,
    BracketKind,
)

MIN_ROWS = 3
SITE_LENGTH = 4

Site = tuple[float, float, float, float]


class CalibrationError(ValueError):
    """Raised when a calibration table violates its invariants."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Invalid calibration table '{name}': {reason}")
        self.name = name
        self.reason = reason


@dataclass(frozen=True)
class CalibrationRow:
    speed_threshold: float
    correction_at_0: float
    correction_at_90: float
    correction_at_180: float

    @property
    def corrections(self) -> tuple[float, float, float]:
        return (self.correction_at_0, self.correction_at_90, self.correction_at_180)

    def correction_at(self, angle: float) -> float:
        """Returns the stored correction for one of the three reference angles."""

        try:
            return self.corrections[REFERENCE_ANGLES.index(float(angle))]

        except ValueError:
            raise ValueError(
                f"Not a reference angle: {angle} (expected one of {REFERENCE_ANGLES})"
            ) from None


@dataclass(frozen=True)
class Bracket:
    low: int
    high: int
    kind: BracketKind
    factor: float


class CalibrationTable:
    """
    Speed correction sites for an anemometer, indexed by speed and by the
    0°, 90° and 180° reference angles.

    The first row is a zero-speed sentinel with no correction and the last
    row is a sentinel at the maximum representable speed, repeating the
    last real site so that correction stays flat above the calibrated range.
    Corrections are stored multiplied by `scale`.
    """

    def __init__(
        self,
        rows: Iterable[CalibrationRow],
        scale: float = 1,
        name: str = "custom",
    ) -> None:
        self._name = name
        self._scale = scale
        self._rows = tuple(rows)

        self._validate()

        thresholds = np.array([r.speed_threshold for r in self._rows], dtype=float)
        corrections = np.array([r.corrections for r in self._rows], dtype=float)
        thresholds.flags.writeable = False
        corrections.flags.writeable = False

        self._thresholds = thresholds
        self._corrections = corrections

    @classmethod
    def from_sites(
        cls,
        sites: Sequence[Site],
        scale: float = 1,
        max_speed: float = MAX_SPEED_FLOAT,
        name: str = "custom",
    ) -> "CalibrationTable":
        """
        Builds a table from real measurement sites given as
        `(speed, correction_at_0, correction_at_90, correction_at_180)`,
        adding the zero-speed and maximum-speed sentinels.
        """

        if not sites:
            raise CalibrationError(name, "no calibration sites")

        for i, site in enumerate(sites):
            if len(site) != SITE_LENGTH:
                raise CalibrationError(
                    name,
                    f"site {i} has {len(site)} values, expected {SITE_LENGTH} "
                    "(speed and corrections at 0°, 90° and 180°)",
                )

        (_, *last) = sites[-1]

        rows = [
            CalibrationRow(0, 0, 0, 0),
            *(CalibrationRow(*site) for site in sites),
            CalibrationRow(max_speed, *last),
        ]

        return cls(rows, scale=scale, name=name)

    # == Properties == #

    @property
    def name(self) -> str:
        return self._name

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def rows(self) -> tuple[CalibrationRow, ...]:
        return self._rows

    @property
    def sites(self) -> tuple[CalibrationRow, ...]:
        """The real calibration sites, without sentinels."""
        return self._rows[1:-1]

    @property
    def thresholds(self) -> np.ndarray:
        return self._thresholds

    @property
    def corrections(self) -> np.ndarray:
        return self._corrections

    @property
    def max_site_speed(self) -> float:
        return self._rows[-2].speed_threshold

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"CalibrationTable(name={self.name!r}, rows={len(self)}, scale={self.scale})"

    # == Lookup == #

    def bracket(self, speed: float) -> Bracket:
        """
        Selects the pair of rows surrounding `speed`: `high` is the first row
        whose threshold is not below `speed` and `low` the row before it.
        """

        if speed <= self._thresholds[0]:
            return Bracket(0, 0, BracketKind.BELOW, 0.0)

        last = len(self._rows) - 1
        high = int(np.searchsorted(self._thresholds, speed, side="left"))

        if high > last:
            return Bracket(last - 1, last, BracketKind.ABOVE, 1.0)

        low = high - 1
        (low_speed, high_speed) = self._thresholds[[low, high]]
        factor = float((speed - low_speed) / (high_speed - low_speed))

        return Bracket(low, high, BracketKind.WITHIN, factor)

    def bracket_indices(
        self, speeds: np.ndarray
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Vectorized `bracket`, returning `(low, high, factor)` arrays."""

        last = len(self._rows) - 1
        high = np.searchsorted(self._thresholds, speeds, side="left").clip(1, last)
        low = high - 1

        span = self._thresholds[high] - self._thresholds[low]
        factor = ((speeds - self._thresholds[low]) / span).clip(0.0, 1.0)

        return (low, high, factor)

    def interpolate_angle(self, index: int, angle: float) -> float:
        """Correction of a row at a folded angle, in stored units."""

        (c0, c90, c180) = self._corrections[index]

        if angle <= QUARTER_TURN:
            return float(c0 + (angle / QUARTER_TURN) * (c90 - c0))

        return float(c90 + ((angle - QUARTER_TURN) / QUARTER_TURN) * (c180 - c90))

    def interpolate_angles(self, indices: np.ndarray, angles: np.ndarray) -> np.ndarray:
        """Vectorized `interpolate_angle`."""

        rows = self._corrections[indices]
        (c0, c90, c180) = (rows[..., 0], rows[..., 1], rows[..., 2])

        lower = c0 + (angles / QUARTER_TURN) * (c90 - c0)
        upper = c90 + ((angles - QUARTER_TURN) / QUARTER_TURN) * (c180 - c90)

        return np.where(angles <= QUARTER_TURN, lower, upper)

    # == Validation == #

    def _validate(self) -> None:
        rows = self._rows

        if not (isfinite(self.scale) and self.scale > 0):
            self._fail(f"scale must be a positive number, got {self.scale}")

        if len(rows) < MIN_ROWS:
            self._fail(
                f"expected at least {MIN_ROWS} rows (two sentinels and one site), "
                f"got {len(rows)}"
            )

        for i, row in enumerate(rows):
            if not all(isfinite(v) for v in (row.speed_threshold, *row.corrections)):
                self._fail(f"row {i} contains a non-finite value: {row}")

        first = rows[0]

        if first.speed_threshold != 0 or any(c != 0 for c in first.corrections):
            self._fail(f"first row must be the zero sentinel, got {first}")

        for i, (prev, row) in enumerate(zip(rows, rows[1:]), start=1):
            if row.speed_threshold <= prev.speed_threshold:
                self._fail(
                    f"speed thresholds must strictly increase, row {i} "
                    f"({row.speed_threshold}) follows {prev.speed_threshold}"
                )

        (last_site, sentinel) = rows[-2:]

        if sentinel.corrections != last_site.corrections:
            self._fail(
                "last row must repeat the corrections of the last site "
                f"({last_site.corrections}), got {sentinel.corrections}"
            )

    def _fail(self, reason: str) -> None:
        raise CalibrationError(self.name, reason)


def fold_angle(angle: float) -> float:
    """Mirrors an angle in (180, 360] onto [0, 180) about the 180° axis."""

    if angle > HALF_TURN:
        return HALF_TURN - (angle - HALF_TURN)

    return angle
