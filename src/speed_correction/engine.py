from math import isfinite

import numpy as np
from numpy.typing import ArrayLike

from .config import ANGLE_POLICY
from .defs import FULL_TURN, HALF_TURN, AnglePolicy, BracketKind
from .table import CalibrationTable, fold_angle


class InvalidInputError(ValueError):
    def __init__(self, what: str, value: float, reason: str) -> None:
        super().__init__(f"Invalid {what} {value}: {reason}")
        self.what = what
        self.value = value


class CorrectionEngine:
    """
    Corrects raw anemometer speeds for the direction the wind strikes the
    cups from, by bilinear interpolation over a calibration table: first
    along the angle axis at the two bracketing speed sites, then along the
    speed axis between them.
    """

    def __init__(
        self,
        table: CalibrationTable,
        angle_policy: AnglePolicy = ANGLE_POLICY,
    ) -> None:
        self.table = table
        self.angle_policy = AnglePolicy(angle_policy)

    def __repr__(self) -> str:
        return f"CorrectionEngine(table={self.table.name!r}, policy={self.angle_policy})"

    # == Public API == #

    def correct_speed(self, raw_speed: float, angle: float) -> float:
        """Returns the corrected speed, in the unit of `raw_speed`."""

        raw_speed = _as_float("speed", raw_speed)
        self._check_speed(raw_speed)
        correction_angle = self.fold(angle)

        bracket = self.table.bracket(raw_speed)

        if bracket.kind is BracketKind.BELOW:
            return float(raw_speed)

        low = self.table.interpolate_angle(bracket.low, correction_angle)
        high = self.table.interpolate_angle(bracket.high, correction_angle)

        blended = low + bracket.factor * (high - low)
        return float(raw_speed + blended / self.table.scale)

    def correction(self, raw_speed: float, angle: float) -> float:
        """Signed correction applied to `raw_speed`, in true units."""
        return self.correct_speed(raw_speed, angle) - raw_speed

    def correct_speeds(self, raw_speeds: ArrayLike, angles: ArrayLike) -> np.ndarray:
        """Element-wise `correct_speed` over broadcastable arrays."""

        (speeds, angles) = np.broadcast_arrays(
            np.asarray(raw_speeds, dtype=float),
            np.asarray(angles, dtype=float),
        )

        _check_all("speed", speeds, speeds >= 0, "speed must not be negative")
        correction_angles = self.fold_all(angles)

        (low, high, factor) = self.table.bracket_indices(speeds)
        low_correction = self.table.interpolate_angles(low, correction_angles)
        high_correction = self.table.interpolate_angles(high, correction_angles)

        blended = low_correction + factor * (high_correction - low_correction)
        corrected = speeds + blended / self.table.scale

        return np.where(speeds <= self.table.thresholds[0], speeds, corrected)

    def fold(self, angle: float) -> float:
        """Applies the angle policy, then folds onto [0, 180]."""

        angle = _as_float("angle", angle)

        if not isfinite(angle):
            raise InvalidInputError("angle", angle, "angle must be finite")

        if angle < 0:
            raise InvalidInputError("angle", angle, "angle must not be negative")

        if angle > FULL_TURN:
            match self.angle_policy:
                case AnglePolicy.Reject:
                    raise InvalidInputError(
                        "angle", angle, f"angle must not exceed {FULL_TURN:g}°"
                    )
                case AnglePolicy.Wrap:
                    angle = angle % FULL_TURN

        return fold_angle(angle)

    def fold_all(self, angles: np.ndarray) -> np.ndarray:
        """Vectorized `fold`."""

        _check_all("angle", angles, angles >= 0, "angle must not be negative")

        match self.angle_policy:
            case AnglePolicy.Reject:
                _check_all(
                    "angle",
                    angles,
                    angles <= FULL_TURN,
                    f"angle must not exceed {FULL_TURN:g}°",
                )
            case AnglePolicy.Wrap:
                angles = np.where(angles > FULL_TURN, angles % FULL_TURN, angles)

        return np.where(angles > HALF_TURN, HALF_TURN - (angles - HALF_TURN), angles)

    # == Private API == #

    def _check_speed(self, raw_speed: float) -> None:
        if not isfinite(raw_speed):
            raise InvalidInputError("speed", raw_speed, "speed must be finite")

        if raw_speed < 0:
            raise InvalidInputError("speed", raw_speed, "speed must not be negative")


def _as_float(what: str, value: float) -> float:
    try:
        return float(value)

    except OverflowError:
        raise InvalidInputError(what, value, f"{what} must be finite") from None


def _check_all(what: str, values: np.ndarray, valid: np.ndarray, reason: str) -> None:
    """Raises for the first non-finite value, then for the first invalid one."""

    finite = np.isfinite(values)

    if not finite.all():
        value = values[~finite].flat[0]
        raise InvalidInputError(what, float(value), f"{what} must be finite")

    if not valid.all():
        value = values[~valid].flat[0]
        raise InvalidInputError(what, float(value), reason)
