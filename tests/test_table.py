import numpy as np
import pytest

from speed_correction.defs import BracketKind
from speed_correction.table import (
    CalibrationError,
    CalibrationRow,
    CalibrationTable,
    fold_angle,
)

SITES = [(10, 1.0, -1.0, -2.0), (20, 2.0, -2.0, -4.0)]


@pytest.fixture
def table() -> CalibrationTable:
    return CalibrationTable.from_sites(SITES, max_speed=100, name="small")


def test_from_sites_adds_sentinels(table: CalibrationTable):
    assert len(table) == 4
    assert table.rows[0] == CalibrationRow(0, 0, 0, 0)
    assert table.rows[-1] == CalibrationRow(100, 2.0, -2.0, -4.0)
    assert [r.speed_threshold for r in table.sites] == [10, 20]
    assert table.max_site_speed == 20


def test_views_are_read_only(table: CalibrationTable):
    with pytest.raises(ValueError):
        table.thresholds[1] = 5

    with pytest.raises(ValueError):
        table.corrections[1, 0] = 5


@pytest.mark.parametrize("attribute", ["scale", "name"])
def test_attributes_are_read_only(table: CalibrationTable, attribute: str):
    with pytest.raises(AttributeError):
        setattr(table, attribute, 0)

    assert table.scale == 1
    assert table.name == "small"


def test_row_correction_at_reference_angle():
    row = CalibrationRow(20, 3.3, -2.3, -3.6)

    assert row.correction_at(0) == 3.3
    assert row.correction_at(90) == -2.3
    assert row.correction_at(180) == -3.6

    with pytest.raises(ValueError, match="Not a reference angle"):
        row.correction_at(45)


# == Bracket == #


def test_bracket_zero_speed(table: CalibrationTable):
    bracket = table.bracket(0)
    assert bracket.kind is BracketKind.BELOW
    assert (bracket.low, bracket.high) == (0, 0)


def test_bracket_below_first_site(table: CalibrationTable):
    bracket = table.bracket(5)
    assert bracket.kind is BracketKind.WITHIN
    assert (bracket.low, bracket.high) == (0, 1)
    assert bracket.factor == pytest.approx(0.5)


def test_bracket_exact_threshold_selects_high(table: CalibrationTable):
    bracket = table.bracket(10)
    assert (bracket.low, bracket.high) == (0, 1)
    assert bracket.factor == 1.0


def test_bracket_between_sites(table: CalibrationTable):
    bracket = table.bracket(12.5)
    assert (bracket.low, bracket.high) == (1, 2)
    assert bracket.factor == pytest.approx(0.25)


def test_bracket_beyond_sentinel(table: CalibrationTable):
    bracket = table.bracket(1000)
    assert bracket.kind is BracketKind.ABOVE
    assert (bracket.low, bracket.high) == (2, 3)
    assert bracket.factor == 1.0


def test_bracket_indices_match_bracket(table: CalibrationTable):
    speeds = np.array([0.5, 5, 10, 12.5, 20, 60, 100, 1000])
    (low, high, factor) = table.bracket_indices(speeds)

    for i, speed in enumerate(speeds):
        bracket = table.bracket(speed)
        assert (low[i], high[i]) == (bracket.low, bracket.high)
        assert factor[i] == pytest.approx(bracket.factor)


# == Angle interpolation == #


def test_interpolate_angle(table: CalibrationTable):
    assert table.interpolate_angle(2, 0) == 2.0
    assert table.interpolate_angle(2, 45) == pytest.approx(0.0)
    assert table.interpolate_angle(2, 90) == -2.0
    assert table.interpolate_angle(2, 135) == pytest.approx(-3.0)
    assert table.interpolate_angle(2, 180) == -4.0


def test_interpolate_angles_matches_scalar(table: CalibrationTable):
    angles = np.array([0, 30, 90, 120, 180], dtype=float)
    indices = np.array([1, 2, 2, 1, 3])

    result = table.interpolate_angles(indices, angles)

    for i, angle, value in zip(indices, angles, result):
        assert value == pytest.approx(table.interpolate_angle(i, angle))


@pytest.mark.parametrize(
    ("angle", "folded"),
    [(0, 0), (90, 90), (180, 180), (181, 179), (270, 90), (360, 0)],
)
def test_fold_angle(angle: float, folded: float):
    assert fold_angle(angle) == folded


# == Validation == #


def test_requires_sites():
    with pytest.raises(CalibrationError, match="no calibration sites"):
        CalibrationTable.from_sites([])


@pytest.mark.parametrize("site", [(20, 1.0, 2.0), (20, 1.0, 2.0, 3.0, 4.0)])
def test_rejects_malformed_site(site: tuple):
    with pytest.raises(CalibrationError, match=f"site 1 has {len(site)} values"):
        CalibrationTable.from_sites([(10, 1, 1, 1), site])


def test_requires_three_rows():
    rows = [CalibrationRow(0, 0, 0, 0), CalibrationRow(999, 0, 0, 0)]

    with pytest.raises(CalibrationError, match="at least 3 rows"):
        CalibrationTable(rows)


def test_requires_zero_sentinel():
    rows = [
        CalibrationRow(0, 1, 0, 0),
        CalibrationRow(20, 1, 1, 1),
        CalibrationRow(999, 1, 1, 1),
    ]

    with pytest.raises(CalibrationError, match="zero sentinel"):
        CalibrationTable(rows)


def test_requires_increasing_thresholds():
    with pytest.raises(CalibrationError, match="strictly increase"):
        CalibrationTable.from_sites([(20, 1, 1, 1), (15, 1, 1, 1)])


def test_rejects_duplicate_thresholds():
    with pytest.raises(CalibrationError, match="strictly increase"):
        CalibrationTable.from_sites([(20, 1, 1, 1), (20, 2, 2, 2)])


def test_rejects_sentinel_below_last_site():
    with pytest.raises(CalibrationError, match="strictly increase"):
        CalibrationTable.from_sites([(20, 1, 1, 1), (300, 2, 2, 2)], max_speed=255)


def test_requires_flat_top_sentinel():
    rows = [
        CalibrationRow(0, 0, 0, 0),
        CalibrationRow(20, 1, 1, 1),
        CalibrationRow(999, 2, 2, 2),
    ]

    with pytest.raises(CalibrationError, match="repeat the corrections"):
        CalibrationTable(rows)


def test_rejects_non_finite_values():
    with pytest.raises(CalibrationError, match="non-finite"):
        CalibrationTable.from_sites([(20, float("nan"), 1, 1)])


@pytest.mark.parametrize("scale", [0, -10, float("inf")])
def test_rejects_invalid_scale(scale: float):
    with pytest.raises(CalibrationError, match="scale"):
        CalibrationTable.from_sites(SITES, scale=scale)


def test_error_is_value_error():
    with pytest.raises(ValueError):
        CalibrationTable.from_sites([])
