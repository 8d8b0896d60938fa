from dataclasses import dataclass
from typing import Iterable

from .config import TOLERANCE
from .engine import CorrectionEngine

# Expected corrected speeds from the Davis Vantage Pro 2 calibration sheet.
# A few published results disagree with the sheet's own correction table;
# those are replaced by the table value and the published one noted.

SPEEDS = tuple(range(20, 151, 5))

EXPECTED_AT_0 = (
    23.3, 28.5, 33.8, 39.2, 44.5, 49.7, 55.0, 60.3, 65.7, 70.8, 76.2, 81.4, 86.8,
    92.1, 97.4, 102.5, 107.7, 113.2, 118.5, 123.9, 129.5, 135.0, 139.8, 144.8,
    149.3, 154.5, 159.8,
)  # fmt: skip

EXPECTED_AT_90 = (
    17.7,  # published 17.8
    22.3, 27.1, 31.6, 35.9, 41.2, 45.5, 50.2, 54.7, 59.0, 64.4, 69.0, 73.6, 77.6,
    82.0, 86.9, 92.1, 96.9, 101.5, 106.2, 110.6, 115.4,
    120.2,  # published 120.3
    125.0, 129.8, 134.1, 137.9,
)  # fmt: skip

EXPECTED_AT_180 = (
    16.4, 20.4,
    25.2,  # published 25.3
    29.7,  # published 29.8
    34.3, 40.5, 45.1, 49.8, 54.1, 59.0, 63.9, 68.2, 73.1, 78.2, 83.2, 87.5, 92.8,
    97.3, 102.3, 106.5, 111.0,
    115.2,  # published 115.3
    119.7, 124.0, 128.7, 134.5, 138.0,
)  # fmt: skip


@dataclass(frozen=True)
class Scenario:
    speed: float
    angle: float
    expected: float


@dataclass(frozen=True)
class ScenarioResult:
    scenario: Scenario
    actual: float
    passed: bool

    @property
    def error(self) -> float:
        return self.actual - self.scenario.expected


SITE_SCENARIOS: tuple[Scenario, ...] = tuple(
    Scenario(speed, angle, expected)
    for (angle, column) in (
        (0.0, EXPECTED_AT_0),
        (90.0, EXPECTED_AT_90),
        (180.0, EXPECTED_AT_180),
    )
    for (speed, expected) in zip(SPEEDS, column, strict=True)
)

INCREMENT_SCENARIOS: tuple[Scenario, ...] = (
    Scenario(20, 180.0, 16.4),
    Scenario(21, 180.0, 17.2),
    Scenario(22, 180.0, 18.0),
    Scenario(23, 180.0, 18.8),
    Scenario(24, 180.0, 19.6),
    Scenario(25, 180.0, 20.4),
)

ALL_SCENARIOS = SITE_SCENARIOS + INCREMENT_SCENARIOS


def run_scenario(
    engine: CorrectionEngine,
    scenario: Scenario,
    tolerance: float = TOLERANCE,
) -> ScenarioResult:
    actual = engine.correct_speed(scenario.speed, scenario.angle)
    passed = abs(actual - scenario.expected) <= tolerance
    return ScenarioResult(scenario, actual, passed)


def run_scenarios(
    engine: CorrectionEngine,
    scenarios: Iterable[Scenario] = ALL_SCENARIOS,
    tolerance: float = TOLERANCE,
) -> list[ScenarioResult]:
    return [run_scenario(engine, s, tolerance) for s in scenarios]
