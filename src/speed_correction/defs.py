from enum import Enum, StrEnum

# == Reference angles == #

REFERENCE_ANGLES = (0.0, 90.0, 180.0)
HALF_TURN = 180.0
FULL_TURN = 360.0
QUARTER_TURN = 90.0

# == Sentinels == #

MAX_SPEED_FLOAT = 999
MAX_SPEED_BYTE = 255


class Model(StrEnum):
    VantagePro2 = "vantage-pro-2"
    VantagePro2Lite = "vantage-pro-2-lite"


class AnglePolicy(StrEnum):
    Wrap = "wrap"
    Reject = "reject"
    Pass = "pass"


class BracketKind(Enum):
    BELOW = "below"
    WITHIN = "within"
    ABOVE = "above"


class Columns(StrEnum):
    Speed = "speed"
    Direction = "direction"
    CorrectedSpeed = "corrected_speed"


class SiteColumns(StrEnum):
    Speed = "speed"
    Zero = "deg_0"
    Ninety = "deg_90"
    OneEighty = "deg_180"
