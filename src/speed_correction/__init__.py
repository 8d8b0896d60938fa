from .config import DEFAULT_MODEL
from .dataframe import correct_dataframe as correct_dataframe
from .defs import (
    AnglePolicy as AnglePolicy,
    BracketKind as BracketKind,
    Columns as Columns,
    Model as Model,
)
from .engine import (
    CorrectionEngine as CorrectionEngine,
    InvalidInputError as InvalidInputError,
)
from .models import (
    TABLES as TABLES,
    get_table as get_table,
    load_table as load_table,
)
from .table import (
    Bracket as Bracket,
    CalibrationError as CalibrationError,
    CalibrationRow as CalibrationRow,
    CalibrationTable as CalibrationTable,
)


def correct_speed(raw_speed: float, angle: float, model: str = DEFAULT_MODEL) -> float:
    """Corrects a single reading with one of the built-in calibration tables."""
    return CorrectionEngine(get_table(model)).correct_speed(raw_speed, angle)
