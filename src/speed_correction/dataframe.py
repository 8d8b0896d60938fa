from pathlib import Path

from pandas import DataFrame, read_csv, read_parquet

from .defs import Columns
from .engine import CorrectionEngine


def correct_dataframe(
    df: DataFrame,
    engine: CorrectionEngine,
    speed: str = Columns.Speed,
    direction: str = Columns.Direction,
    output: str = Columns.CorrectedSpeed,
) -> None:
    """
    Adds a corrected speed column computed from the raw speed and direction
    columns. Modifies df in-place.
    """

    (speed, direction, output) = (str(speed), str(direction), str(output))
    missing = [c for c in (speed, direction) if c not in df.columns]

    if missing:
        raise KeyError(f"Missing reading columns: {', '.join(missing)}")

    df[output] = engine.correct_speeds(
        df[speed].to_numpy(dtype=float),
        df[direction].to_numpy(dtype=float),
    )


def read_frame(path: Path) -> DataFrame:
    """Reads a CSV or parquet file, chosen by suffix."""

    match path.suffix:
        case ".csv":
            return read_csv(path)
        case ".parquet":
            return read_parquet(path)
        case _:
            raise ValueError(f"Unsupported file format: {path.name}")


def write_frame(df: DataFrame, path: Path) -> None:
    match path.suffix:
        case ".csv":
            df.to_csv(path, index=False)
        case ".parquet":
            df.to_parquet(path, index=False)
        case _:
            raise ValueError(f"Unsupported file format: {path.name}")
