from argparse import ArgumentParser, Namespace
from pathlib import Path

from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress
from rich.table import Table

from .config import ANGLE_POLICY, DEFAULT_MODEL, DISPLAY_DECIMALS, TOLERANCE
from .dataframe import correct_dataframe, read_frame, write_frame
from .defs import AnglePolicy, Columns, Model
from .engine import CorrectionEngine
from .models import get_table
from .reference import ALL_SCENARIOS, ScenarioResult, run_scenario

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2


def parse_args(argv: list[str] | None = None) -> Namespace:
    parser = ArgumentParser(
        prog="speed_correction",
        description="Correct anemometer wind speeds for the angle of incidence.",
    )
    parser.add_argument("speed", type=float, nargs="?", help="Raw wind speed.")
    parser.add_argument("angle", type=float, nargs="?", help="Wind angle in degrees.")
    parser.add_argument(
        "--model",
        choices=[m.value for m in Model],
        default=DEFAULT_MODEL.value,
        help="Calibration table to correct with.",
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in AnglePolicy],
        default=ANGLE_POLICY.value,
        help="Handling of angles above 360°.",
    )
    parser.add_argument("--file", type=Path, help="CSV or parquet file of readings.")
    parser.add_argument("--output", type=Path, help="Where to write corrected readings.")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Run the calibration sheet regression scenarios.",
    )

    args = parser.parse_args(argv)

    if not args.check and args.file is None and (args.speed is None or args.angle is None):
        parser.error("expected SPEED and ANGLE, --file or --check")

    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    console = Console()

    engine = CorrectionEngine(get_table(args.model), AnglePolicy(args.policy))

    try:
        if args.check:
            return check(engine, console)

        if args.file is not None:
            return correct_file(engine, args.file, args.output, console)

        corrected = engine.correct_speed(args.speed, args.angle)
        rprint(f"{corrected:.{DISPLAY_DECIMALS}f}")
        return EXIT_OK

    except (ValueError, KeyError, FileNotFoundError) as e:
        # KeyError quotes its message when converted with str()
        message = e.args[0] if isinstance(e, KeyError) and e.args else str(e)
        console.print(f"[red]{escape(str(message))}[/]")
        return EXIT_INVALID


def check(engine: CorrectionEngine, console: Console) -> int:
    """Runs every reference scenario and reports the failures."""

    results: list[ScenarioResult] = []

    with Progress(console=console, transient=True) as progress:
        task = progress.add_task(
            f"Checking [b]{engine.table.name}[/]", total=len(ALL_SCENARIOS)
        )

        for scenario in ALL_SCENARIOS:
            results.append(run_scenario(engine, scenario, TOLERANCE))
            progress.advance(task, 1)

    failures = [r for r in results if not r.passed]

    if not failures:
        console.print(
            f"[green b]All {len(results)} scenarios passed[/] for {engine.table.name}"
        )
        return EXIT_OK

    table = Table(title=f"Failed scenarios ({engine.table.name})")

    for column in ("Speed", "Angle", "Expected", "Actual", "Error"):
        table.add_column(column, justify="right")

    for r in failures:
        table.add_row(
            f"{r.scenario.speed:g}",
            f"{r.scenario.angle:g}",
            f"{r.scenario.expected:.2f}",
            f"{r.actual:.2f}",
            f"{r.error:+.2e}",
        )

    console.print(table)
    console.print(f"[red b]{len(failures)}/{len(results)} scenarios failed[/]")
    return EXIT_FAILED


def correct_file(
    engine: CorrectionEngine,
    path: Path,
    output: Path | None,
    console: Console,
) -> int:
    df = read_frame(path)
    correct_dataframe(df, engine)

    if output is not None:
        write_frame(df, output)
        console.print(f"Corrected {len(df)} readings from [b]{path.name}[/] to {output}")
        return EXIT_OK

    table = Table(title=f"{path.name} ({engine.table.name})")

    for column in (Columns.Speed, Columns.Direction, Columns.CorrectedSpeed):
        table.add_column(column, justify="right")

    for row in df[[Columns.Speed, Columns.Direction, Columns.CorrectedSpeed]].itertuples(
        index=False
    ):
        (speed, direction, corrected) = row
        table.add_row(f"{speed:g}", f"{direction:g}", f"{corrected:.{DISPLAY_DECIMALS}f}")

    console.print(table)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
