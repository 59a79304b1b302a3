"""CLI for the ``cheque_ras`` package.

Command handlers (``cmd_*``) hold the logic and return a process exit code;
the Typer commands below only parse options and delegate. Environment
variables (``OPENAI_API_KEY``, ``CHEQUE_RAS_*``) are loaded from a local
``.env`` with ``python-dotenv`` before any command runs.
"""

from __future__ import annotations

import csv
import os
import sys
from collections.abc import Sequence
from datetime import date as GDate
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from .jalali import format_date, from_gregorian, parse_date_string, to_gregorian, today
from .logging_setup import configure_logging, get_logger
from .models import ChequeRecord
from .report import build_report, export_report
from .worksheet import ChequeWorksheet

console = Console()
_logger = get_logger("cheque_ras.cli")


# ---- Small module-level helpers ----------------------------------------------


def parse_cheque_arg(value: str) -> ChequeRecord:
    """Parse ``AMOUNT:DATE`` (e.g. ``"12,000,000:1403/05/12"``) into a record."""

    amount, sep, date_text = value.partition(":")
    if not sep:
        raise ValueError(f"cheque must look like AMOUNT:YYYY/MM/DD, got {value!r}")
    return ChequeRecord(amount=amount.strip(), date=date_text.strip())


# ---- Command handlers --------------------------------------------------------


def cmd_compute(
    *,
    base_date: str | None = None,
    file: Path | None = None,
    cheques: Sequence[str] = (),
    export: Path | None = None,
) -> int:
    """Build a worksheet from a file and/or ``--cheque`` values and print the result.

    Errors are written to stderr with a non-zero return. A missing result
    (no contributing cheque) is not an error unless ``export`` was requested.
    """

    worksheet = ChequeWorksheet(base_date=base_date)

    if file is not None:
        from .ingest import load_cheques_from_file

        try:
            worksheet.merge(load_cheques_from_file(file))
        except FileNotFoundError:
            print(f"Error: File not found: {file}", file=sys.stderr)
            return 1
        except PermissionError:
            print(f"Error: Permission denied: {file}", file=sys.stderr)
            return 1
        except (csv.Error, ValueError) as e:
            print(f"Error: Failed to import '{file}': {e}", file=sys.stderr)
            return 1
        except Exception as e:  # noqa: BLE001
            print(f"Error: Unexpected failure reading '{file}': {e}", file=sys.stderr)
            return 1

    try:
        extra = [parse_cheque_arg(c) for c in cheques]
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    worksheet.merge(extra)

    computation = worksheet.compute()
    console.print(build_report(computation))

    if export is not None:
        try:
            written = export_report(computation, export)
        except (OSError, ValueError) as e:
            print(f"Error: export failed: {e}", file=sys.stderr)
            return 1
        console.print(f"Report written to {written}")

    return 0


def cmd_convert(value: str, *, to_jalali: bool = False) -> int:
    """Convert between a Jalali ``YYYY/MM/DD`` and a Gregorian ISO date."""

    if to_jalali:
        try:
            gregorian = GDate.fromisoformat(value.strip())
        except ValueError:
            print(f"Error: not an ISO date (YYYY-MM-DD): {value!r}", file=sys.stderr)
            return 1
        try:
            print(format_date(from_gregorian(gregorian)))
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    jalali_date = parse_date_string(value)
    if jalali_date is None:
        print(f"Error: not a valid Jalali date (YYYY/MM/DD): {value!r}", file=sys.stderr)
        return 1
    print(to_gregorian(jalali_date).isoformat())
    return 0


def cmd_extract(image: Path, *, base_date: str | None = None) -> int:
    """Read one cheque from an image and print its amount, date and day offset."""

    if not os.getenv("OPENAI_API_KEY"):
        print("Error: OPENAI_API_KEY is not set in the environment.", file=sys.stderr)
        return 1

    from .extraction import extract_cheque

    try:
        record = extract_cheque(image)
    except FileNotFoundError:
        print(f"Error: File not found: {image}", file=sys.stderr)
        return 1
    except (RuntimeError, ValueError) as e:
        print(f"Error: extraction failed: {e}", file=sys.stderr)
        return 1

    if record is None:
        print("No cheque information found in the image.", file=sys.stderr)
        return 1

    worksheet = ChequeWorksheet(base_date=base_date, records=[record])
    console.print(build_report(worksheet.compute()))
    return 0


def cmd_interactive(*, base_date: str | None = None, file: Path | None = None) -> int:
    from .term_ui import run_worksheet

    worksheet = ChequeWorksheet(base_date=base_date)
    if file is not None:
        from .ingest import load_cheques_from_file

        try:
            worksheet.merge(load_cheques_from_file(file))
        except (OSError, csv.Error, ValueError) as e:
            print(f"Error: Failed to import '{file}': {e}", file=sys.stderr)
            return 1

    try:
        run_worksheet(worksheet, console=console)
    except (EOFError, KeyboardInterrupt):
        # Ctrl-D / Ctrl-C leave the loop like "q".
        pass
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Compute the weighted-average due date (ras) of post-dated cheques in the "
        "Jalali calendar. Loads a local .env before running."
    ),
)


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


BASE_DATE_OPTION = typer.Option(
    "--base-date",
    help="Base date as YYYY/MM/DD (Jalali). Defaults to today.",
)
FILE_OPTION = typer.Option(
    "--file",
    help="CSV or XLSX file with amount/date columns",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)


@app.command("compute")
def compute_cmd(
    base_date: Annotated[str | None, BASE_DATE_OPTION] = None,
    file: Annotated[Path | None, FILE_OPTION] = None,
    cheque: Annotated[
        list[str] | None,
        typer.Option(
            "--cheque",
            "-c",
            help="A cheque as AMOUNT:YYYY/MM/DD; repeat for several.",
        ),
    ] = None,
    export: Annotated[
        Path | None,
        typer.Option("--export", help="Write the report to a .txt, .html or .svg file."),
    ] = None,
) -> None:
    """Compute the ras date of the given cheques."""

    _exit(cmd_compute(base_date=base_date, file=file, cheques=cheque or (), export=export))


@app.command("today")
def today_cmd() -> None:
    """Print today's Jalali date."""

    print(format_date(today()))


@app.command("convert")
def convert_cmd(
    value: Annotated[str, typer.Argument(help="Date to convert")],
    to_jalali: Annotated[
        bool,
        typer.Option("--to-jalali", help="Treat VALUE as Gregorian YYYY-MM-DD."),
    ] = False,
) -> None:
    """Convert a Jalali date to Gregorian (or back with --to-jalali)."""

    _exit(cmd_convert(value, to_jalali=to_jalali))


@app.command("extract")
def extract_cmd(
    image: Annotated[
        Path,
        typer.Option("--image", help="Cheque image (JPEG/PNG)", dir_okay=False),
    ],
    base_date: Annotated[str | None, BASE_DATE_OPTION] = None,
) -> None:
    """Read the amount and due date from a cheque image (OpenAI)."""

    _exit(cmd_extract(image, base_date=base_date))


@app.command("interactive")
def interactive_cmd(
    base_date: Annotated[str | None, BASE_DATE_OPTION] = None,
    file: Annotated[Path | None, FILE_OPTION] = None,
) -> None:
    """Edit cheques in an interactive terminal session."""

    _exit(cmd_interactive(base_date=base_date, file=file))


@app.callback()
def _root(
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (falls back to CHEQUE_RAS_LOG_LEVEL)."),
    ] = None,
) -> None:
    """Load ``.env`` from the working directory and set up logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)
    _logger.debug("cli:start argv=%s", sys.argv[1:])


if __name__ == "__main__":  # pragma: no cover
    app()
