"""
Standardized command-line options for model scripts.

A model script builds a model and hands it to the pipeline, which reads
these options to decide whether to export or display it:

    --export/-e PATH          Export the model to PATH instead of displaying it
    --tolerance/-t FLOAT      Tolerance for the triangulation (e.g. 0.001)
    --ignore-validation/-i    Ignore validation errors
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer

from cadpipe.core.tolerance import Tolerance
from cadpipe.errors import InvalidTolerance, InvalidToleranceArgument, ToleranceParseFailed


@dataclass
class RunOptions:
    """Options for a single pipeline run."""

    export: Optional[Path] = None
    tolerance: Optional[Tolerance] = None
    ignore_validation: bool = False


def parse_tolerance(text: str) -> Tolerance:
    """
    Parse a string into a Tolerance.

    Raises:
        ToleranceParseFailed: If the text is not a number
        InvalidToleranceArgument: If the number is not a valid tolerance
    """
    if isinstance(text, Tolerance):
        return text

    try:
        value = float(text)
    except ValueError as e:
        raise ToleranceParseFailed(text) from e

    try:
        return Tolerance(value)
    except InvalidTolerance as e:
        raise InvalidToleranceArgument(text, value) from e


def _version_callback(value: bool):
    if value:
        from cadpipe import __version__
        typer.echo(f"cadpipe v{__version__}")
        raise typer.Exit()


args_app = typer.Typer(
    name="model",
    help="Export or display a model.",
    add_completion=False,
)


@args_app.command()
def run_options(
    export: Optional[Path] = typer.Option(
        None, "--export", "-e", metavar="PATH", help="Path to export the model"
    ),
    tolerance: Optional[Tolerance] = typer.Option(
        None,
        "--tolerance",
        "-t",
        metavar="FLOAT",
        parser=parse_tolerance,
        help="Tolerance for export deviation (e.g. 0.001)",
    ),
    ignore_validation: bool = typer.Option(
        False, "--ignore-validation", "-i", help="Ignore validation errors during export"
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> RunOptions:
    """
    Export or display a model.

    Without --export the model is shown in the interactive viewer.
    """
    return RunOptions(
        export=export,
        tolerance=tolerance,
        ignore_validation=ignore_validation,
    )


def parse_args(argv: Optional[List[str]] = None, prog_name: Optional[str] = None) -> RunOptions:
    """
    Parse command-line arguments into RunOptions.

    Args:
        argv: Arguments without the program name; defaults to sys.argv[1:]
        prog_name: Program name shown in help and error messages

    Raises:
        click.exceptions.ClickException: If the arguments are invalid
        typer.Exit: If --help or --version was given
    """
    command = typer.main.get_command(args_app)
    result = command.main(args=argv, prog_name=prog_name, standalone_mode=False)

    # --help and --version end parsing early and leave an exit code instead
    if not isinstance(result, RunOptions):
        raise typer.Exit(result or 0)

    return result
