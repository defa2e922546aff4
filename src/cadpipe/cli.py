"""
cadpipe CLI - command line interface for the model pipeline.

Usage:
    cadpipe run <model>              Display a model in the browser viewer
    cadpipe run <model> -e out.stl   Export a model
    cadpipe validate <model>         Check a model for validation errors
    cadpipe info <model>             Show size and derived tolerance
    cadpipe version                  Show version

<model> is a Python script defining a ``model``, ``part`` or ``mesh``
variable, or a mesh file (STL, OBJ, PLY, ...).
"""

from pathlib import Path
from typing import Optional
import json

import typer
from rich.console import Console
from rich.table import Table

from cadpipe.args import RunOptions, parse_tolerance
from cadpipe.core.tolerance import Tolerance

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="cadpipe",
    help="Export or display CAD models.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _load(model_path: Path):
    """Load a model or exit with status 1."""
    from cadpipe.core.modeler import load_model

    if not model_path.exists():
        console.print(f"[red]Error:[/red] File not found: {model_path}")
        raise typer.Exit(1)

    try:
        return load_model(model_path)
    except Exception as e:
        console.print(f"[red]Error loading model:[/red] {e}")
        raise typer.Exit(1)


@app.command("run")
def run_command(
    model_path: Path = typer.Argument(..., help="Model script or mesh file"),
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
    port: int = typer.Option(8080, "--port", "-p", help="Viewer server port"),
    no_browser: bool = typer.Option(False, "--no-browser", help="Don't open browser automatically"),
):
    """
    Export a model, or display it in the browser viewer.

    Example:
        cadpipe run ./bracket.py
        cadpipe run ./bracket.py --export ./output/bracket.stl
        cadpipe run ./scan.stl -t 0.01 --ignore-validation
    """
    from cadpipe.errors import PipelineError, report_error
    from cadpipe.processor import ModelProcessor
    from cadpipe.viewer import BrowserViewer

    model = _load(model_path)
    options = RunOptions(export=export, tolerance=tolerance, ignore_validation=ignore_validation)

    processor = ModelProcessor(viewer=BrowserViewer(port=port, open_browser=not no_browser))

    try:
        result = processor.process(model, options)
    except PipelineError as e:
        report_error(e, err_console)
        raise typer.Exit(1)

    if result is not None:
        console.print(f"[green]Exported to:[/green] {result.file_path}")
        console.print(result.summary(), markup=False)


@app.command("validate")
def validate_command(
    model_path: Path = typer.Argument(..., help="Model script or mesh file"),
    strict: bool = typer.Option(False, "--strict", help="Treat warnings as errors"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Check a model for validation errors.

    Example:
        cadpipe validate ./bracket.py
        cadpipe validate ./scan.stl --json
    """
    from cadpipe.core.kernel import Core
    from cadpipe.core.validator import ValidationConfig

    model = _load(model_path)

    core = Core(ValidationConfig(treat_warnings_as_errors=strict))
    core.insert(model)
    issues = core.layers.validation.issues
    errors = core.drain_validation_errors()

    if json_output:
        output = {
            "is_valid": not errors,
            "error_count": len(errors),
            "issues": [
                {
                    "severity": i.severity.value,
                    "code": i.code,
                    "message": i.message,
                }
                for i in issues
            ],
        }
        print(json.dumps(output, indent=2))
    else:
        status = "[green]VALID[/green]" if not errors else "[red]INVALID[/red]"
        console.print(f"Status: {status}")
        for issue in issues:
            console.print(f"  {issue}", markup=False)

    if errors:
        raise typer.Exit(1)


@app.command("info")
def info_command(
    model_path: Path = typer.Argument(..., help="Model script or mesh file"),
):
    """
    Display model size and the tolerance it would be triangulated with.

    Example:
        cadpipe info ./bracket.py
    """
    from cadpipe.core.geometry import Aabb
    from cadpipe.core.tolerance import compute_tolerance
    from cadpipe.errors import EmptyModel

    model = _load(model_path)
    info = model.info()

    try:
        tolerance = str(compute_tolerance(model.aabb() or Aabb.degenerate()))
    except EmptyModel:
        tolerance = "n/a (empty model)"

    table = Table(show_header=False, box=None)
    table.add_column(style="cyan")
    table.add_column()

    table.add_row("Name", info["name"])
    table.add_row("Kind", info["kind"])

    dims = info["dimensions"]
    table.add_row(
        "Dimensions",
        f"{dims['x']:.3f} x {dims['y']:.3f} x {dims['z']:.3f} {info['units']}"
    )

    bbox = info["bounding_box"]
    table.add_row("Bounding Box", f"{bbox['min']} - {bbox['max']}" if bbox else "none")

    vol = info["volume"]
    if vol:
        table.add_row("Volume", f"{vol:.2f} {info['units']}^3")

    if "triangles" in info:
        table.add_row("Triangles", f"{info['triangles']:,}")
        table.add_row("Vertices", f"{info['vertices']:,}")

    table.add_row("Tolerance", tolerance)

    console.print(table)


@app.command("version")
def version():
    """Show cadpipe version."""
    from cadpipe import __version__
    console.print(f"cadpipe v{__version__}")


if __name__ == "__main__":
    app()
