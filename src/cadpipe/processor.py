"""
Model processing pipeline.

ModelProcessor is the main entry point for model scripts: it validates a
model, derives the triangulation tolerance, triangulates the model and
then exports the mesh or shows it in the viewer, according to RunOptions.
"""

from typing import List, Optional
import logging
import sys

import click

from cadpipe.args import RunOptions, parse_args
from cadpipe.core.exporter import ExportError, ExportResult, MeshExporter
from cadpipe.core.geometry import Aabb, Boundable, Triangulatable
from cadpipe.core.kernel import Core
from cadpipe.core.tolerance import compute_tolerance
from cadpipe.core.validator import ValidationConfig
from cadpipe.errors import DisplayFailed, ExportFailed, PipelineError, ValidationFailed, report_error
from cadpipe.logging_config import init_logger
from cadpipe.viewer import BrowserViewer, ViewerError

logger = logging.getLogger(__name__)


class ModelProcessor:
    """
    Exports or displays models.

    One processor handles one model at a time. Its kernel handle may be
    reused for several models in sequence; process models concurrently
    with separate processors.

    Attributes:
        core: Geometry kernel handle
        exporter: Writes meshes to files
        viewer: Displays meshes interactively
    """

    def __init__(
        self,
        core: Optional[Core] = None,
        exporter: Optional[MeshExporter] = None,
        viewer: Optional[BrowserViewer] = None,
        validation_config: Optional[ValidationConfig] = None,
    ):
        self.core = core or Core(validation_config)
        self.exporter = exporter or MeshExporter()
        self.viewer = viewer or BrowserViewer()

    def process_model(self, model, argv: Optional[List[str]] = None) -> Optional[ExportResult]:
        """
        Export or display a model, according to command-line arguments.

        Args:
            model: Model providing ``aabb()`` and ``triangulate()``
            argv: Arguments to parse instead of sys.argv[1:]
        """
        options = parse_args(argv)
        return self.process(model, options)

    def process(self, model, options: Optional[RunOptions] = None) -> Optional[ExportResult]:
        """
        Run the pipeline for a model.

        Steps: logger setup, validation, bounding box, tolerance,
        triangulation, then export (with --export) or display.

        Args:
            model: Model providing ``aabb()`` and ``triangulate()``
            options: Run options; defaults display the model

        Returns:
            ExportResult when the model was exported, None when it was displayed

        Raises:
            LoggerSetupFailed: If logging can't be configured
            ValidationFailed: If the model has validation errors
            EmptyModel: If no tolerance was given and the model has no size
            ExportFailed: If the exporter fails
            DisplayFailed: If the viewer fails
        """
        options = options or RunOptions()

        if not isinstance(model, Boundable) or not isinstance(model, Triangulatable):
            raise TypeError(
                f"{type(model).__name__} must provide aabb() and triangulate() to be processed"
            )

        init_logger()

        self.core.insert(model)
        errors = self.core.drain_validation_errors()
        if errors:
            if not options.ignore_validation:
                raise ValidationFailed(errors)
            for error in errors:
                logger.warning("Ignoring validation error: %s", error)

        aabb = model.aabb(self.core.layers.geometry)
        if aabb is None:
            logger.debug("Model has no bounding box, using a zero-size box at the origin")
            aabb = Aabb.degenerate()

        tolerance = compute_tolerance(aabb, options.tolerance)
        logger.info("Triangulating with tolerance %s", tolerance)

        mesh = model.triangulate(self.core, tolerance)

        if options.export is not None:
            try:
                return self.exporter.export(mesh.triangles, options.export)
            except ExportError as e:
                raise ExportFailed() from e

        name = getattr(getattr(model, "metadata", None), "name", None)
        try:
            self.viewer.spawn_and_display(mesh, name=name)
        except ViewerError as e:
            raise DisplayFailed() from e

        return None


def run(model, argv: Optional[List[str]] = None) -> None:
    """
    Process a model from a model script and exit on failure.

    Reads the command-line arguments, runs the pipeline, and on failure
    prints the error with its causes and exits with status 1.

    Example:
        from build123d import Box
        import cadpipe

        cadpipe.run(cadpipe.SolidModel(Box(10, 10, 10)))
    """
    try:
        ModelProcessor().process_model(model, argv)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.exceptions.Exit as e:
        sys.exit(e.exit_code)
    except PipelineError as e:
        report_error(e)
        sys.exit(1)
