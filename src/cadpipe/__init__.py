"""
cadpipe - export or display CAD models from Python.

Validates a model, derives a triangulation tolerance from its size,
triangulates it, and writes the mesh to a file or shows it in the
browser viewer.
"""

from cadpipe.args import RunOptions, parse_args, parse_tolerance
from cadpipe.core.modeler import MeshModel, ModelMetadata, SolidModel
from cadpipe.core.tolerance import Tolerance, compute_tolerance
from cadpipe.errors import PipelineError, format_error
from cadpipe.processor import ModelProcessor, run

__version__ = "0.1.0"
__all__ = [
    "MeshModel",
    "ModelMetadata",
    "ModelProcessor",
    "PipelineError",
    "RunOptions",
    "SolidModel",
    "Tolerance",
    "compute_tolerance",
    "format_error",
    "parse_args",
    "parse_tolerance",
    "run",
    "__version__",
]
