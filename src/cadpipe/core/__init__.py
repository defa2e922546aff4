"""Core modules: geometry kernel, models, tolerance, validation and export."""

from cadpipe.core.geometry import Aabb, Boundable, Triangulatable
from cadpipe.core.tolerance import Tolerance, compute_tolerance
from cadpipe.core.validator import ModelValidator, ValidationConfig, ValidationIssue
from cadpipe.core.kernel import Core
from cadpipe.core.modeler import MeshModel, ModelMetadata, SolidModel
from cadpipe.core.exporter import ExportError, ExportResult, ExportSettings, MeshExporter

__all__ = [
    "Aabb",
    "Boundable",
    "Triangulatable",
    "Tolerance",
    "compute_tolerance",
    "ModelValidator",
    "ValidationConfig",
    "ValidationIssue",
    "Core",
    "MeshModel",
    "ModelMetadata",
    "SolidModel",
    "ExportError",
    "ExportResult",
    "ExportSettings",
    "MeshExporter",
]
