"""
Mesh export module.

Writes triangulated models to STL (binary or ASCII), OBJ or PLY files.
The format is chosen from the file extension.
"""

from dataclasses import dataclass
from pathlib import Path
from enum import Enum
from typing import Optional
import logging

import numpy as np
import trimesh

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """The mesh could not be exported."""


class STLFormat(Enum):
    """STL file format options."""

    BINARY = "binary"
    ASCII = "ascii"


# File extension -> trimesh file type, for formats that don't depend on settings.
EXPORT_FORMATS = {
    ".obj": "obj",
    ".ply": "ply",
}


@dataclass
class ExportSettings:
    """Configuration for mesh export."""

    stl_format: STLFormat = STLFormat.BINARY

    def file_type(self, path: Path) -> str:
        """
        Determine the trimesh file type for a path.

        Raises:
            ExportError: If the extension is not supported
        """
        suffix = path.suffix.lower()

        if suffix == ".stl":
            return "stl" if self.stl_format == STLFormat.BINARY else "stl_ascii"
        if suffix in EXPORT_FORMATS:
            return EXPORT_FORMATS[suffix]

        supported = ", ".join(sorted([".stl", *EXPORT_FORMATS]))
        raise ExportError(
            f"Unknown export format {suffix or '(none)'!r} for {path}; supported: {supported}"
        )


@dataclass
class ExportResult:
    """Result of an export operation."""

    file_path: Path
    file_size_bytes: int
    triangle_count: int

    def summary(self) -> str:
        """Generate human-readable export summary."""
        lines = [
            "=== Export Summary ===",
            f"Output: {self.file_path}",
            f"File Size: {self._format_size(self.file_size_bytes)}",
            f"Triangles: {self.triangle_count:,}",
        ]
        return "\n".join(lines)

    @staticmethod
    def _format_size(size_bytes: int) -> str:
        """Format file size for display."""
        if size_bytes < 1024:
            return f"{size_bytes} B"
        elif size_bytes < 1024 * 1024:
            return f"{size_bytes / 1024:.1f} KB"
        else:
            return f"{size_bytes / (1024 * 1024):.2f} MB"


def mesh_from_triangles(triangles) -> trimesh.Trimesh:
    """
    Build a mesh from an (n, 3, 3) array of triangle corners.

    Coincident corners are merged into shared vertices.
    """
    triangles = np.asarray(triangles, dtype=np.float64).reshape((-1, 3, 3))

    if len(triangles) == 0:
        return trimesh.Trimesh()

    return trimesh.Trimesh(**trimesh.triangles.to_kwargs(triangles))


class MeshExporter:
    """
    Export triangles to mesh files.

    Features:
    - Binary or ASCII STL output
    - OBJ and PLY output
    - Parent directories are created as needed
    """

    def __init__(self, settings: Optional[ExportSettings] = None):
        self.settings = settings or ExportSettings()

    def export(self, triangles, path: Path) -> ExportResult:
        """
        Export triangles to a file.

        Args:
            triangles: Array of shape (n, 3, 3) with the corners of each triangle
            path: Output file; its extension selects the format

        Returns:
            ExportResult with export details

        Raises:
            ExportError: If the format is unknown or the file can't be written
        """
        path = Path(path)
        file_type = self.settings.file_type(path)
        mesh = mesh_from_triangles(triangles)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            mesh.export(str(path), file_type=file_type)
            file_size = path.stat().st_size
        except OSError as e:
            raise ExportError(f"Failed to write {path}") from e

        logger.info("Exported %d triangles to %s", len(mesh.faces), path)

        return ExportResult(
            file_path=path,
            file_size_bytes=file_size,
            triangle_count=len(mesh.faces),
        )
