"""
Model validation checks.

Shapes coming from build123d are checked with the OCCT shape analyzer,
meshes coming from trimesh are checked for holes, degenerate triangles
and winding. Findings are reported as ValidationIssue objects and
accumulated by the kernel's validation layer.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum

import trimesh
import numpy as np


class ValidationSeverity(Enum):
    """Severity level of validation issues."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationIssue:
    """A single validation issue found in a model."""

    severity: ValidationSeverity
    code: str
    message: str
    details: Optional[dict] = None

    def __str__(self) -> str:
        return f"[{self.severity.value.upper()}] {self.code}: {self.message}"


@dataclass
class ValidationConfig:
    """
    Configuration for model validation.

    Attributes:
        treat_warnings_as_errors: Report warnings as validation errors too
        degenerate_area: Triangles with a smaller area count as degenerate
    """

    treat_warnings_as_errors: bool = False
    degenerate_area: float = 1e-10

    def is_error(self, issue: ValidationIssue) -> bool:
        """Whether an issue blocks processing under this configuration."""
        if issue.severity == ValidationSeverity.ERROR:
            return True
        return self.treat_warnings_as_errors and issue.severity == ValidationSeverity.WARNING


class ModelValidator:
    """
    Runs validation checks on shapes and meshes.

    Checks performed on build123d shapes:
    - OCCT shape validity
    - Non-zero volume for shapes that have faces

    Checks performed on trimesh meshes:
    - Watertight (manifold) mesh
    - No boundary edges
    - No degenerate triangles
    - Consistent face winding

    Empty shapes and meshes produce no issues.
    """

    def __init__(self, config: Optional[ValidationConfig] = None):
        self.config = config or ValidationConfig()

    def validate_part(self, part) -> List[ValidationIssue]:
        """
        Validate a build123d Part, Solid or Compound.

        Args:
            part: Shape to validate

        Returns:
            List of issues found
        """
        issues: List[ValidationIssue] = []

        if not part.faces():
            return issues

        if not part.is_valid():
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="INVALID_SHAPE",
                    message="Shape failed the OCCT topology and geometry check",
                )
            )

        volume = float(part.volume)
        if volume <= 0:
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="ZERO_VOLUME",
                    message="Shape has faces but encloses no volume",
                    details={"volume": volume},
                )
            )

        return issues

    def validate_mesh(self, mesh: trimesh.Trimesh) -> List[ValidationIssue]:
        """
        Validate a triangle mesh.

        Args:
            mesh: trimesh.Trimesh object to validate

        Returns:
            List of issues found
        """
        issues: List[ValidationIssue] = []

        if len(mesh.faces) == 0:
            return issues

        if not mesh.is_watertight:
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="NOT_WATERTIGHT",
                    message="Mesh is not watertight (has holes or non-manifold edges)",
                    details={"is_watertight": False},
                )
            )

        issues.extend(self._check_boundary_edges(mesh))
        issues.extend(self._check_degenerate_faces(mesh))
        issues.extend(self._check_winding(mesh))

        return issues

    def _check_boundary_edges(self, mesh: trimesh.Trimesh) -> List[ValidationIssue]:
        """Count edges that belong to a single face."""
        _, counts = np.unique(mesh.edges_sorted, axis=0, return_counts=True)
        boundary_count = int(np.sum(counts == 1))

        if boundary_count == 0:
            return []

        return [
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code="BOUNDARY_EDGES",
                message=f"Found {boundary_count} boundary edges (indicates holes)",
                details={"boundary_edge_count": boundary_count},
            )
        ]

    def _check_degenerate_faces(self, mesh: trimesh.Trimesh) -> List[ValidationIssue]:
        """Check for zero-area triangles."""
        degenerate_count = int(np.sum(mesh.area_faces < self.config.degenerate_area))

        if degenerate_count == 0:
            return []

        return [
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code="DEGENERATE_FACES",
                message=f"Found {degenerate_count} degenerate (zero-area) triangles",
                details={"degenerate_count": degenerate_count},
            )
        ]

    def _check_winding(self, mesh: trimesh.Trimesh) -> List[ValidationIssue]:
        if mesh.is_winding_consistent:
            return []

        return [
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code="INCONSISTENT_WINDING",
                message="Face winding is not consistent (normals may be inverted)",
            )
        ]
