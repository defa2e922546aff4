"""
Model wrappers accepted by the pipeline.

SolidModel wraps a build123d shape and triangulates it through OCCT.
MeshModel wraps a trimesh mesh that is already triangulated. Both
provide the bounding volume and triangulation capabilities, plus a
validation hook used by the kernel.
"""

from dataclasses import dataclass, field
from typing import Optional, Union, List, Any
from pathlib import Path
import logging
import tempfile

from build123d import Part, Solid, Compound, export_stl
import trimesh

from cadpipe.core.geometry import Aabb
from cadpipe.core.kernel import Core, GeometryLayer
from cadpipe.core.tolerance import Tolerance
from cadpipe.core.validator import ModelValidator, ValidationIssue

logger = logging.getLogger(__name__)

# Angular tolerance (radians) used when tessellating solids.
DEFAULT_ANGULAR_TOLERANCE = 0.1

MESH_SUFFIXES = {".stl", ".obj", ".ply", ".off", ".glb"}


@dataclass
class ModelMetadata:
    """Metadata attached to models."""

    name: str
    description: str = ""
    units: str = "mm"
    tags: List[str] = field(default_factory=list)


class SolidModel:
    """
    Wrapper around a build123d Part, Solid or Compound.

    Attributes:
        part: The underlying build123d shape
        metadata: Model metadata including name, description, and units
        angular_tolerance: Angular tolerance in radians used for tessellation
    """

    def __init__(
        self,
        part: Union[Part, Solid, Compound],
        metadata: Optional[ModelMetadata] = None,
        angular_tolerance: float = DEFAULT_ANGULAR_TOLERANCE,
    ):
        self._part = part
        self.metadata = metadata or ModelMetadata(name="unnamed")
        self.angular_tolerance = angular_tolerance
        self._mesh_cache: Optional[trimesh.Trimesh] = None
        self._mesh_tolerance: Optional[Tolerance] = None

    @property
    def part(self) -> Union[Part, Solid, Compound]:
        """Access the underlying build123d shape."""
        return self._part

    def is_empty(self) -> bool:
        return not self._part.faces()

    def aabb(self, geometry: Optional[GeometryLayer] = None) -> Optional[Aabb]:
        """
        Get the model's bounding box.

        Returns:
            The bounding box, or None if the shape has no faces
        """
        if self.is_empty():
            return None

        bbox = self._part.bounding_box()
        return Aabb(
            min=(bbox.min.X, bbox.min.Y, bbox.min.Z),
            max=(bbox.max.X, bbox.max.Y, bbox.max.Z),
        )

    def validate(self, validator: ModelValidator) -> List[ValidationIssue]:
        return validator.validate_part(self._part)

    def triangulate(self, core: Optional[Core], tolerance: Tolerance) -> trimesh.Trimesh:
        """
        Tessellate the shape into a triangle mesh.

        Args:
            core: Kernel the model belongs to
            tolerance: Linear tolerance (chord height)

        Returns:
            trimesh.Trimesh object
        """
        if self._mesh_cache is not None and self._mesh_tolerance == tolerance:
            return self._mesh_cache

        if self.is_empty():
            return trimesh.Trimesh()

        with tempfile.NamedTemporaryFile(suffix=".stl", delete=False) as f:
            temp_path = Path(f.name)

        try:
            export_stl(
                self._part,
                str(temp_path),
                tolerance=tolerance.value,
                angular_tolerance=self.angular_tolerance,
            )
            mesh = trimesh.load(str(temp_path), file_type="stl", force="mesh")
        finally:
            temp_path.unlink(missing_ok=True)

        logger.debug(
            "Tessellated %s with tolerance %s: %d triangles",
            self.metadata.name, tolerance, len(mesh.faces),
        )

        self._mesh_cache = mesh
        self._mesh_tolerance = tolerance

        return mesh

    def info(self) -> dict:
        """Basic model information."""
        aabb = self.aabb()
        size = aabb.size() if aabb else (0.0, 0.0, 0.0)

        return {
            "name": self.metadata.name,
            "description": self.metadata.description,
            "units": self.metadata.units,
            "kind": "solid",
            "dimensions": {"x": size[0], "y": size[1], "z": size[2]},
            "bounding_box": {"min": aabb.min, "max": aabb.max} if aabb else None,
            "volume": float(self._part.volume) if not self.is_empty() else 0.0,
        }


class MeshModel:
    """
    Wrapper around an existing triangle mesh.

    Meshes are already triangulated, so the tolerance is ignored.
    """

    def __init__(self, mesh: trimesh.Trimesh, metadata: Optional[ModelMetadata] = None):
        self.mesh = mesh
        self.metadata = metadata or ModelMetadata(name="unnamed")

    def aabb(self, geometry: Optional[GeometryLayer] = None) -> Optional[Aabb]:
        # trimesh reports no bounds for meshes without faces
        bounds = self.mesh.bounds
        if bounds is None:
            return None
        return Aabb.from_bounds(bounds)

    def validate(self, validator: ModelValidator) -> List[ValidationIssue]:
        return validator.validate_mesh(self.mesh)

    def triangulate(self, core: Optional[Core], tolerance: Tolerance) -> trimesh.Trimesh:
        return self.mesh.copy()

    def info(self) -> dict:
        aabb = self.aabb()
        size = aabb.size() if aabb else (0.0, 0.0, 0.0)

        return {
            "name": self.metadata.name,
            "description": self.metadata.description,
            "units": self.metadata.units,
            "kind": "mesh",
            "dimensions": {"x": size[0], "y": size[1], "z": size[2]},
            "bounding_box": {"min": aabb.min, "max": aabb.max} if aabb else None,
            "volume": float(self.mesh.volume) if aabb and self.mesh.is_watertight else None,
            "triangles": len(self.mesh.faces),
            "vertices": len(self.mesh.vertices),
        }


Model = Union[SolidModel, MeshModel]


def load_model_from_script(script_path: Path) -> Model:
    """
    Load a model from a Python script.

    The script should define one of these variables:
    - ``model``: a SolidModel or MeshModel instance
    - ``part``: a build123d Part/Solid/Compound object
    - ``mesh``: a trimesh.Trimesh object

    Args:
        script_path: Path to the Python script

    Returns:
        The model defined by the script

    Raises:
        ValueError: If no model found in script
        Exception: If script execution fails
    """
    script_path = Path(script_path)

    script_content = script_path.read_text()
    script_globals: dict[str, Any] = {"__name__": "__cadpipe_model__", "__file__": str(script_path)}

    exec(compile(script_content, str(script_path), "exec"), script_globals)

    metadata = ModelMetadata(name=script_path.stem)

    if "model" in script_globals:
        model = script_globals["model"]
        if isinstance(model, (SolidModel, MeshModel)):
            return model
        elif isinstance(model, (Part, Solid, Compound)):
            return SolidModel(part=model, metadata=metadata)

    if "part" in script_globals:
        part = script_globals["part"]
        if isinstance(part, (Part, Solid, Compound)):
            return SolidModel(part=part, metadata=metadata)

    if "mesh" in script_globals:
        mesh = script_globals["mesh"]
        if isinstance(mesh, trimesh.Trimesh):
            return MeshModel(mesh=mesh, metadata=metadata)

    raise ValueError(
        f"No 'model', 'part' or 'mesh' variable found in {script_path}. "
        "The script should define a 'model' (SolidModel/MeshModel), "
        "'part' (build123d shape) or 'mesh' (trimesh.Trimesh) variable."
    )


def load_mesh(mesh_path: Path) -> MeshModel:
    """
    Load a mesh file (STL, OBJ, PLY, ...) as a MeshModel.

    Args:
        mesh_path: Path to the mesh file

    Returns:
        MeshModel wrapping the loaded mesh
    """
    mesh_path = Path(mesh_path)
    mesh = trimesh.load(str(mesh_path), force="mesh")
    return MeshModel(mesh=mesh, metadata=ModelMetadata(name=mesh_path.stem))


def load_model(path: Path) -> Model:
    """
    Load a model from a Python script or a mesh file.

    Raises:
        ValueError: If the file type is not supported
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".py":
        return load_model_from_script(path)
    if suffix in MESH_SUFFIXES:
        return load_mesh(path)

    raise ValueError(
        f"Unsupported model file: {path}. "
        f"Expected a .py script or one of: {', '.join(sorted(MESH_SUFFIXES))}"
    )
