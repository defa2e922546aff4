"""
Geometric primitives shared by the kernel and the pipeline.

Models are accepted by the pipeline when they provide two capabilities:
a bounding volume (Boundable) and triangulation (Triangulatable). Both are
structural protocols, no base class is required.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Protocol, Tuple, runtime_checkable

if TYPE_CHECKING:
    import trimesh

    from cadpipe.core.kernel import Core, GeometryLayer
    from cadpipe.core.tolerance import Tolerance

Point3 = Tuple[float, float, float]

ORIGIN: Point3 = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Aabb:
    """Axis-aligned bounding box."""

    min: Point3
    max: Point3

    @classmethod
    def degenerate(cls) -> "Aabb":
        """Zero-size box at the origin."""
        return cls(min=ORIGIN, max=ORIGIN)

    @classmethod
    def from_bounds(cls, bounds) -> "Aabb":
        """
        Build a box from a ``((min_x, min_y, min_z), (max_x, max_y, max_z))`` pair.

        Accepts nested tuples as well as the (2, 3) arrays trimesh uses.
        """
        lo, hi = bounds
        return cls(
            min=(float(lo[0]), float(lo[1]), float(lo[2])),
            max=(float(hi[0]), float(hi[1]), float(hi[2])),
        )

    def size(self) -> Point3:
        """Extent along each axis."""
        return (
            self.max[0] - self.min[0],
            self.max[1] - self.min[1],
            self.max[2] - self.min[2],
        )

    def is_degenerate(self) -> bool:
        """True if the box has zero extent along every axis."""
        return all(extent <= 0 for extent in self.size())


@runtime_checkable
class Boundable(Protocol):
    """Something that can report its bounding box."""

    def aabb(self, geometry: "GeometryLayer") -> Optional[Aabb]:
        ...


@runtime_checkable
class Triangulatable(Protocol):
    """Something that can be converted into a triangle mesh."""

    def triangulate(self, core: "Core", tolerance: "Tolerance") -> "trimesh.Trimesh":
        ...
