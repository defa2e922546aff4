"""
Triangulation tolerance.

A tolerance is the maximum distance a triangulated surface may deviate from
the exact surface of the model. When the caller does not supply one, it is
derived from the model's bounding box.
"""

from dataclasses import dataclass
from typing import Optional
import logging
import math

from cadpipe.core.geometry import Aabb
from cadpipe.errors import EmptyModel, InvalidTolerance

logger = logging.getLogger(__name__)

# The derived tolerance is this fraction of the smallest non-zero extent.
TOLERANCE_DIVISOR = 1000.0


@dataclass(frozen=True)
class Tolerance:
    """
    A finite, strictly positive tolerance value.

    Raises:
        InvalidTolerance: If the value is not a number, is NaN or
            infinite, or is zero or negative
    """

    value: float

    def __post_init__(self):
        try:
            value = float(self.value)
        except (TypeError, ValueError) as e:
            raise InvalidTolerance(self.value) from e

        if not math.isfinite(value) or value <= 0:
            raise InvalidTolerance(value)

        object.__setattr__(self, "value", value)

    def __float__(self) -> float:
        return self.value

    def __str__(self) -> str:
        return f"{self.value:g}"


def compute_tolerance(aabb: Aabb, user_defined: Optional[Tolerance] = None) -> Tolerance:
    """
    Determine the tolerance to triangulate a model with.

    A user-defined tolerance always wins. Otherwise the tolerance is the
    smallest strictly positive extent of the bounding box divided by 1000.
    Zero extents (models that are flat along an axis) are skipped.

    Args:
        aabb: Bounding box of the model
        user_defined: Tolerance requested by the caller, if any

    Returns:
        Tolerance to use

    Raises:
        EmptyModel: If the bounding box has zero extent along every axis
    """
    if user_defined is not None:
        return user_defined

    positive = [extent for extent in aabb.size() if extent > 0]
    if not positive:
        raise EmptyModel()

    tolerance = Tolerance(min(positive) / TOLERANCE_DIVISOR)
    logger.debug("Derived tolerance %s from model size %s", tolerance, aabb.size())

    return tolerance
