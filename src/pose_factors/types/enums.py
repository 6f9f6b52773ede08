"""
Enumerations for parameter block layouts.
"""
from enum import Enum


class ManifoldType(Enum):
    """Layout of a parameter block consumed by a residual model."""
    SCALAR = 1  # [dt]
    SO3 = 4  # [qw, qx, qy, qz]
    SE3 = 7  # [tx, ty, tz, qw, qx, qy, qz]

    @property
    def ambient_size(self) -> int:
        """Number of floats stored in the parameter block."""
        return self.value

    @property
    def tangent_size(self) -> int:
        """Dimension of the local (tangent) coordinates of the block."""
        return {ManifoldType.SCALAR: 1, ManifoldType.SO3: 3, ManifoldType.SE3: 6}[self]
