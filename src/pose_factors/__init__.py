"""pose_factors package init.

Expose the residual models and the cost function wrapper at package level for
convenient imports. Importing the package enables 64-bit JAX.
"""
from .utils import jax_init  # noqa: F401
from .cost_function import AutoDiffCostFunction
from .factors import (
    ResidualModel,
    SO3Factor,
    RelSE3Factor,
    RangeFactor,
    AltFactor,
    TimeSyncAttFactor,
    SO3OffsetFactor,
    SE3OffsetFactor,
    SE3ReprojectionFactor,
)
from .types import ManifoldType

__all__ = [
    "AutoDiffCostFunction",
    "ResidualModel",
    "SO3Factor",
    "RelSE3Factor",
    "RangeFactor",
    "AltFactor",
    "TimeSyncAttFactor",
    "SO3OffsetFactor",
    "SE3OffsetFactor",
    "SE3ReprojectionFactor",
    "ManifoldType",
]
