"""
GTSAM backend.

This module wraps residual models as GTSAM factors so they can be optimized
with GTSAM's nonlinear solvers.
"""

from .conversions import (
    get_local_jacobian,
    get_parameter_block,
    get_pose3_from_se3_vector,
    get_rot3_from_so3_vector,
    get_se3_vector_from_pose3,
    get_so3_vector_from_rot3,
)
from .factors import get_custom_factor

__all__ = [
    "get_custom_factor",
    "get_local_jacobian",
    "get_parameter_block",
    "get_pose3_from_se3_vector",
    "get_rot3_from_so3_vector",
    "get_se3_vector_from_pose3",
    "get_so3_vector_from_rot3",
]
