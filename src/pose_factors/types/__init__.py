"""
Types package for covariance and parameter block descriptions.
"""
from .enums import ManifoldType
from .covariance import (
    RotationCovariance,
    PoseCovariance,
    PixelCovariance,
    get_diag_covariance,
)

__all__ = [
    "ManifoldType",
    "RotationCovariance",
    "PoseCovariance",
    "PixelCovariance",
    "get_diag_covariance",
]
