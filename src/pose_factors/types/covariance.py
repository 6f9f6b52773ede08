"""
Covariance types for measurements, plus the helpers that turn an uncertainty
into the weight stored by a residual model.
"""
from attrs import define, field, validators
import numpy as np
from numpy import ndarray
from typing import Union

from ..logging_config import get_logger
from ..utils.validation import (
    bound_validator,
    to_readonly_array,
    _check_square,
    _check_symmetric,
    _check_positive_definite,
)

logger = get_logger(__name__)

# Condition number above which a covariance is accepted but reported
ILL_CONDITIONED_THRESHOLD = 1e12


@define(frozen=True)
class RotationCovariance:
    """
    A class to represent a 3x3 covariance for attitude measurements, expressed
    in the SO3 tangent space.
    """

    sigma_roll: float = field(
        validator=validators.gt(0.0),
        metadata={"description": "Standard deviation about the x axis"},
    )
    sigma_pitch: float = field(
        validator=validators.gt(0.0),
        metadata={"description": "Standard deviation about the y axis"},
    )
    sigma_yaw: float = field(
        validator=validators.gt(0.0),
        metadata={"description": "Standard deviation about the z axis"},
    )

    @property
    def covariance_matrix(self) -> ndarray:
        """
        Returns the covariance matrix as a 3x3 numpy array.
        """
        return np.diag([self.sigma_roll**2, self.sigma_pitch**2, self.sigma_yaw**2])


@define(frozen=True)
class PoseCovariance:
    """
    A class to represent a 6x6 covariance for rigid-transform measurements,
    ordered like the SE3 tangent: translation (x, y, z) then rotation
    (roll, pitch, yaw).
    """

    sigma_x: float = field(
        validator=validators.gt(0.0),
        metadata={"description": "Standard deviation in x direction"},
    )
    sigma_y: float = field(
        validator=validators.gt(0.0),
        metadata={"description": "Standard deviation in y direction"},
    )
    sigma_z: float = field(
        validator=validators.gt(0.0),
        metadata={"description": "Standard deviation in z direction"},
    )
    sigma_roll: float = field(
        validator=validators.gt(0.0),
        metadata={"description": "Standard deviation about the x axis"},
    )
    sigma_pitch: float = field(
        validator=validators.gt(0.0),
        metadata={"description": "Standard deviation about the y axis"},
    )
    sigma_yaw: float = field(
        validator=validators.gt(0.0),
        metadata={"description": "Standard deviation about the z axis"},
    )
    rho_xy: float = field(
        default=0.0,
        validator=bound_validator(-1.0, 1.0),
        metadata={"description": "Correlation between x and y"},
    )

    def __attrs_post_init__(self):
        _check_positive_definite(self.covariance_matrix)

    def __str__(self) -> str:
        return (
            f"PoseCovariance(sigma_x={self.sigma_x}, "
            f"sigma_y={self.sigma_y}, "
            f"sigma_z={self.sigma_z}, "
            f"sigma_roll={self.sigma_roll}, "
            f"sigma_pitch={self.sigma_pitch}, "
            f"sigma_yaw={self.sigma_yaw}, "
            f"rho_xy={self.rho_xy})"
        )

    @property
    def covariance_matrix(self) -> ndarray:
        """
        Returns the covariance matrix as a 6x6 numpy array.
        """
        covar = np.diag(
            [
                self.sigma_x**2,
                self.sigma_y**2,
                self.sigma_z**2,
                self.sigma_roll**2,
                self.sigma_pitch**2,
                self.sigma_yaw**2,
            ]
        )
        covar[0, 1] = covar[1, 0] = self.rho_xy * (self.sigma_x * self.sigma_y)
        return covar


@define(frozen=True)
class PixelCovariance:
    """
    A class to represent a 2x2 covariance for image-plane measurements.
    """

    sigma_u: float = field(
        validator=validators.gt(0.0),
        metadata={"description": "Standard deviation along the image u axis (px)"},
    )
    sigma_v: float = field(
        validator=validators.gt(0.0),
        metadata={"description": "Standard deviation along the image v axis (px)"},
    )

    @property
    def covariance_matrix(self) -> ndarray:
        """
        Returns the covariance matrix as a 2x2 numpy array.
        """
        return np.diag([self.sigma_u**2, self.sigma_v**2])


CovarianceType = Union[RotationCovariance, PoseCovariance, PixelCovariance]


def get_diag_covariance(sigmas: ndarray) -> CovarianceType:
    """Creates a covariance object from standard deviations along the diagonal.

    Args:
        sigmas: the standard deviations, length 2 (pixels), 3 (rotation) or
            6 (pose)

    Returns:
        The corresponding covariance object
    """
    sigmas = np.asarray(sigmas, dtype=float).ravel()
    length = sigmas.shape[0]
    if length == 2:
        return PixelCovariance(sigma_u=sigmas[0], sigma_v=sigmas[1])
    elif length == 3:
        return RotationCovariance(
            sigma_roll=sigmas[0], sigma_pitch=sigmas[1], sigma_yaw=sigmas[2]
        )
    elif length == 6:
        return PoseCovariance(
            sigma_x=sigmas[0],
            sigma_y=sigmas[1],
            sigma_z=sigmas[2],
            sigma_roll=sigmas[3],
            sigma_pitch=sigmas[4],
            sigma_yaw=sigmas[5],
        )
    raise ValueError(f"sigmas must be of length 2, 3 or 6, got {length}")


def to_covariance_matrix(value) -> ndarray:
    """
    Converter accepting either a covariance object (anything exposing
    ``covariance_matrix``) or an array-like, returning a read-only matrix.
    """
    if hasattr(value, "covariance_matrix"):
        value = value.covariance_matrix
    return to_readonly_array(value)


def covariance_validator(dim: int):
    """
    Returns a validator checking a covariance is a symmetric positive-definite
    dim x dim matrix.
    """

    def _validator(instance, attribute, mat):
        _check_square(mat)
        if mat.shape != (dim, dim):
            raise ValueError(
                f"{attribute.name} must be {dim}x{dim}, got {mat.shape[0]}x{mat.shape[1]}"
            )
        if not np.all(np.isfinite(mat)):
            raise ValueError(f"{attribute.name} must be finite")
        _check_symmetric(mat)
        _check_positive_definite(mat)

    return _validator


def get_inverse_covariance(covar_mat: ndarray) -> ndarray:
    """
    Inverts a validated covariance into the weight applied to raw errors.

    Args:
        covar_mat: symmetric positive-definite covariance

    Returns:
        read-only inverse covariance
    """
    cond = np.linalg.cond(covar_mat)
    if cond > ILL_CONDITIONED_THRESHOLD:
        logger.warning(
            f"Covariance is ill-conditioned (cond={cond:.3g}); weights may be inaccurate"
        )
    return to_readonly_array(np.linalg.inv(covar_mat))


def get_precision(variance: float) -> float:
    """Returns the precision (inverse of the variance)."""
    return 1.0 / variance
