"""
Pinhole reprojection residual for a known 3D point seen by a posed camera.
"""
from attrs import define, field
import numpy as np
from numpy import ndarray

from .base import ResidualModel, whiten
from ..lie import se3_from_vector, transform_point
from ..types.covariance import covariance_validator, get_inverse_covariance, to_covariance_matrix
from ..types.enums import ManifoldType
from ..utils.jax_init import jnp
from ..utils.validation import (
    array_shape_validator,
    finite_validator,
    positive_finite_validator,
    to_readonly_vector,
)


@define(frozen=True, eq=False)
class SE3ReprojectionFactor(ResidualModel):
    """
    Difference between an observed pixel and the projection of a world point
    through the estimated camera pose H_hat (camera-to-world):

        p_c = H_hat^-1 ∘ p_w
        r   = Q^-1 ([u, v] - [fx x_c / z_c + cx, fy y_c / z_c + cy])

    The pixel covariance defaults to identity, which leaves the error in pixels.
    A point at zero depth gives a non-finite residual.

    Parameter blocks: H_hat [tx, ty, tz, qw, qx, qy, qz]. Residual dimension: 2.
    """

    NUM_RESIDUALS = 2
    PARAMETER_BLOCK_SIZES = (7,)
    PARAMETER_MANIFOLDS = (ManifoldType.SE3,)

    fx: float = field(converter=float, validator=positive_finite_validator())
    fy: float = field(converter=float, validator=positive_finite_validator())
    cx: float = field(converter=float, validator=finite_validator())
    cy: float = field(converter=float, validator=finite_validator())
    img_coords: ndarray = field(
        converter=to_readonly_vector,
        validator=[array_shape_validator((2,)), finite_validator()],
        metadata={"description": "Observed pixel [u, v]"},
    )
    world_coords: ndarray = field(
        converter=to_readonly_vector,
        validator=[array_shape_validator((3,)), finite_validator()],
        metadata={"description": "Landmark position in the world frame"},
    )
    covariance: ndarray = field(
        factory=lambda: np.eye(2),
        converter=to_covariance_matrix,
        validator=covariance_validator(2),
        repr=False,
    )
    inverse_covariance: ndarray = field(init=False, repr=False)

    def __attrs_post_init__(self):
        object.__setattr__(self, "inverse_covariance", get_inverse_covariance(self.covariance))

    def project(self, camera_coords):
        """Pinhole projection of a camera-frame point to pixel coordinates."""
        x, y, z = camera_coords[0], camera_coords[1], camera_coords[2]
        return jnp.stack([self.fx * x / z + self.cx, self.fy * y / z + self.cy])

    def evaluate(self, H_hat):
        camera_coords = transform_point(se3_from_vector(H_hat).inverse(), self.world_coords)
        error = jnp.asarray(self.img_coords) - self.project(camera_coords)
        return whiten(self.inverse_covariance, error)
