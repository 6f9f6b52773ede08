"""
Rotation residual: difference between an estimated and a measured rotation.
"""
from attrs import define, field
from numpy import ndarray

from .base import ResidualModel, whiten
from ..lie import so3_from_vector, so3_minus
from ..types.covariance import covariance_validator, get_inverse_covariance, to_covariance_matrix
from ..types.enums import ManifoldType
from ..utils.validation import (
    array_shape_validator,
    finite_validator,
    quaternion_validator,
    to_readonly_vector,
)


@define(frozen=True, eq=False)
class SO3Factor(ResidualModel):
    """
    Weighted boxminus between an estimated rotation q_hat and a measured
    rotation q:

        r = Q^-1 (q_hat ⊖ q)

    Parameter blocks: q_hat [qw, qx, qy, qz]. Residual dimension: 3.
    """

    NUM_RESIDUALS = 3
    PARAMETER_BLOCK_SIZES = (4,)
    PARAMETER_MANIFOLDS = (ManifoldType.SO3,)

    q: ndarray = field(
        converter=to_readonly_vector,
        validator=[array_shape_validator((4,)), finite_validator(), quaternion_validator()],
        metadata={"description": "Measured rotation [qw, qx, qy, qz]"},
    )
    covariance: ndarray = field(
        converter=to_covariance_matrix,
        validator=covariance_validator(3),
        repr=False,
        metadata={"description": "3x3 covariance in the SO3 tangent space"},
    )
    inverse_covariance: ndarray = field(init=False, repr=False)

    def __attrs_post_init__(self):
        object.__setattr__(self, "inverse_covariance", get_inverse_covariance(self.covariance))

    def evaluate(self, q_hat):
        error = so3_minus(so3_from_vector(q_hat), so3_from_vector(self.q))
        return whiten(self.inverse_covariance, error)
