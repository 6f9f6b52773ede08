"""
Relative pose residual between two estimated rigid transforms.
"""
from attrs import define, field
from numpy import ndarray

from .base import ResidualModel, whiten
from ..lie import se3_from_vector, se3_minus
from ..types.covariance import covariance_validator, get_inverse_covariance, to_covariance_matrix
from ..types.enums import ManifoldType
from ..utils.validation import (
    array_shape_validator,
    finite_validator,
    quaternion_validator,
    to_readonly_vector,
)


@define(frozen=True, eq=False)
class RelSE3Factor(ResidualModel):
    """
    Weighted difference between a measured relative transform Xij and the
    relative transform between two estimated poses Xi_hat and Xj_hat:

        r = Q^-1 ((Xi_hat^-1 ∘ Xj_hat) ⊖ Xij)

    Parameter blocks: Xi_hat, Xj_hat, each [tx, ty, tz, qw, qx, qy, qz].
    Residual dimension: 6, translation part first.
    """

    NUM_RESIDUALS = 6
    PARAMETER_BLOCK_SIZES = (7, 7)
    PARAMETER_MANIFOLDS = (ManifoldType.SE3, ManifoldType.SE3)

    X_ij: ndarray = field(
        converter=to_readonly_vector,
        validator=[array_shape_validator((7,)), finite_validator(), quaternion_validator(offset=3)],
        metadata={"description": "Measured relative transform [t, q]"},
    )
    covariance: ndarray = field(
        converter=to_covariance_matrix,
        validator=covariance_validator(6),
        repr=False,
        metadata={"description": "6x6 covariance in the SE3 tangent space"},
    )
    inverse_covariance: ndarray = field(init=False, repr=False)

    def __attrs_post_init__(self):
        object.__setattr__(self, "inverse_covariance", get_inverse_covariance(self.covariance))

    def evaluate(self, Xi_hat, Xj_hat):
        Xi = se3_from_vector(Xi_hat)
        Xj = se3_from_vector(Xj_hat)
        error = se3_minus(Xi.inverse() @ Xj, se3_from_vector(self.X_ij))
        return whiten(self.inverse_covariance, error)
