"""
Extrinsic calibration residuals: a rotation or rigid-transform offset between
a measured frame and a reference frame.
"""
from attrs import define, field
from numpy import ndarray

from .base import ResidualModel, whiten
from ..lie import se3_from_vector, se3_minus, so3_from_vector, so3_minus
from ..types.covariance import covariance_validator, get_inverse_covariance, to_covariance_matrix
from ..types.enums import ManifoldType
from ..utils.validation import (
    array_shape_validator,
    finite_validator,
    quaternion_validator,
    to_readonly_vector,
)


@define(frozen=True, eq=False)
class SO3OffsetFactor(ResidualModel):
    """
    Rotation offset calibration from paired attitude measurements:

        r = Q^-1 (q_ref ⊖ (q ∘ q_off_hat))

    Parameter blocks: q_off_hat [qw, qx, qy, qz]. Residual dimension: 3.
    """

    NUM_RESIDUALS = 3
    PARAMETER_BLOCK_SIZES = (4,)
    PARAMETER_MANIFOLDS = (ManifoldType.SO3,)

    q_ref: ndarray = field(
        converter=to_readonly_vector,
        validator=[array_shape_validator((4,)), finite_validator(), quaternion_validator()],
        metadata={"description": "Reference attitude [qw, qx, qy, qz]"},
    )
    q: ndarray = field(
        converter=to_readonly_vector,
        validator=[array_shape_validator((4,)), finite_validator(), quaternion_validator()],
        metadata={"description": "Measured attitude [qw, qx, qy, qz]"},
    )
    covariance: ndarray = field(
        converter=to_covariance_matrix,
        validator=covariance_validator(3),
        repr=False,
    )
    inverse_covariance: ndarray = field(init=False, repr=False)

    def __attrs_post_init__(self):
        object.__setattr__(self, "inverse_covariance", get_inverse_covariance(self.covariance))

    def evaluate(self, q_off_hat):
        q_pred = so3_from_vector(self.q) @ so3_from_vector(q_off_hat)
        error = so3_minus(so3_from_vector(self.q_ref), q_pred)
        return whiten(self.inverse_covariance, error)


@define(frozen=True, eq=False)
class SE3OffsetFactor(ResidualModel):
    """
    Rigid-transform offset calibration from paired pose measurements:

        r = Q^-1 (T_ref ⊖ (T ∘ T_off_hat))

    Parameter blocks: T_off_hat [tx, ty, tz, qw, qx, qy, qz].
    Residual dimension: 6, translation part first.
    """

    NUM_RESIDUALS = 6
    PARAMETER_BLOCK_SIZES = (7,)
    PARAMETER_MANIFOLDS = (ManifoldType.SE3,)

    T_ref: ndarray = field(
        converter=to_readonly_vector,
        validator=[array_shape_validator((7,)), finite_validator(), quaternion_validator(offset=3)],
        metadata={"description": "Reference pose [t, q]"},
    )
    T: ndarray = field(
        converter=to_readonly_vector,
        validator=[array_shape_validator((7,)), finite_validator(), quaternion_validator(offset=3)],
        metadata={"description": "Measured pose [t, q]"},
    )
    covariance: ndarray = field(
        converter=to_covariance_matrix,
        validator=covariance_validator(6),
        repr=False,
    )
    inverse_covariance: ndarray = field(init=False, repr=False)

    def __attrs_post_init__(self):
        object.__setattr__(self, "inverse_covariance", get_inverse_covariance(self.covariance))

    def evaluate(self, T_off_hat):
        T_pred = se3_from_vector(self.T) @ se3_from_vector(T_off_hat)
        error = se3_minus(se3_from_vector(self.T_ref), T_pred)
        return whiten(self.inverse_covariance, error)
