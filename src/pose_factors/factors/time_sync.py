"""
Time-offset residual for synchronizing two attitude streams.
"""
from attrs import define, field
from numpy import ndarray

from .base import ResidualModel, whiten
from ..types.covariance import covariance_validator, get_inverse_covariance, to_covariance_matrix
from ..types.enums import ManifoldType
from ..utils.jax_init import jnp
from ..utils.validation import array_shape_validator, finite_validator, to_readonly_vector


@define(frozen=True, eq=False)
class TimeSyncAttFactor(ResidualModel):
    """
    Residual for estimating the time offset dt between a reference attitude
    q_ref and a measured attitude q with body rate w:

        r = Q^-1 (q_ref - (q + dt_hat * w))

    The attitudes are used as plain vectors: the subtraction and the rate
    extrapolation act component-wise on the vector part [qx, qy, qz]. This is
    a small-angle linearization of attitude drift over a short offset and is
    not a manifold operation.

    Parameter blocks: dt_hat (1). Residual dimension: 3.
    """

    NUM_RESIDUALS = 3
    PARAMETER_BLOCK_SIZES = (1,)
    PARAMETER_MANIFOLDS = (ManifoldType.SCALAR,)

    q_ref: ndarray = field(
        converter=to_readonly_vector,
        validator=[array_shape_validator((4,)), finite_validator()],
        metadata={"description": "Reference attitude [qw, qx, qy, qz]"},
    )
    q: ndarray = field(
        converter=to_readonly_vector,
        validator=[array_shape_validator((4,)), finite_validator()],
        metadata={"description": "Measured attitude [qw, qx, qy, qz]"},
    )
    w: ndarray = field(
        converter=to_readonly_vector,
        validator=[array_shape_validator((3,)), finite_validator()],
        metadata={"description": "Measured angular rate (rad/s)"},
    )
    covariance: ndarray = field(
        converter=to_covariance_matrix,
        validator=covariance_validator(3),
        repr=False,
        metadata={"description": "3x3 covariance of the attitude difference"},
    )
    inverse_covariance: ndarray = field(init=False, repr=False)

    def __attrs_post_init__(self):
        object.__setattr__(self, "inverse_covariance", get_inverse_covariance(self.covariance))

    def evaluate(self, dt_hat):
        dt = jnp.asarray(dt_hat).reshape(-1)[0]
        error = jnp.asarray(self.q_ref[1:4]) - (jnp.asarray(self.q[1:4]) + dt * jnp.asarray(self.w))
        return whiten(self.inverse_covariance, error)
