"""
Scalar geometric residuals on the position part of pose blocks: range between
two positions and altitude of one position.
"""
from attrs import define, field, validators

from .base import ResidualModel, whiten_scalar
from ..types.covariance import get_precision
from ..types.enums import ManifoldType
from ..utils.jax_init import jnp
from ..utils.validation import finite_validator, positive_finite_validator


@define(frozen=True, eq=False)
class RangeFactor(ResidualModel):
    """
    Weighted difference between a measured range rij and the distance between
    the positions of two estimated poses:

        r = (rij - ||tj_hat - ti_hat||) / qij

    Parameter blocks: Xi_hat, Xj_hat (7 each, only the translation is read).
    Residual dimension: 1. Coincident positions give a non-finite Jacobian.
    """

    NUM_RESIDUALS = 1
    PARAMETER_BLOCK_SIZES = (7, 7)
    PARAMETER_MANIFOLDS = (ManifoldType.SE3, ManifoldType.SE3)

    distance: float = field(
        converter=float,
        validator=[finite_validator(), validators.ge(0.0)],
        metadata={"description": "The range measurement value"},
    )
    variance: float = field(
        converter=float,
        validator=positive_finite_validator(),
        metadata={"description": "Variance of the range measurement"},
    )
    precision: float = field(init=False, repr=False)

    def __attrs_post_init__(self):
        object.__setattr__(self, "precision", get_precision(self.variance))

    def evaluate(self, Xi_hat, Xj_hat):
        ti_hat = jnp.asarray(Xi_hat)[0:3]
        tj_hat = jnp.asarray(Xj_hat)[0:3]
        error = self.distance - jnp.linalg.norm(tj_hat - ti_hat)
        return whiten_scalar(self.precision, error)


@define(frozen=True, eq=False)
class AltFactor(ResidualModel):
    """
    Weighted difference between a measured altitude hi and the z component of
    an estimated pose:

        r = (hi - z_hat) / qi

    Parameter blocks: Xi_hat (7, only index 2 is read). Residual dimension: 1.
    """

    NUM_RESIDUALS = 1
    PARAMETER_BLOCK_SIZES = (7,)
    PARAMETER_MANIFOLDS = (ManifoldType.SE3,)

    altitude: float = field(
        converter=float,
        validator=finite_validator(),
        metadata={"description": "The altitude measurement value"},
    )
    variance: float = field(
        converter=float,
        validator=positive_finite_validator(),
        metadata={"description": "Variance of the altitude measurement"},
    )
    precision: float = field(init=False, repr=False)

    def __attrs_post_init__(self):
        object.__setattr__(self, "precision", get_precision(self.variance))

    def evaluate(self, Xi_hat):
        hi_hat = jnp.asarray(Xi_hat)[2]
        return whiten_scalar(self.precision, self.altitude - hi_hat)
