"""
Common interface shared by every residual model.
"""
from abc import ABC, abstractmethod
from typing import ClassVar, Tuple

from ..cost_function import AutoDiffCostFunction
from ..types.enums import ManifoldType
from ..utils.jax_init import jnp


def whiten(weight, raw_error):
    """Weights a raw error vector by an inverse covariance matrix."""
    return jnp.asarray(weight) @ raw_error


def whiten_scalar(weight: float, raw_error):
    """Weights a scalar raw error by a precision, as a 1-element residual."""
    return jnp.reshape(weight * raw_error, (1,))


class ResidualModel(ABC):
    """
    Base class for residual models.

    Subclasses are frozen attrs classes holding the measurement and the
    inverted uncertainty, and implement ``evaluate`` using only ``jax.numpy``
    and the ``lie`` helpers so the same formula serves values and Jacobians.
    """

    __slots__ = ()

    NUM_RESIDUALS: ClassVar[int]
    PARAMETER_BLOCK_SIZES: ClassVar[Tuple[int, ...]]
    PARAMETER_MANIFOLDS: ClassVar[Tuple[ManifoldType, ...]]

    @abstractmethod
    def evaluate(self, *state):
        """Returns the whitened residual for the given parameter blocks."""

    def __call__(self, *state):
        return self.evaluate(*state)

    @classmethod
    def create(cls, *args, use_jit: bool = True, **kwargs) -> AutoDiffCostFunction:
        """
        Builds the model from its measurement arguments and wraps it in a
        cost function with the model's fixed dimensions.
        """
        return AutoDiffCostFunction(cls(*args, **kwargs), use_jit=use_jit)
