"""
Solver-facing cost function wrapper.

An ``AutoDiffCostFunction`` binds a residual model to its fixed residual
dimension and parameter block sizes. Residuals come from the plain-number
evaluation of the model; Jacobians come from evaluating the same model under
JAX forward-mode tracers (dual numbers), so no derivative code is written by
hand.
"""
from typing import Callable, List, Sequence, Tuple

from attrs import define, field
import numpy as np

from .logging_config import get_logger
from .types.enums import ManifoldType
from .utils.jax_init import jax, jnp

logger = get_logger(__name__)


def _build_residual_fn(model, use_jit: bool) -> Callable:
    def residual_fn(*parameters):
        return model.evaluate(*parameters)

    return jax.jit(residual_fn) if use_jit else residual_fn


def _build_jacobian_fn(model, use_jit: bool) -> Callable:
    num_blocks = len(model.PARAMETER_BLOCK_SIZES)

    def residual_and_jacobians(*parameters):
        residual = model.evaluate(*parameters)
        jacobians = jax.jacfwd(model.evaluate, argnums=tuple(range(num_blocks)))(
            *parameters
        )
        return residual, jacobians

    return jax.jit(residual_and_jacobians) if use_jit else residual_and_jacobians


@define(frozen=True, eq=False)
class AutoDiffCostFunction:
    """
    Cost object attachable to a least-squares solver.

    Attributes:
        model: the residual model; must expose ``evaluate``, ``NUM_RESIDUALS``,
            ``PARAMETER_BLOCK_SIZES`` and ``PARAMETER_MANIFOLDS``
        use_jit: compile the residual and Jacobian functions with ``jax.jit``
    """

    model: object = field()
    use_jit: bool = field(default=True, kw_only=True)
    _residual_fn: Callable = field(init=False, repr=False)
    _jacobian_fn: Callable = field(init=False, repr=False)

    def __attrs_post_init__(self):
        for name in ("evaluate", "NUM_RESIDUALS", "PARAMETER_BLOCK_SIZES", "PARAMETER_MANIFOLDS"):
            if not hasattr(self.model, name):
                raise TypeError(
                    f"{type(self.model).__name__} is not a residual model (missing {name})"
                )
        object.__setattr__(self, "_residual_fn", _build_residual_fn(self.model, self.use_jit))
        object.__setattr__(self, "_jacobian_fn", _build_jacobian_fn(self.model, self.use_jit))
        logger.debug(
            f"Created cost function for {type(self.model).__name__}: "
            f"{self.num_residuals} residuals, blocks {self.parameter_block_sizes}"
        )

    def __repr__(self) -> str:
        return (
            f"AutoDiffCostFunction({type(self.model).__name__}, "
            f"{self.num_residuals}, {list(self.parameter_block_sizes)})"
        )

    @property
    def num_residuals(self) -> int:
        return self.model.NUM_RESIDUALS

    @property
    def parameter_block_sizes(self) -> Tuple[int, ...]:
        return tuple(self.model.PARAMETER_BLOCK_SIZES)

    @property
    def parameter_manifolds(self) -> Tuple[ManifoldType, ...]:
        return tuple(self.model.PARAMETER_MANIFOLDS)

    def _check_parameters(self, parameters: Sequence) -> List:
        expected = self.parameter_block_sizes
        if len(parameters) != len(expected):
            raise ValueError(
                f"{type(self.model).__name__} takes {len(expected)} parameter blocks, "
                f"got {len(parameters)}"
            )
        blocks = []
        for i, (block, size) in enumerate(zip(parameters, expected)):
            block = jnp.asarray(block, dtype=jnp.float64).reshape(-1)
            if block.shape[0] != size:
                raise ValueError(
                    f"Parameter block {i} of {type(self.model).__name__} must have "
                    f"{size} elements, got {block.shape[0]}"
                )
            blocks.append(block)
        return blocks

    def _warn_if_not_finite(self, residual: np.ndarray) -> None:
        if not np.all(np.isfinite(residual)):
            logger.warning(f"{type(self.model).__name__} produced a non-finite residual: {residual}")

    def evaluate(self, *parameters) -> np.ndarray:
        """
        Evaluate the whitened residual.

        Args:
            *parameters: one array per parameter block

        Returns:
            residual of shape (num_residuals,)

        Raises:
            ValueError: the number or size of the parameter blocks is wrong
        """
        blocks = self._check_parameters(parameters)
        residual = np.asarray(self._residual_fn(*blocks))
        self._warn_if_not_finite(residual)
        return residual

    def evaluate_with_jacobians(self, *parameters) -> Tuple[np.ndarray, List[np.ndarray]]:
        """
        Evaluate the whitened residual and its Jacobian with respect to each
        parameter block (ambient coordinates).

        Args:
            *parameters: one array per parameter block

        Returns:
            (residual, jacobians), jacobians[i] having shape
            (num_residuals, parameter_block_sizes[i])

        Raises:
            ValueError: the number or size of the parameter blocks is wrong
        """
        blocks = self._check_parameters(parameters)
        residual, jacobians = self._jacobian_fn(*blocks)
        residual = np.asarray(residual)
        self._warn_if_not_finite(residual)
        return residual, [np.asarray(J) for J in jacobians]

    def __call__(self, *parameters) -> np.ndarray:
        return self.evaluate(*parameters)
