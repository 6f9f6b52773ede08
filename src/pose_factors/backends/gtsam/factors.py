"""
Factor creation utilities for GTSAM.

Wraps an AutoDiffCostFunction in a gtsam.CustomFactor so any residual model
can be added to a gtsam.NonlinearFactorGraph.
"""
from typing import Sequence

import numpy as np

from gtsam import CustomFactor, Values, noiseModel

from ...cost_function import AutoDiffCostFunction
from ...logging_config import get_logger
from .conversions import get_local_jacobian, get_parameter_block

logger = get_logger(__name__)


def get_custom_factor(cost_function: AutoDiffCostFunction, keys: Sequence[int]) -> CustomFactor:
    """
    Create a GTSAM CustomFactor from a cost function.

    The residuals are already whitened, so the factor uses a unit noise model.
    Jacobians are the autodiff ambient Jacobians chained with the Jacobian
    of each block with respect to GTSAM's local coordinates.

    Args:
        cost_function: The cost function to wrap.
        keys: One GTSAM key per parameter block, in the model's block order.

    Returns:
        gtsam.CustomFactor

    Raises:
        ValueError: If the number of keys does not match the parameter blocks.
    """
    keys = [int(k) for k in keys]
    manifolds = cost_function.parameter_manifolds
    if len(keys) != len(manifolds):
        raise ValueError(
            f"{cost_function!r} takes {len(manifolds)} parameter blocks, got {len(keys)} keys"
        )

    noise = noiseModel.Unit.Create(cost_function.num_residuals)

    def error_fn(this: CustomFactor, values: Values, jacobians=None) -> np.ndarray:
        blocks = [
            get_parameter_block(values, key, manifold) for key, manifold in zip(keys, manifolds)
        ]
        if jacobians is None:
            return cost_function.evaluate(*blocks)

        residual, ambient_jacobians = cost_function.evaluate_with_jacobians(*blocks)
        for i, (J, block, manifold) in enumerate(zip(ambient_jacobians, blocks, manifolds)):
            jacobians[i] = J @ get_local_jacobian(block, manifold)
        return residual

    logger.debug(f"Created GTSAM CustomFactor for {cost_function!r} on keys {keys}")
    return CustomFactor(noise, keys, error_fn)
