"""
Diagnostics for cost functions: autodiff Jacobians against central finite
differences, and residual/Jacobian health at a given state.
"""
from typing import List, Optional, Sequence

import numpy as np

from .config import GradientCheckParams
from .cost_function import AutoDiffCostFunction
from .logging_config import get_logger

logger = get_logger(__name__)


def numerical_jacobians(
    cost_function: AutoDiffCostFunction, parameters: Sequence, step: float = 1e-6
) -> List[np.ndarray]:
    """
    Central finite-difference Jacobians of the plain residual evaluation, in
    ambient coordinates (each parameter entry perturbed independently).

    Args:
        cost_function: the cost function to differentiate
        parameters: one array per parameter block
        step: perturbation size

    Returns:
        one (num_residuals, block_size) array per parameter block
    """
    blocks = [np.array(p, dtype=float).reshape(-1) for p in parameters]
    jacobians = []
    for i, block in enumerate(blocks):
        J = np.zeros((cost_function.num_residuals, block.shape[0]))
        for k in range(block.shape[0]):
            plus = [b.copy() for b in blocks]
            minus = [b.copy() for b in blocks]
            plus[i][k] += step
            minus[i][k] -= step
            J[:, k] = (cost_function.evaluate(*plus) - cost_function.evaluate(*minus)) / (2 * step)
        jacobians.append(J)
    return jacobians


def check_cost_function_jacobians(
    cost_function: AutoDiffCostFunction,
    parameters: Sequence,
    params: Optional[GradientCheckParams] = None,
    verbose: bool = True,
) -> dict:
    """
    Compare the autodiff Jacobians of a cost function with central finite
    differences.

    Args:
        cost_function: the cost function to check
        parameters: one array per parameter block
        params: step and tolerances (defaults if None)
        verbose: If True, log warnings for mismatching blocks

    Returns:
        Dictionary with "ok", "max_abs_error" and "max_rel_error" per block
        and the two Jacobian lists
    """
    if params is None:
        params = GradientCheckParams()

    _, autodiff = cost_function.evaluate_with_jacobians(*parameters)
    numeric = numerical_jacobians(cost_function, parameters, step=params.step)

    results = {"ok": True, "blocks": [], "autodiff": autodiff, "numeric": numeric}
    for i, (J_ad, J_fd) in enumerate(zip(autodiff, numeric)):
        abs_err = np.abs(J_ad - J_fd)
        rel_err = abs_err / np.maximum(np.abs(J_fd), 1.0)
        block_ok = bool(np.allclose(J_ad, J_fd, rtol=params.rtol, atol=params.atol))
        results["blocks"].append(
            {
                "ok": block_ok,
                "max_abs_error": float(np.max(abs_err)) if abs_err.size else 0.0,
                "max_rel_error": float(np.max(rel_err)) if rel_err.size else 0.0,
            }
        )
        if not block_ok:
            results["ok"] = False
            if verbose:
                logger.warning(
                    f"{cost_function!r}: Jacobian mismatch in block {i}, "
                    f"max abs error {np.max(abs_err):.3g}"
                )
    return results


def diagnose_cost_function(
    cost_function: AutoDiffCostFunction, parameters: Sequence, verbose: bool = True
) -> dict:
    """
    Report residual and Jacobian health of a cost function at a state.

    Args:
        cost_function: the cost function to diagnose
        parameters: one array per parameter block
        verbose: If True, log warnings for non-finite values or rank loss

    Returns:
        Dictionary with residual norm, finiteness flags and per-block
        Jacobian ranks
    """
    residual, jacobians = cost_function.evaluate_with_jacobians(*parameters)
    diagnostics = {
        "residual": residual,
        "residual_norm": float(np.linalg.norm(residual)),
        "residual_finite": bool(np.all(np.isfinite(residual))),
        "jacobians_finite": [bool(np.all(np.isfinite(J))) for J in jacobians],
        "jacobian_ranks": [],
    }
    for i, J in enumerate(jacobians):
        if np.all(np.isfinite(J)):
            diagnostics["jacobian_ranks"].append(int(np.linalg.matrix_rank(J)))
        else:
            diagnostics["jacobian_ranks"].append(None)
            if verbose:
                logger.warning(f"{cost_function!r}: non-finite Jacobian for block {i}")

    if verbose and not diagnostics["residual_finite"]:
        logger.warning(f"{cost_function!r}: non-finite residual {residual}")
    return diagnostics
