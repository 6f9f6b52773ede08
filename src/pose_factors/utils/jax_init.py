"""
Single import point for JAX.

Residual formulas are compared against finite differences and consumed by
double-precision solvers, so 64-bit mode must be on before any array is
created. Import ``jax`` and ``jnp`` from here rather than directly.
"""
import jax

jax.config.update("jax_enable_x64", True)

import jax.numpy as jnp  # noqa: E402

__all__ = ["jax", "jnp"]
