"""
Conversion utilities between GTSAM types and the flat parameter blocks used
by the residual models.
"""
import numpy as np

from gtsam import Pose3, Rot3, Values

from ...lie import (
    se3_from_vector,
    se3_plus,
    se3_to_vector,
    so3_from_vector,
    so3_plus,
    so3_to_vector,
)
from ...types.enums import ManifoldType
from ...utils.jax_init import jax, jnp


def get_se3_vector_from_pose3(pose: Pose3) -> np.ndarray:
    """
    Convert a GTSAM Pose3 to [tx, ty, tz, qw, qx, qy, qz].
    """
    translation = np.asarray(pose.translation(), dtype=float).reshape(3)
    return np.concatenate([translation, get_so3_vector_from_rot3(pose.rotation())])


def get_so3_vector_from_rot3(rot: Rot3) -> np.ndarray:
    """
    Convert a GTSAM Rot3 to [qw, qx, qy, qz].
    """
    q = rot.toQuaternion()
    return np.array([q.w(), q.x(), q.y(), q.z()], dtype=float)


def get_pose3_from_se3_vector(X: np.ndarray) -> Pose3:
    """
    Convert [tx, ty, tz, qw, qx, qy, qz] to a GTSAM Pose3.
    """
    X = np.asarray(X, dtype=float).reshape(7)
    return Pose3(get_rot3_from_so3_vector(X[3:]), X[:3])


def get_rot3_from_so3_vector(q: np.ndarray) -> Rot3:
    """
    Convert [qw, qx, qy, qz] to a GTSAM Rot3.
    """
    qw, qx, qy, qz = np.asarray(q, dtype=float).reshape(4)
    return Rot3.Quaternion(qw, qx, qy, qz)


def get_parameter_block(values: Values, key: int, manifold: ManifoldType) -> np.ndarray:
    """
    Read the value stored under key as a flat parameter block.

    Raises:
        ValueError: If the manifold type is unknown.
    """
    if manifold == ManifoldType.SE3:
        return get_se3_vector_from_pose3(values.atPose3(key))
    elif manifold == ManifoldType.SO3:
        return get_so3_vector_from_rot3(values.atRot3(key))
    elif manifold == ManifoldType.SCALAR:
        return np.array([values.atDouble(key)], dtype=float)
    raise ValueError(f"Unknown manifold type: {manifold}")


def _se3_retract(X, xi):
    # GTSAM orders Pose3 tangents rotation first, [omega, v]
    return se3_to_vector(se3_plus(se3_from_vector(X), jnp.concatenate([xi[3:], xi[:3]])))


def _so3_retract(q, omega):
    return so3_to_vector(so3_plus(so3_from_vector(q), omega))


_se3_retract_jacobian = jax.jit(jax.jacfwd(_se3_retract, argnums=1))
_so3_retract_jacobian = jax.jit(jax.jacfwd(_so3_retract, argnums=1))


def get_local_jacobian(block: np.ndarray, manifold: ManifoldType) -> np.ndarray:
    """
    Jacobian of a parameter block with respect to GTSAM's local coordinates
    at the block, shape (ambient_size, tangent_size). Chaining an ambient
    Jacobian with it gives the Jacobian GTSAM expects.
    """
    if manifold == ManifoldType.SE3:
        return np.asarray(_se3_retract_jacobian(jnp.asarray(block), jnp.zeros(6)))
    elif manifold == ManifoldType.SO3:
        return np.asarray(_so3_retract_jacobian(jnp.asarray(block), jnp.zeros(3)))
    elif manifold == ManifoldType.SCALAR:
        return np.eye(1)
    raise ValueError(f"Unknown manifold type: {manifold}")
