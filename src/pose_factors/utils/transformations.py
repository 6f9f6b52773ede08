"""
Conversions between rotation matrices, homogeneous transforms and the flat
4-number (rotation) and 7-number (rigid transform) state layouts.

State layouts are scalar-first: a rotation is [qw, qx, qy, qz] and a transform
is [tx, ty, tz, qw, qx, qy, qz]. scipy uses scalar-last quaternions, so the
conversions below reorder at the boundary.
"""
from typing import Optional

import numpy as np
import scipy.spatial.transform
from .validation import _check_square, _check_rotation_matrix, _check_transformation_matrix


def get_rotation_matrix_from_transformation_matrix(T: np.ndarray) -> np.ndarray:
    """Returns the rotation matrix from the transformation matrix.

    Args:
        T: the transformation matrix

    Returns:
        the rotation matrix
    """
    _check_square(T)
    dim = T.shape[0] - 1
    return T[:dim, :dim]


def get_translation_from_transformation_matrix(T: np.ndarray) -> np.ndarray:
    """Returns the translation from a transformation matrix.

    Args:
        T: the transformation matrix

    Returns:
        the translation vector
    """
    _check_square(T)
    dim = T.shape[0] - 1
    return T[:dim, dim]


def get_rotation_matrix_from_quat(quat: np.ndarray) -> np.ndarray:
    """Returns the rotation matrix from a quaternion in scalar-first (w, x, y, z) format.

    Args:
        quat: the quaternion as (w, x, y, z)

    Returns:
        3x3 rotation matrix
    """
    quat = np.asarray(quat, dtype=float)
    assert quat.shape == (4,)
    rot = scipy.spatial.transform.Rotation.from_quat(np.roll(quat, -1))

    rot_mat = rot.as_matrix()
    assert rot_mat.shape == (3, 3)

    _check_rotation_matrix(rot_mat, assert_test=True)
    return rot_mat


def get_quat_from_rotation_matrix(mat: np.ndarray) -> np.ndarray:
    """Returns the quaternion from a rotation matrix in scalar-first (w, x, y, z) format.
    Ensures w is positive by convention, given R(-q) = R(q).

    Args:
        mat: the 3x3 rotation matrix

    Returns:
        quaternion as (w, x, y, z)
    """
    _check_rotation_matrix(mat, assert_test=True)
    rot = scipy.spatial.transform.Rotation.from_matrix(mat)
    quat = np.roll(rot.as_quat(), 1)

    # Ensure positive w by convention
    if quat[0] < 0:
        quat = np.negative(quat)

    return quat


def get_quat_from_rotation_vector(rotvec: np.ndarray) -> np.ndarray:
    """Returns the (w, x, y, z) quaternion for an axis-angle rotation vector."""
    rotvec = np.asarray(rotvec, dtype=float)
    assert rotvec.shape == (3,)
    quat = np.roll(scipy.spatial.transform.Rotation.from_rotvec(rotvec).as_quat(), 1)
    if quat[0] < 0:
        quat = np.negative(quat)
    return quat


def get_se3_vector_from_matrix(T: np.ndarray) -> np.ndarray:
    """Returns the 7-number transform [t, q] from a 4x4 homogeneous matrix.

    Args:
        T: the 4x4 transformation matrix

    Returns:
        [tx, ty, tz, qw, qx, qy, qz]
    """
    _check_transformation_matrix(T, dim=3)
    quat = get_quat_from_rotation_matrix(get_rotation_matrix_from_transformation_matrix(T))
    return np.concatenate([get_translation_from_transformation_matrix(T), quat])


def get_matrix_from_se3_vector(X: np.ndarray) -> np.ndarray:
    """Returns the 4x4 homogeneous matrix of a 7-number transform.

    Args:
        X: [tx, ty, tz, qw, qx, qy, qz]

    Returns:
        4x4 transformation matrix
    """
    X = np.asarray(X, dtype=float)
    assert X.shape == (7,), f"transform must have 7 elements, got {X.shape}"
    T = np.eye(4)
    T[:3, :3] = get_rotation_matrix_from_quat(X[3:])
    T[:3, 3] = X[:3]
    return T


def get_random_quat(rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Returns a uniformly random unit quaternion (w, x, y, z) with w >= 0."""
    rot = scipy.spatial.transform.Rotation.random(None, rng)
    quat = np.roll(rot.as_quat(), 1)
    if quat[0] < 0:
        quat = np.negative(quat)
    return quat


def get_random_se3_vector(
    rng: Optional[np.random.Generator] = None, translation_scale: float = 1.0
) -> np.ndarray:
    """Returns a random 7-number transform with a uniformly random rotation.

    Args:
        rng: random generator (a fresh default generator if None)
        translation_scale: standard deviation of each translation component

    Returns:
        [tx, ty, tz, qw, qx, qy, qz]
    """
    if rng is None:
        rng = np.random.default_rng()
    translation = rng.normal(scale=translation_scale, size=3)
    return np.concatenate([translation, get_random_quat(rng)])
