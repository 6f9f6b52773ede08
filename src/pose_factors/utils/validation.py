"""
Validation utilities for residual model fields.
"""
from typing import Optional, Tuple
from attrs import validators
import numpy as np


def bound_validator(a: float, b: float):
    """
    Returns a validator that checks if a value is within the bounds [a, b].
    """
    return validators.and_(validators.ge(a), validators.le(b))


def positive_finite_validator():
    """
    Returns a validator that checks a scalar is finite and strictly positive.
    Used for variances and focal lengths.
    """

    def _validator(instance, attribute, value):
        if not np.isfinite(value):
            raise ValueError(f"{attribute.name} must be finite, got {value}.")
        if value <= 0.0:
            raise ValueError(f"{attribute.name} must be positive, got {value}.")

    return _validator


def finite_validator():
    """
    Returns a validator that checks every entry of a scalar or array is finite.
    """

    def _validator(instance, attribute, value):
        if not np.all(np.isfinite(value)):
            raise ValueError(f"{attribute.name} must be finite, got {value}.")

    return _validator


def array_shape_validator(shape: Tuple[int, ...]):
    """
    Returns a validator that checks if a value is a numpy array of a specific shape.
    """

    def _validator(instance, attribute, value):
        if not isinstance(value, np.ndarray):
            raise TypeError(f"{attribute.name} must be a numpy array.")
        if value.shape != shape:
            raise ValueError(
                f"{attribute.name} must have shape {shape}, got {value.shape}."
            )

    return _validator


def quaternion_validator(offset: int = 0):
    """
    Validates if the quaternion stored at value[offset:offset + 4] is normalized
    (i.e., its norm is close to 1).
    """

    def _validator(instance, attribute, value):
        quat = np.asarray(value)[offset : offset + 4]
        if quat.shape != (4,):
            raise ValueError(f"{attribute.name} must hold 4 quaternion elements.")
        norm = float(np.sum(quat**2))
        if not np.isclose(norm, 1.0):
            raise ValueError(f"{attribute.name} is not normalized. Norm: {norm}")

    return _validator


def to_readonly_array(value) -> np.ndarray:
    """
    Converter returning a float64 copy of value with writes disabled, so stored
    measurements cannot change after construction.
    """
    if isinstance(value, (str, bytes)) or value is None:
        raise TypeError(f"Expected a numeric array, got {type(value).__name__}.")
    arr = np.array(value, dtype=float)
    arr.setflags(write=False)
    return arr


def to_readonly_vector(value) -> np.ndarray:
    """Like to_readonly_array, but flattens column/row vectors to 1-D."""
    return to_readonly_array(np.ravel(np.asarray(value, dtype=float)))


def _check_square(mat: np.ndarray) -> None:
    """Checks that a matrix is square"""
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
        raise ValueError(f"matrix must be square, got shape {mat.shape}")


def _check_symmetric(mat: np.ndarray) -> None:
    """Checks that a matrix is symmetric"""
    if not np.allclose(mat, mat.T):
        raise ValueError("matrix must be symmetric")


def _check_positive_definite(mat: np.ndarray) -> None:
    """Checks that a symmetric matrix is positive definite"""
    eigvals = np.linalg.eigvalsh(mat)
    if not np.all(eigvals > 0):
        raise ValueError(f"matrix must be positive definite. Eigenvalues: {eigvals}")


def _check_rotation_matrix(R: np.ndarray, assert_test: bool = False) -> None:
    """
    Checks that R is a rotation matrix.

    Args:
        R: the candidate rotation matrix
        assert_test: if false only check silently, otherwise raise error

    Raises:
        ValueError: the candidate rotation matrix is not orthogonal
        ValueError: the candidate rotation matrix determinant is incorrect
    """
    d = R.shape[0]
    is_orthogonal = np.allclose(R @ R.T, np.eye(d), rtol=1e-3, atol=1e-3)
    if not is_orthogonal:
        if assert_test:
            raise ValueError(f"R is not orthogonal {R @ R.T}")

    has_correct_det = abs(np.linalg.det(R) - 1) < 1e-3
    if not has_correct_det:
        if assert_test:
            raise ValueError(f"R det incorrect {np.linalg.det(R)}")


def _check_transformation_matrix(
    T: np.ndarray, assert_test: bool = True, dim: Optional[int] = None
) -> None:
    """Checks that the matrix passed in is a homogeneous transformation matrix.

    Args:
        T: the homogeneous transformation matrix to test
        assert_test: Whether this is a 'hard' test with assertions or 'soft' test
        dim: dimension of the homogeneous transformation matrix
    """
    _check_square(T)
    matrix_dim = T.shape[0]
    if dim is not None:
        assert (
            matrix_dim == dim + 1
        ), f"matrix dimension {matrix_dim} != dim + 1 {dim + 1}"

    assert matrix_dim == 4, f"Was {T.shape} but must be 4x4 for a 3D transformation matrix"

    # check that is rotation matrix in upper left block
    R = T[:-1, :-1]
    _check_rotation_matrix(R, assert_test=assert_test)

    # check that the bottom row is [0, 0, ..., 1]
    bottom = T[-1, :]
    bottom_expected = np.array([0] * (matrix_dim - 1) + [1])
    assert np.allclose(
        bottom.flatten(), bottom_expected
    ), f"Transformation matrix bottom row is {bottom} but should be {bottom_expected}"
