import unittest

import attrs
import numpy as np
from scipy.spatial.transform import Rotation

from pose_factors import SO3Factor, SO3OffsetFactor
from pose_factors.utils.transformations import get_quat_from_rotation_vector, get_random_quat


def _wxyz(rot: Rotation) -> np.ndarray:
    return np.roll(rot.as_quat(), 1)


class TestSO3Factor(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(7)
        self.q = get_random_quat(self.rng)
        self.Q = np.diag([0.1, 0.2, 0.3]) ** 2

    def test_zero_at_measurement(self):
        factor = SO3Factor(self.q, self.Q)
        np.testing.assert_allclose(factor(self.q), np.zeros(3), atol=1e-12)

    def test_negated_quaternion_is_same_rotation(self):
        factor = SO3Factor(self.q, self.Q)
        np.testing.assert_allclose(factor(-self.q), np.zeros(3), atol=1e-9)

    def test_right_perturbation(self):
        delta = np.array([0.05, -0.02, 0.1])
        q_hat = _wxyz(Rotation.from_quat(np.roll(self.q, -1)) * Rotation.from_rotvec(delta))
        factor = SO3Factor(self.q, self.Q)
        np.testing.assert_allclose(factor(q_hat), np.linalg.inv(self.Q) @ delta, rtol=1e-9)

    def test_doubling_covariance_halves_residual(self):
        q_hat = get_random_quat(self.rng)
        r1 = SO3Factor(self.q, self.Q)(q_hat)
        r2 = SO3Factor(self.q, 2.0 * self.Q)(q_hat)
        np.testing.assert_allclose(r2, 0.5 * r1, rtol=1e-12)

    def test_unnormalized_measurement_rejected(self):
        with self.assertRaises(ValueError):
            SO3Factor(np.array([1.0, 1.0, 0.0, 0.0]), self.Q)

    def test_wrong_shape_rejected(self):
        with self.assertRaises(ValueError):
            SO3Factor(np.array([1.0, 0.0, 0.0]), self.Q)

    def test_measurement_is_immutable(self):
        factor = SO3Factor(self.q, self.Q)
        with self.assertRaises(ValueError):
            factor.q[0] = 0.0
        with self.assertRaises(attrs.exceptions.FrozenInstanceError):
            factor.q = self.q

    def test_construction_copies_input(self):
        q = self.q.copy()
        factor = SO3Factor(q, self.Q)
        q[0] = 5.0
        self.assertNotEqual(factor.q[0], 5.0)


class TestSO3OffsetFactor(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(11)
        self.Q = np.eye(3) * 0.01

    def test_identity_offset_reduces_to_measurement_difference(self):
        q_ref = get_random_quat(self.rng)
        q = get_random_quat(self.rng)
        factor = SO3OffsetFactor(q_ref, q, self.Q)
        R_ref = Rotation.from_quat(np.roll(q_ref, -1))
        R = Rotation.from_quat(np.roll(q, -1))
        expected = np.linalg.inv(self.Q) @ (R.inv() * R_ref).as_rotvec()
        np.testing.assert_allclose(factor(np.array([1.0, 0.0, 0.0, 0.0])), expected, rtol=1e-8)

    def test_zero_at_true_offset(self):
        q = get_random_quat(self.rng)
        q_off = get_quat_from_rotation_vector(np.array([0.1, 0.2, -0.3]))
        R_ref = Rotation.from_quat(np.roll(q, -1)) * Rotation.from_quat(np.roll(q_off, -1))
        factor = SO3OffsetFactor(_wxyz(R_ref), q, self.Q)
        np.testing.assert_allclose(factor(q_off), np.zeros(3), atol=1e-9)

    def test_doubling_covariance_halves_residual(self):
        q_ref = get_random_quat(self.rng)
        q = get_random_quat(self.rng)
        q_off = get_quat_from_rotation_vector(np.array([0.3, 0.0, 0.1]))
        r1 = SO3OffsetFactor(q_ref, q, self.Q)(q_off)
        r2 = SO3OffsetFactor(q_ref, q, 2.0 * self.Q)(q_off)
        np.testing.assert_allclose(r2, 0.5 * r1, rtol=1e-12)


if __name__ == "__main__":
    unittest.main()
