import unittest

import numpy as np

from pose_factors import TimeSyncAttFactor


class TestTimeSyncAttFactor(unittest.TestCase):
    def setUp(self):
        self.q_ref = np.array([0.99, 0.05, -0.1, 0.08])
        self.q = np.array([0.98, 0.04, -0.12, 0.1])
        self.w = np.array([0.5, -0.2, 0.1])
        self.Q = np.array([[0.02, 0.001, 0.0], [0.001, 0.03, 0.0], [0.0, 0.0, 0.05]])
        self.Q_inv = np.linalg.inv(self.Q)

    def test_zero_offset_is_plain_difference(self):
        factor = TimeSyncAttFactor(self.q_ref, self.q, self.w, self.Q)
        expected = self.Q_inv @ (self.q_ref[1:] - self.q[1:])
        np.testing.assert_allclose(factor(np.array([0.0])), expected, rtol=1e-12, atol=1e-15)

    def test_linear_in_offset(self):
        factor = TimeSyncAttFactor(self.q_ref, self.q, self.w, self.Q)
        dt = 0.013
        expected = self.Q_inv @ (self.q_ref[1:] - (self.q[1:] + dt * self.w))
        np.testing.assert_allclose(factor(np.array([dt])), expected, rtol=1e-12)

    def test_jacobian_is_weighted_rate(self):
        cost = TimeSyncAttFactor.create(self.q_ref, self.q, self.w, self.Q)
        _, jacobians = cost.evaluate_with_jacobians(np.array([0.3]))
        self.assertEqual(jacobians[0].shape, (3, 1))
        np.testing.assert_allclose(jacobians[0][:, 0], -self.Q_inv @ self.w, rtol=1e-12)

    def test_component_wise_not_manifold(self):
        # the scalar part never enters the residual
        factor = TimeSyncAttFactor(self.q_ref, self.q, self.w, self.Q)
        q_scaled = self.q.copy()
        q_scaled[0] = -3.0
        other = TimeSyncAttFactor(self.q_ref, q_scaled, self.w, self.Q)
        np.testing.assert_allclose(factor(np.array([0.1])), other(np.array([0.1])), atol=1e-15)

    def test_zero_when_rate_explains_difference(self):
        dt = 0.02
        q_ref = self.q.copy()
        q_ref[1:] += dt * self.w
        factor = TimeSyncAttFactor(q_ref, self.q, self.w, self.Q)
        np.testing.assert_allclose(factor(np.array([dt])), np.zeros(3), atol=1e-12)

    def test_doubling_covariance_halves_residual(self):
        r1 = TimeSyncAttFactor(self.q_ref, self.q, self.w, self.Q)(np.array([0.05]))
        r2 = TimeSyncAttFactor(self.q_ref, self.q, self.w, 2.0 * self.Q)(np.array([0.05]))
        np.testing.assert_allclose(r2, 0.5 * r1, rtol=1e-12)

    def test_wrong_rate_shape_rejected(self):
        with self.assertRaises(ValueError):
            TimeSyncAttFactor(self.q_ref, self.q, np.zeros(4), self.Q)


if __name__ == "__main__":
    unittest.main()
