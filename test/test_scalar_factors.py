import unittest

import numpy as np
from scipy.spatial.transform import Rotation

from pose_factors import AltFactor, RangeFactor


def _pose(position) -> np.ndarray:
    return np.concatenate([np.asarray(position, dtype=float), [1.0, 0.0, 0.0, 0.0]])


class TestRangeFactor(unittest.TestCase):
    def test_zero_for_exact_range(self):
        factor = RangeFactor(5.0, 0.1)
        r = factor(_pose([0.0, 0.0, 0.0]), _pose([3.0, 4.0, 0.0]))
        self.assertEqual(r.shape, (1,))
        self.assertAlmostEqual(float(r[0]), 0.0, places=12)

    def test_weighted_by_inverse_variance(self):
        factor = RangeFactor(6.0, 0.5)
        r = factor(_pose([0.0, 0.0, 0.0]), _pose([3.0, 4.0, 0.0]))
        self.assertAlmostEqual(float(r[0]), (6.0 - 5.0) / 0.5, places=12)

    def test_doubling_variance_halves_residual(self):
        Xi, Xj = _pose([1.0, 2.0, 3.0]), _pose([-2.0, 0.5, 7.0])
        r1 = RangeFactor(4.0, 0.2)(Xi, Xj)
        r2 = RangeFactor(4.0, 0.4)(Xi, Xj)
        np.testing.assert_allclose(r2, 0.5 * r1, rtol=1e-12)

    def test_ignores_orientation(self):
        factor = RangeFactor(2.0, 0.1)
        Xi = _pose([1.0, 0.0, 0.0])
        Xj = _pose([0.0, 1.0, 1.0])
        Xj_rotated = Xj.copy()
        Xj_rotated[3:] = np.roll(Rotation.from_rotvec([0.3, -0.2, 1.0]).as_quat(), 1)
        np.testing.assert_allclose(factor(Xi, Xj), factor(Xi, Xj_rotated), atol=1e-15)

    def test_invariant_under_frame_rotation(self):
        rng = np.random.default_rng(0)
        ti, tj = rng.normal(size=3), rng.normal(size=3)
        R = Rotation.from_rotvec([0.4, -1.1, 0.7]).as_matrix()
        factor = RangeFactor(1.5, 0.3)
        np.testing.assert_allclose(
            factor(_pose(R @ ti), _pose(R @ tj)), factor(_pose(ti), _pose(tj)), atol=1e-12
        )

    def test_symmetric_in_poses(self):
        factor = RangeFactor(1.0, 0.1)
        Xi, Xj = _pose([0.2, 0.3, 0.4]), _pose([1.0, -1.0, 2.0])
        np.testing.assert_allclose(factor(Xi, Xj), factor(Xj, Xi), atol=1e-15)

    def test_coincident_positions_give_non_finite_jacobian(self):
        cost = RangeFactor.create(1.0, 0.1)
        Xi = _pose([1.0, 1.0, 1.0])
        residual, jacobians = cost.evaluate_with_jacobians(Xi, Xi)
        self.assertAlmostEqual(float(residual[0]), 10.0, places=12)
        self.assertFalse(np.all(np.isfinite(jacobians[0])))

    def test_negative_range_rejected(self):
        with self.assertRaises(ValueError):
            RangeFactor(-1.0, 0.1)


class TestAltFactor(unittest.TestCase):
    def test_zero_at_measured_altitude(self):
        factor = AltFactor(12.5, 0.2)
        self.assertAlmostEqual(float(factor(_pose([3.0, -4.0, 12.5]))[0]), 0.0, places=12)

    def test_reads_only_third_component(self):
        factor = AltFactor(1.0, 0.5)
        base = factor(_pose([0.0, 0.0, 3.0]))
        np.testing.assert_allclose(factor(_pose([100.0, -50.0, 3.0])), base, atol=1e-15)
        self.assertAlmostEqual(float(base[0]), (1.0 - 3.0) / 0.5, places=12)

    def test_not_invariant_to_vertical_origin_shift(self):
        factor = AltFactor(1.0, 0.5)
        r = factor(_pose([0.0, 0.0, 1.0]))
        r_shifted = factor(_pose([0.0, 0.0, 2.0]))
        self.assertNotAlmostEqual(float(r[0]), float(r_shifted[0]))

    def test_jacobian_selects_z(self):
        cost = AltFactor.create(1.0, 0.25)
        _, jacobians = cost.evaluate_with_jacobians(_pose([1.0, 2.0, 3.0]))
        expected = np.zeros((1, 7))
        expected[0, 2] = -4.0
        np.testing.assert_allclose(jacobians[0], expected)


if __name__ == "__main__":
    unittest.main()
