import os
import tempfile
import unittest

import numpy as np

from pose_factors import RangeFactor, RelSE3Factor, SE3ReprojectionFactor, SO3Factor
from pose_factors.config import (
    CostFunctionParams,
    FactorConfig,
    GradientCheckParams,
    NoiseParams,
    load_config,
)

CONFIG_YAML = """
noise:
  range_sigma: 0.5
  attitude_sigmas: [0.01, 0.02, 0.03]
  pixel_sigma: 2.0
cost_function:
  use_jit: false
gradient_check:
  rtol: 1.0e-5
"""


class TestFactorConfig(unittest.TestCase):
    def test_defaults(self):
        config = FactorConfig()
        self.assertEqual(config.noise, NoiseParams())
        self.assertTrue(config.cost_function.use_jit)
        self.assertEqual(config.gradient_check.step, 1e-6)

    def test_empty_dict_gives_defaults(self):
        self.assertEqual(FactorConfig.from_dict({}), FactorConfig())
        self.assertEqual(FactorConfig.from_dict(None), FactorConfig())

    def test_load_yaml(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "factors.yaml")
            with open(path, "w") as f:
                f.write(CONFIG_YAML)
            config = load_config(path)

        self.assertEqual(config.noise.range_sigma, 0.5)
        self.assertEqual(config.noise.altitude_sigma, NoiseParams().altitude_sigma)
        self.assertEqual(config.noise.attitude_sigmas, (0.01, 0.02, 0.03))
        self.assertFalse(config.cost_function.use_jit)
        self.assertEqual(config.gradient_check.rtol, 1e-5)
        self.assertEqual(config.gradient_check.atol, GradientCheckParams().atol)

    def test_unknown_section_rejected(self):
        with self.assertRaises(ValueError):
            FactorConfig.from_dict({"solver": {}})

    def test_unknown_key_rejected(self):
        with self.assertRaises(ValueError):
            FactorConfig.from_dict({"noise": {"depth_sigma": 0.1}})

    def test_invalid_values_rejected(self):
        with self.assertRaises(ValueError):
            NoiseParams(range_sigma=0.0)
        with self.assertRaises(ValueError):
            NoiseParams(attitude_sigmas=(0.1, 0.1))
        with self.assertRaises(ValueError):
            NoiseParams(pose_sigmas=(0.1, 0.1, 0.1, 0.1, 0.1, -0.1))
        with self.assertRaises(TypeError):
            CostFunctionParams(use_jit="yes")


class TestNoiseParamsBuildFactors(unittest.TestCase):
    def setUp(self):
        self.noise = NoiseParams(
            range_sigma=0.2,
            attitude_sigmas=(0.1, 0.2, 0.4),
            pose_sigmas=(0.1, 0.1, 0.1, 0.01, 0.01, 0.01),
            pixel_sigma=2.0,
        )

    def test_range_variance(self):
        factor = RangeFactor(1.0, self.noise.range_variance)
        self.assertAlmostEqual(factor.precision, 1.0 / 0.04)

    def test_attitude_covariance(self):
        factor = SO3Factor([1.0, 0.0, 0.0, 0.0], self.noise.attitude_covariance)
        np.testing.assert_allclose(
            factor.inverse_covariance, np.diag([100.0, 25.0, 6.25]), rtol=1e-12
        )

    def test_pose_and_pixel_covariance(self):
        X = np.array([0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0])
        factor = RelSE3Factor(X, self.noise.pose_covariance)
        self.assertEqual(factor.inverse_covariance.shape, (6, 6))
        projection = SE3ReprojectionFactor(
            1.0, 1.0, 0.0, 0.0, [0.0, 0.0], [0.0, 0.0, 1.0], covariance=self.noise.pixel_covariance
        )
        np.testing.assert_allclose(projection.inverse_covariance, 0.25 * np.eye(2))

    def test_use_jit_passed_to_create(self):
        config = FactorConfig(cost_function=CostFunctionParams(use_jit=False))
        cost = RangeFactor.create(1.0, 0.1, use_jit=config.cost_function.use_jit)
        self.assertFalse(cost.use_jit)


if __name__ == "__main__":
    unittest.main()
