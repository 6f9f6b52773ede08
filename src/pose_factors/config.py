"""
Configuration for building residual models: sensor noise levels, cost function
options and Jacobian check tolerances, loadable from YAML.

Example YAML:

    noise:
      range_sigma: 0.1
      altitude_sigma: 0.05
      attitude_sigmas: [0.01, 0.01, 0.02]
      pose_sigmas: [0.1, 0.1, 0.1, 0.01, 0.01, 0.01]
      pixel_sigma: 1.0
    cost_function:
      use_jit: true
    gradient_check:
      step: 1.0e-6
      rtol: 1.0e-6
      atol: 1.0e-6
"""
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from attrs import define, field, validators
import numpy as np
import yaml

from .logging_config import get_logger
from .types.covariance import PixelCovariance, PoseCovariance, RotationCovariance

logger = get_logger(__name__)


def _to_float_tuple(value) -> Tuple[float, ...]:
    return tuple(float(v) for v in value)


def _sigmas_validator(length: int):
    def _validator(instance, attribute, value):
        if len(value) != length:
            raise ValueError(f"{attribute.name} must have {length} elements, got {len(value)}.")
        if not all(np.isfinite(v) and v > 0.0 for v in value):
            raise ValueError(f"{attribute.name} must be positive and finite, got {value}.")

    return _validator


@define(frozen=True)
class NoiseParams:
    """
    Standard deviations of the supported measurement types.
    """

    range_sigma: float = field(default=0.1, converter=float, validator=validators.gt(0.0))
    altitude_sigma: float = field(default=0.1, converter=float, validator=validators.gt(0.0))
    attitude_sigmas: Tuple[float, float, float] = field(
        default=(0.01, 0.01, 0.01), converter=_to_float_tuple, validator=_sigmas_validator(3)
    )
    pose_sigmas: Tuple[float, ...] = field(
        default=(0.1, 0.1, 0.1, 0.01, 0.01, 0.01),
        converter=_to_float_tuple,
        validator=_sigmas_validator(6),
    )
    pixel_sigma: float = field(default=1.0, converter=float, validator=validators.gt(0.0))

    @property
    def range_variance(self) -> float:
        return self.range_sigma**2

    @property
    def altitude_variance(self) -> float:
        return self.altitude_sigma**2

    @property
    def attitude_covariance(self) -> RotationCovariance:
        return RotationCovariance(*self.attitude_sigmas)

    @property
    def pose_covariance(self) -> PoseCovariance:
        return PoseCovariance(*self.pose_sigmas)

    @property
    def pixel_covariance(self) -> PixelCovariance:
        return PixelCovariance(self.pixel_sigma, self.pixel_sigma)


@define(frozen=True)
class CostFunctionParams:
    use_jit: bool = field(default=True, validator=validators.instance_of(bool))


@define(frozen=True)
class GradientCheckParams:
    """Finite-difference settings used when checking autodiff Jacobians."""

    step: float = field(default=1e-6, converter=float, validator=validators.gt(0.0))
    rtol: float = field(default=1e-6, converter=float, validator=validators.ge(0.0))
    atol: float = field(default=1e-6, converter=float, validator=validators.ge(0.0))


@define(frozen=True)
class FactorConfig:
    noise: NoiseParams = field(factory=NoiseParams)
    cost_function: CostFunctionParams = field(factory=CostFunctionParams)
    gradient_check: GradientCheckParams = field(factory=GradientCheckParams)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FactorConfig":
        """
        Builds a config from a nested dict. Missing sections and keys keep
        their defaults; unknown sections raise.

        Raises:
            ValueError: an unknown section or key is present
        """
        data = data or {}
        sections = {
            "noise": NoiseParams,
            "cost_function": CostFunctionParams,
            "gradient_check": GradientCheckParams,
        }
        unknown = set(data) - set(sections)
        if unknown:
            raise ValueError(f"Unknown config sections: {sorted(unknown)}")

        kwargs = {}
        for name, section_cls in sections.items():
            section = data.get(name) or {}
            try:
                kwargs[name] = section_cls(**section)
            except TypeError as e:
                raise ValueError(f"Invalid '{name}' config section: {e}") from e
        return cls(**kwargs)


def load_config(path: Union[str, Path]) -> FactorConfig:
    """Load a YAML file and return its contents as a FactorConfig"""
    with open(path, "r") as file:
        data = yaml.safe_load(file)
    logger.debug(f"Loaded factor config from {path}")
    return FactorConfig.from_dict(data)
