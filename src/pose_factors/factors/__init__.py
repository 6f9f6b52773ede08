"""
Residual models. Each module holds independent models sharing only the
ResidualModel interface.
"""
from .base import ResidualModel
from .rotation import SO3Factor
from .pose import RelSE3Factor
from .scalar import RangeFactor, AltFactor
from .time_sync import TimeSyncAttFactor
from .calibration import SO3OffsetFactor, SE3OffsetFactor
from .projection import SE3ReprojectionFactor

__all__ = [
    "ResidualModel",
    "SO3Factor",
    "RelSE3Factor",
    "RangeFactor",
    "AltFactor",
    "TimeSyncAttFactor",
    "SO3OffsetFactor",
    "SE3OffsetFactor",
    "SE3ReprojectionFactor",
]
