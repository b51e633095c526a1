"""Telemetry sampling: sensor fusion, history buffers and the poll scheduler."""

from powerpilot.sampling.fusion import SensorFusion, fuse_samples, normalize_frequency_mhz
from powerpilot.sampling.ring_series import RingTimeSeries
from powerpilot.sampling.scheduler import PollScheduler

__all__ = [
    "PollScheduler",
    "RingTimeSeries",
    "SensorFusion",
    "fuse_samples",
    "normalize_frequency_mhz",
]
