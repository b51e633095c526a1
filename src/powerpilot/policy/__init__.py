"""Power policy: mode classification, scheme bindings and the fan curve.

The auto-apply controller lives in ``powerpilot.policy.controller``.
"""

from powerpilot.policy.classifier import classify
from powerpilot.policy.fan_curve import RPM_STEPS, FanLevel, describe_step, fan_level_for
from powerpilot.policy.models import SchemeBindings

__all__ = [
    "classify",
    "SchemeBindings",
    "FanLevel",
    "RPM_STEPS",
    "describe_step",
    "fan_level_for",
]
