"""Display helpers: warm gamma tint."""

from powerpilot.display.tint import (
    RAMP_SIZE,
    DisplayTintController,
    GammaBackend,
    GammaRamp,
    linear_ramp,
    tinted_ramp,
)

__all__ = [
    "DisplayTintController",
    "GammaBackend",
    "GammaRamp",
    "RAMP_SIZE",
    "linear_ramp",
    "tinted_ramp",
]
