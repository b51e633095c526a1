"""Pydantic models for the power policy configuration."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from powerpilot.types import Mode


class SchemeBindings(BaseModel):
    """Mapping of each Mode to an external scheme identifier.

    Identifiers are opaque strings (power scheme GUIDs on Windows, profile
    names for power-profiles-daemon) and are compared case-insensitively.
    A mode without a binding cannot be applied.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    min: str | None = Field(None, alias="Min", description="Scheme for the Min mode")
    balanced: str | None = Field(None, alias="Balanced", description="Scheme for Balanced")
    max: str | None = Field(None, alias="Max", description="Scheme for the Max mode")

    @field_validator("min", "balanced", "max", mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:
        """Treat empty identifiers as missing."""
        if not isinstance(v, str):
            return v
        v = v.strip()
        return v or None

    @classmethod
    def for_power_profiles(cls) -> "SchemeBindings":
        """Default bindings for power-profiles-daemon (powerprofilesctl)."""
        return cls(min="power-saver", balanced="balanced", max="performance")

    def identifier_for(self, mode: Mode) -> str | None:
        """Return the scheme identifier bound to a mode."""
        return {
            Mode.MIN: self.min,
            Mode.BALANCED: self.balanced,
            Mode.MAX: self.max,
        }[mode]

    def mode_for(self, identifier: str | None) -> Mode | None:
        """Return the mode whose scheme matches an identifier, if any."""
        if not identifier:
            return None
        wanted = identifier.strip().lower()
        for mode in Mode:
            bound = self.identifier_for(mode)
            if bound is not None and bound.lower() == wanted:
                return mode
        return None

    @property
    def is_empty(self) -> bool:
        """True when no mode is bound."""
        return self.min is None and self.balanced is None and self.max is None
