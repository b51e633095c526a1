"""Tests for the SchemeBindings model."""

import pytest
from pydantic import ValidationError

from powerpilot.policy.models import SchemeBindings
from powerpilot.types import Mode

BALANCED_GUID = "381b4222-f694-41f0-9685-ff5bb260df2e"


class TestSchemeBindings:
    """Test Mode ↔ identifier lookups."""

    def test_aliases_and_field_names(self) -> None:
        """Test both "Min" and "min" keys populate the model."""
        by_alias = SchemeBindings.model_validate({"Min": "a", "Balanced": "b", "Max": "c"})
        by_name = SchemeBindings(min="a", balanced="b", max="c")
        assert by_alias == by_name

    def test_identifier_for(self) -> None:
        """Test identifiers are returned per mode."""
        bindings = SchemeBindings(min="a", balanced=BALANCED_GUID, max=None)
        assert bindings.identifier_for(Mode.BALANCED) == BALANCED_GUID
        assert bindings.identifier_for(Mode.MAX) is None

    def test_mode_for_is_case_insensitive(self) -> None:
        """Test GUID comparison ignores case and surrounding whitespace."""
        bindings = SchemeBindings(balanced=BALANCED_GUID)
        assert bindings.mode_for(f"  {BALANCED_GUID.upper()} ") is Mode.BALANCED

    def test_mode_for_unknown(self) -> None:
        """Test unbound or missing identifiers map to None."""
        bindings = SchemeBindings(balanced=BALANCED_GUID)
        assert bindings.mode_for("something-else") is None
        assert bindings.mode_for(None) is None
        assert bindings.mode_for("") is None

    def test_blank_identifiers_are_missing(self) -> None:
        """Test empty strings count as unbound."""
        bindings = SchemeBindings.model_validate({"Min": "  ", "Balanced": ""})
        assert bindings.min is None
        assert bindings.balanced is None
        assert bindings.is_empty

    def test_power_profiles_defaults(self) -> None:
        """Test the power-profiles-daemon profile names."""
        bindings = SchemeBindings.for_power_profiles()
        assert bindings.identifier_for(Mode.MIN) == "power-saver"
        assert bindings.identifier_for(Mode.BALANCED) == "balanced"
        assert bindings.identifier_for(Mode.MAX) == "performance"
        assert bindings.mode_for("performance") is Mode.MAX

    def test_frozen(self) -> None:
        """Test bindings cannot be mutated after loading."""
        bindings = SchemeBindings(min="a")
        with pytest.raises(ValidationError):
            bindings.min = "b"
