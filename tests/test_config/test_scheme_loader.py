"""Tests for the scheme bindings loader."""

from pathlib import Path

import pytest

from powerpilot.config.loader import ConfigLoadError
from powerpilot.config.scheme_loader import SchemeBindingsError, load_scheme_bindings
from powerpilot.types import Mode

MIN_GUID = "a1841308-3541-4fab-bc81-f71556f20b4a"
BALANCED_GUID = "381b4222-f694-41f0-9685-ff5bb260df2e"
MAX_GUID = "8c5e7fda-e8bf-4a96-9a85-a6e23a8c635c"


class TestLoadSchemeBindings:
    """Test loading bindings from YAML and JSON."""

    def test_load_yaml(self, tmp_path: Path) -> None:
        """Test a complete YAML file."""
        path = tmp_path / "schemes.yaml"
        path.write_text(f"Min: {MIN_GUID}\nBalanced: {BALANCED_GUID}\nMax: {MAX_GUID}\n")

        bindings = load_scheme_bindings(path)

        assert bindings.identifier_for(Mode.MIN) == MIN_GUID
        assert bindings.identifier_for(Mode.BALANCED) == BALANCED_GUID
        assert bindings.identifier_for(Mode.MAX) == MAX_GUID

    def test_load_legacy_json(self, tmp_path: Path) -> None:
        """Test the scheme-guids.json layout loads unchanged."""
        path = tmp_path / "scheme-guids.json"
        path.write_text(f'{{"Min": "{MIN_GUID}", "Max": "{MAX_GUID}"}}')

        bindings = load_scheme_bindings(str(path))

        assert bindings.identifier_for(Mode.MAX) == MAX_GUID
        assert bindings.identifier_for(Mode.BALANCED) is None

    def test_lowercase_keys(self, tmp_path: Path) -> None:
        """Test field names are accepted as well as aliases."""
        path = tmp_path / "schemes.yaml"
        path.write_text("min: power-saver\nmax: performance\n")

        bindings = load_scheme_bindings(path)

        assert bindings.identifier_for(Mode.MIN) == "power-saver"

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        """Test extra keys only produce a warning."""
        path = tmp_path / "schemes.yaml"
        path.write_text(f"Max: {MAX_GUID}\nTurbo: something\n")

        bindings = load_scheme_bindings(path)

        assert bindings.identifier_for(Mode.MAX) == MAX_GUID

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file gives empty bindings."""
        path = tmp_path / "schemes.yaml"
        path.write_text("")

        assert load_scheme_bindings(path).is_empty

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises SchemeBindingsError."""
        with pytest.raises(SchemeBindingsError, match="not found"):
            load_scheme_bindings(tmp_path / "absent.yaml")

    def test_invalid_value(self, tmp_path: Path) -> None:
        """Test a non-string identifier raises SchemeBindingsError."""
        path = tmp_path / "schemes.yaml"
        path.write_text("Max:\n  - a\n  - b\n")

        with pytest.raises(SchemeBindingsError, match="validation failed"):
            load_scheme_bindings(path)

    def test_error_is_config_load_error(self, tmp_path: Path) -> None:
        """Test SchemeBindingsError derives from ConfigLoadError."""
        with pytest.raises(ConfigLoadError):
            load_scheme_bindings(tmp_path / "absent.yaml")
