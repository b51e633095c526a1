"""Load and validate the Mode → scheme identifier bindings.

The bindings file has one key per mode:

    Min: a1841308-3541-4fab-bc81-f71556f20b4a
    Balanced: 381b4222-f694-41f0-9685-ff5bb260df2e
    Max: 8c5e7fda-e8bf-4a96-9a85-a6e23a8c635c

The older ``scheme-guids.json`` layout (same keys, JSON syntax) loads as-is.
"""

from pathlib import Path

import structlog
from pydantic import ValidationError

from powerpilot.config.loader import ConfigLoadError, load_yaml_file
from powerpilot.policy.models import SchemeBindings
from powerpilot.types import Mode

log = structlog.get_logger(__name__)


class SchemeBindingsError(ConfigLoadError):
    """Raised when the scheme bindings cannot be loaded or validated."""

    pass


def load_scheme_bindings(path: Path | str | None = None) -> SchemeBindings:
    """Load scheme bindings from a YAML or JSON file.

    Args:
        path: Bindings file. If None, uses `settings.scheme_bindings_path`.

    Returns:
        Validated SchemeBindings.

    Raises:
        SchemeBindingsError: If the file is missing, unreadable or invalid.

    Example:
        >>> bindings = load_scheme_bindings("config/schemes.yaml")
        >>> bindings.identifier_for(Mode.MAX)
    """
    if path is None:
        from powerpilot.config.settings import get_settings  # noqa: PLC0415

        path = get_settings().scheme_bindings_path
        log.debug("using_scheme_bindings_path_from_settings", path=str(path))

    file_path = Path(path)
    data = load_yaml_file(file_path, error_class=SchemeBindingsError)

    unknown_keys = sorted(set(data) - {"Min", "Balanced", "Max", "min", "balanced", "max"})
    if unknown_keys:
        log.warning("scheme_bindings_unknown_keys", path=str(file_path), keys=unknown_keys)

    try:
        bindings = SchemeBindings.model_validate(data)
    except ValidationError as e:
        error_messages = []
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"])
            error_messages.append(f"{field_path}: {error['msg']}")
        error_summary = "\n".join(error_messages)
        raise SchemeBindingsError(
            f"Scheme bindings validation failed ({file_path}):\n{error_summary}"
        ) from None

    log.info(
        "scheme_bindings_loaded",
        path=str(file_path),
        bound_modes=[m.value for m in Mode if bindings.identifier_for(m) is not None],
    )
    return bindings


