"""Custom validators for configuration.

This module provides validators shared by the settings model and by the
runtime configuration mutators (poll interval, debounce interval).
"""

from pathlib import Path

# Recognized sampling cadences, in milliseconds.
POLL_INTERVAL_PRESETS_MS: tuple[int, ...] = (500, 1000, 2000, 5000)
DEFAULT_POLL_INTERVAL_MS = 1000

# Recognized minimum spacing between automatic policy evaluations, in milliseconds.
DEBOUNCE_INTERVAL_PRESETS_MS: tuple[int, ...] = (1000, 2000, 3000, 5000, 10000)
DEFAULT_DEBOUNCE_INTERVAL_MS = 3000

SCHEME_BACKENDS: tuple[str, ...] = ("auto", "powercfg", "powerprofiles", "none")


def validate_log_level(value: str) -> str:
    """Validate log level is one of the standard levels.

    Args:
        value: Log level string.

    Returns:
        Validated log level.

    Raises:
        ValueError: If log level is not valid.
    """
    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if value.upper() not in valid_levels:
        raise ValueError(f"log_level must be one of {valid_levels}, got {value}")
    return value.upper()


def validate_log_format(value: str) -> str:
    """Validate log format is 'json' or 'console'.

    Args:
        value: Log format string.

    Returns:
        Validated log format.

    Raises:
        ValueError: If log format is not valid.
    """
    valid_formats = {"json", "console"}
    if value.lower() not in valid_formats:
        raise ValueError(f"log_format must be one of {valid_formats}, got {value}")
    return value.lower()


def validate_poll_interval_ms(value: int) -> int:
    """Validate a sampling interval against the recognized presets.

    Raises:
        ValueError: If the interval is not one of POLL_INTERVAL_PRESETS_MS.
    """
    if value not in POLL_INTERVAL_PRESETS_MS:
        raise ValueError(
            f"poll interval must be one of {POLL_INTERVAL_PRESETS_MS} ms, got {value}"
        )
    return int(value)


def validate_debounce_interval_ms(value: int) -> int:
    """Validate an auto-apply debounce interval against the recognized presets.

    Raises:
        ValueError: If the interval is not one of DEBOUNCE_INTERVAL_PRESETS_MS.
    """
    if value not in DEBOUNCE_INTERVAL_PRESETS_MS:
        raise ValueError(
            f"debounce interval must be one of {DEBOUNCE_INTERVAL_PRESETS_MS} ms, got {value}"
        )
    return int(value)


def validate_scheme_backend(value: str) -> str:
    """Validate the scheme applier backend name."""
    normalized = value.strip().lower()
    if normalized not in SCHEME_BACKENDS:
        raise ValueError(f"scheme_backend must be one of {SCHEME_BACKENDS}, got {value}")
    return normalized


def resolve_path(value: Path | str) -> Path:
    """Resolve relative paths to absolute paths.

    Args:
        value: Path value (can be string or Path).

    Returns:
        Resolved Path object.
    """
    if isinstance(value, str):
        path = Path(value)
    else:
        path = value

    # If relative, resolve relative to project root
    if not path.is_absolute():
        # Assume we're in src/powerpilot/config, go up to project root
        project_root = Path(__file__).parent.parent.parent.parent
        path = (project_root / path).resolve()
    else:
        path = path.resolve()

    return path
