"""Power scheme appliers backed by operating system command-line tools.

- PowercfgSchemeApplier: Windows ``powercfg`` (scheme GUIDs)
- PowerProfilesSchemeApplier: Linux power-profiles-daemon ``powerprofilesctl``
  (profile names)

Both run the tool with a timeout and never block the caller longer than
that. Failures to read the active scheme return None; failures to switch
raise SchemeApplyError.
"""

import platform
import shutil
import subprocess

from powerpilot.config.validators import validate_scheme_backend
from powerpilot.providers.base import SchemeApplier
from powerpilot.telemetry import SCHEME_QUERY_FAILED, get_logger

log = get_logger(__name__)

DEFAULT_COMMAND_TIMEOUT_SECONDS = 2.0

# "Power Scheme GUID: 381b4222-f694-41f0-9685-ff5bb260df2e  (Balanced)"
_GUID_MARKER = "guid:"
_MIN_GUID_LENGTH = 30


class SchemeApplyError(Exception):
    """Raised when the active power scheme cannot be switched."""

    pass


def parse_active_scheme_guid(output: str) -> str | None:
    """Extract the scheme GUID from ``powercfg /getactivescheme`` output.

    Args:
        output: Raw command output.

    Returns:
        The GUID, or None if the output does not contain one.

    Example:
        >>> parse_active_scheme_guid("Power Scheme GUID: 381b4222-f694-41f0-9685-ff5bb260df2e  (Balanced)")
        '381b4222-f694-41f0-9685-ff5bb260df2e'
    """
    text = output.strip()
    idx = text.lower().find(_GUID_MARKER)
    if idx < 0:
        return None
    rest = text[idx + len(_GUID_MARKER) :].strip()
    guid = rest.split()[0] if rest else ""
    return guid if len(guid) > _MIN_GUID_LENGTH else None


class _CommandSchemeApplier:
    """Shared command runner for the subprocess-based appliers."""

    executable = ""

    def __init__(self, timeout_seconds: float = DEFAULT_COMMAND_TIMEOUT_SECONDS) -> None:
        self.timeout_seconds = timeout_seconds

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            [self.executable, *args],
            capture_output=True,
            text=True,
            errors="replace",
            timeout=self.timeout_seconds,
            check=False,
        )

    def _query(self, *args: str) -> str | None:
        """Run a read-only command, returning stdout or None on any failure."""
        try:
            result = self._run(*args)
        except (FileNotFoundError, subprocess.TimeoutExpired, OSError) as e:
            log.debug(
                SCHEME_QUERY_FAILED,
                command=self.executable,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        if result.returncode != 0:
            log.debug(
                SCHEME_QUERY_FAILED,
                command=self.executable,
                returncode=result.returncode,
                stderr=(result.stderr or "")[:200],
            )
            return None
        return result.stdout

    def _apply(self, *args: str) -> None:
        """Run a state-changing command, raising SchemeApplyError on failure."""
        try:
            result = self._run(*args)
        except FileNotFoundError:
            raise SchemeApplyError(f"{self.executable} not found") from None
        except subprocess.TimeoutExpired:
            raise SchemeApplyError(
                f"{self.executable} timed out after {self.timeout_seconds}s"
            ) from None
        except OSError as e:
            raise SchemeApplyError(f"{self.executable} failed to start: {e}") from e

        if result.returncode != 0:
            stderr = (result.stderr or result.stdout or "").strip()[:200]
            raise SchemeApplyError(
                f"{self.executable} exited with {result.returncode}: {stderr}"
            )


class PowercfgSchemeApplier(_CommandSchemeApplier):
    """Windows power schemes through ``powercfg``."""

    executable = "powercfg"

    def get_active(self) -> str | None:
        """Return the GUID of the active power scheme."""
        output = self._query("/getactivescheme")
        if output is None:
            return None
        return parse_active_scheme_guid(output)

    def set_active(self, identifier: str) -> None:
        """Activate the scheme with the given GUID.

        Raises:
            SchemeApplyError: If the identifier is blank or powercfg fails.
        """
        if not identifier or not identifier.strip():
            raise SchemeApplyError("Scheme GUID is empty")
        self._apply("/setactive", identifier.strip())


class PowerProfilesSchemeApplier(_CommandSchemeApplier):
    """power-profiles-daemon profiles through ``powerprofilesctl``.

    Profiles are "power-saver", "balanced" and "performance"
    (see SchemeBindings.for_power_profiles()).
    """

    executable = "powerprofilesctl"

    def get_active(self) -> str | None:
        """Return the active profile name."""
        output = self._query("get")
        if output is None:
            return None
        profile = output.strip()
        return profile or None

    def set_active(self, identifier: str) -> None:
        """Switch to the named profile.

        Raises:
            SchemeApplyError: If the identifier is blank or powerprofilesctl fails.
        """
        if not identifier or not identifier.strip():
            raise SchemeApplyError("Power profile name is empty")
        self._apply("set", identifier.strip())


def create_scheme_applier(
    backend: str = "auto",
    timeout_seconds: float = DEFAULT_COMMAND_TIMEOUT_SECONDS,
) -> SchemeApplier | None:
    """Create the scheme applier for a backend name.

    Args:
        backend: "auto", "powercfg", "powerprofiles" or "none".
        timeout_seconds: Command timeout for subprocess-based appliers.

    Returns:
        A SchemeApplier, or None for "none" and when "auto" finds no tool.

    Raises:
        ValueError: If backend is not recognized.
    """
    backend = validate_scheme_backend(backend)

    if backend == "none":
        return None
    if backend == "powercfg":
        return PowercfgSchemeApplier(timeout_seconds)
    if backend == "powerprofiles":
        return PowerProfilesSchemeApplier(timeout_seconds)

    # auto
    if platform.system() == "Windows":
        return PowercfgSchemeApplier(timeout_seconds)
    if shutil.which(PowerProfilesSchemeApplier.executable):
        return PowerProfilesSchemeApplier(timeout_seconds)

    log.info("scheme_backend_unavailable", backend=backend, platform=platform.system())
    return None
