"""UI module for powerpilot.

The CLI can be run directly:
    python -m powerpilot.ui.cli monitor

Note: CLI components are not exported from __init__.py to avoid module
loading issues when running as a script.
"""

__all__ = []  # CLI is run directly, no exports needed
