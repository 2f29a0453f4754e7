"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from PonymlUserError:
malformed templates, invalid configuration files.

Programming errors and bugs should NOT inherit from PonymlUserError:
they will propagate with full tracebacks.
"""

from __future__ import annotations


class PonymlUserError(Exception):
    """
    Base class for all user-facing errors in ponyml.

    These errors indicate problems that the user can fix:
    template syntax errors, configuration issues, etc.
    """
    pass


class ConfigError(PonymlUserError):
    """Invalid parser configuration (ponyml.yaml)."""
    pass


__all__ = ["PonymlUserError", "ConfigError"]
