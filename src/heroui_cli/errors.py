"""Exception hierarchy for the CLI core.

Errors carry the exit code the CLI layer should use; nothing in the core
terminates the process itself.
"""

from __future__ import annotations

from typing import Optional

from .constants import ExitCodes


class CLIError(Exception):
    """Base error with an associated process exit code."""

    def __init__(self, message: str, exit_code: int = ExitCodes.FILE_ERROR.value):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class ValidationError(CLIError):
    """Invalid user input or project state."""


class FileNotFoundError(CLIError):  # pylint: disable=redefined-builtin
    """A required project file does not exist."""

    def __init__(self, file_path: str):
        super().__init__(f"File not found: {file_path}")
        self.file_path = file_path


class ComponentNotFoundError(CLIError):
    """Requested component is not part of the library."""

    def __init__(self, component_name: str, suggestion: Optional[str] = None):
        if suggestion:
            message = f"Component '{component_name}' not found. Did you mean '{suggestion}'?"
        else:
            message = f"Component '{component_name}' not found"
        super().__init__(message)
        self.component_name = component_name


class DependencyError(CLIError):
    """Dependency data could not be resolved."""


class RegistryLookupError(DependencyError):
    """A package registry query failed.

    Raised instead of returning a default so that an undetermined target
    version never turns into an upgrade recommendation.
    """

    def __init__(self, package: str, reason: str):
        super().__init__(
            f"Failed to resolve version for {package}: {reason}",
            ExitCodes.CONNECTION_ERROR.value,
        )
        self.package = package
        self.reason = reason
