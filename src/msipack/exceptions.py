"""Exceptions raised while configuring and building MSI packages."""

from collections.abc import Sequence
from typing import Any, Self


class PackagerError(Exception):
    """Base exception for all packager errors."""


class MissingRequiredAttribute(PackagerError):
    """Raised when a required attribute is read before it was configured."""

    def __init__(self: Self, attribute: str) -> None:
        """Initialize the error.

        Args:
            attribute: Name of the attribute that was never set.
        """
        self.attribute = attribute
        super().__init__(
            f"Missing required attribute '{attribute}'. You must set it before "
            "packaging."
        )


class InvalidValue(PackagerError, ValueError):
    """Raised when a setter receives a value of the wrong type or shape."""

    def __init__(self: Self, attribute: str, expected: str, value: Any) -> None:
        """Initialize the error.

        Args:
            attribute: Name of the attribute being set.
            expected: Human readable description of the accepted values.
            value: The rejected value.
        """
        self.attribute = attribute
        self.value = value
        super().__init__(
            f"Invalid value for '{attribute}': expected {expected}, "
            f"got {value!r} ({type(value).__name__})"
        )


class InvalidVersionFormat(PackagerError, ValueError):
    """Raised when a build version cannot be turned into an MSI version."""

    def __init__(self: Self, version: Any, reason: str | None = None) -> None:
        """Initialize the error.

        Args:
            version: The version string that failed to parse.
            reason: Optional detail about what is wrong with it.
        """
        self.version = version
        message = f"Invalid version format: {version!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ToolchainError(PackagerError):
    """Raised when an external WiX or signing tool fails."""

    def __init__(
        self: Self,
        command: Sequence[str],
        returncode: int | None,
        output: str = "",
    ) -> None:
        """Initialize the error.

        Args:
            command: The command line that was executed.
            returncode: Process exit code, or None if it could not be started.
            output: Captured stdout and stderr of the process.
        """
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        if returncode is None:
            message = f"Could not execute '{self.command[0]}'"
        else:
            message = f"Command failed ({returncode}): {' '.join(self.command)}"
        if output.strip():
            message = f"{message}\n{output.strip()}"
        super().__init__(message)


class ConfigError(PackagerError):
    """Raised when packager configuration cannot be loaded."""
