"""Exceptions raised by viewforge."""


class ViewforgeError(Exception):
    """Base exception for viewforge operations."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class ConfigError(ViewforgeError):
    """Raised when a project configuration file cannot be used."""
