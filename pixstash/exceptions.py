"""Exception hierarchy for pixstash."""

from pathlib import Path


class PixstashError(Exception):
    """Base exception for all pixstash errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all pixstash errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(PixstashError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Library Errors
class LibraryError(PixstashError):
    """Image library database errors."""

    pass


class LibraryNotFoundError(LibraryError):
    """Library database file doesn't exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Library not found: {path}")


# Entity Not Found Errors
class NotFoundError(PixstashError):
    """Requested entity not found."""

    pass


class ImageNotFoundError(NotFoundError):
    """Saved image doesn't exist."""

    def __init__(self, image_id: str) -> None:
        self.image_id = image_id
        super().__init__(f"Image not found: {image_id}")


# Validation Errors
class ValidationError(PixstashError):
    """Invalid input value."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")
