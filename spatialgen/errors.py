"""Exception hierarchy shared by the generator engine.

Every error carries the three parts the CLI renders independently: a
one-line message, an optional list of suggestions, and an optional
"correct usage" line.
"""

from __future__ import annotations

from pathlib import Path


class GeneratorError(Exception):
    """Base class for every failure the engine reports to the user."""

    def __init__(
        self,
        message: str,
        suggestions: list[str] | None = None,
        usage: str | None = None,
    ) -> None:
        self.message = message
        self.suggestions = list(suggestions or [])
        self.usage = usage
        super().__init__(message)


class ConfigParseError(GeneratorError):
    """The project configuration file could not be read or parsed.

    Never escapes :class:`~spatialgen.config.ConfigStore`; it is downgraded
    to a warning and an empty configuration.
    """


class MissingParameterError(GeneratorError):
    """A required positional or named parameter was not supplied."""


class UnknownModuleError(GeneratorError):
    """The referenced module has no directory under the presentation root."""

    def __init__(
        self,
        module: str,
        suggestions: list[str] | None = None,
        usage: str | None = None,
    ) -> None:
        self.module = module
        super().__init__(f"Module '{module}' not found.", suggestions, usage)


class AlreadyExistsError(GeneratorError):
    """Refused to overwrite an existing file."""

    def __init__(self, path: Path, kind: str) -> None:
        self.path = path
        self.kind = kind
        self.written: list[Path] = []
        super().__init__(f"{kind.capitalize()} already exists: {path}")


class WriteError(GeneratorError):
    """The filesystem rejected a write; ``reason`` holds the OS message."""

    def __init__(self, path: Path, kind: str, reason: str) -> None:
        self.path = path
        self.kind = kind
        self.reason = reason
        self.written: list[Path] = []
        super().__init__(f"Failed to create {kind}: {path} ({reason})")


class RegistrationPatternMismatch(GeneratorError):
    """A composition file lacks the import block or the declarations list."""
