"""Registering generated classes in a module composition file.

A module file (``src/presentation/<Module>/<Module>Module.php``) holds a
top-level ``use ...;`` block and a ``declarations: [...]`` list::

    use Presentation\\Identity\\Controllers\\UserController;

    #[ApiModule(
        declarations: [
            UserController::class,
        ],
    )]
    class IdentityModule {}

:class:`CompositionDocument` locates those two anchors and keeps every other
byte verbatim, so a registration only ever adds one import line and one
declaration entry. Registration is idempotent: a class whose
``<Name>::class`` reference already appears is left alone.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from spatialgen.errors import RegistrationPatternMismatch
from spatialgen.generator.materializer import atomic_write

CLASS_SUFFIX = "::class"

_USE_LINE = re.compile(r"^use\s+[^;\s][^;]*;[ \t]*$")
_DECLARATIONS = re.compile(r"\bdeclarations\s*:\s*\[")


class RegistrationStatus(str, Enum):
    REGISTERED = "registered"
    ALREADY_REGISTERED = "already_registered"
    MISSING_FILE = "missing_file"
    PATTERN_MISMATCH = "pattern_mismatch"
    IO_ERROR = "io_error"


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of one registration attempt."""

    status: RegistrationStatus
    path: Path
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status in (RegistrationStatus.REGISTERED, RegistrationStatus.ALREADY_REGISTERED)


@dataclass
class _Span:
    start: int
    end: int


class CompositionDocument:
    """Minimal round-trippable model of a module composition file.

    ``str(doc)`` always reproduces the text it was parsed from, plus any
    registrations added since.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self._imports_end = self._find_imports_end(text)
        self._declarations = self._find_declarations(text)

    @classmethod
    def parse(cls, text: str) -> "CompositionDocument":
        return cls(text)

    def __str__(self) -> str:
        return self.text

    # -- Queries -----------------------------------------------------------

    @property
    def imports(self) -> list[str]:
        """Every top-level ``use`` line, without line endings."""
        return [line.rstrip() for line in self.text.splitlines() if _USE_LINE.match(line)]

    @property
    def declarations(self) -> list[str]:
        """Entries of the declarations list, stripped of whitespace."""
        body = self.text[self._declarations.start:self._declarations.end]
        return [entry.strip() for entry in body.split(",") if entry.strip()]

    def is_registered(self, short_name: str) -> bool:
        """Whether ``<short_name>::class`` occurs anywhere in the file."""
        return _class_reference(short_name).search(self.text) is not None

    # -- Mutation ----------------------------------------------------------

    def register(self, fqcn: str, short_name: str) -> None:
        """Add the import line and the declaration entry for one class."""
        use_line = f"use {fqcn};"
        edits: list[tuple[int, int, str]] = []

        if use_line not in self.imports:
            prefix = "" if self.text[: self._imports_end].endswith("\n") else "\n"
            edits.append((self._imports_end, self._imports_end, f"{prefix}{use_line}\n"))

        span = self._declarations
        body = self.text[span.start:span.end]
        new_body = _append_entry(body, f"{short_name}{CLASS_SUFFIX}", self._declaration_indent())
        edits.append((span.start, span.end, new_body))

        # Apply back to front so earlier offsets stay valid.
        text = self.text
        for start, end, replacement in sorted(edits, key=lambda edit: edit[0], reverse=True):
            text = text[:start] + replacement + text[end:]

        self.text = text
        self._imports_end = self._find_imports_end(text)
        self._declarations = self._find_declarations(text)

    # -- Parsing -----------------------------------------------------------

    @staticmethod
    def _find_imports_end(text: str) -> int:
        """Offset just past the last line of the last top-level ``use`` block."""
        offset = 0
        end = -1
        for line in text.splitlines(keepends=True):
            if _USE_LINE.match(line.rstrip("\r\n")):
                end = offset + len(line)
            offset += len(line)
        if end < 0:
            raise RegistrationPatternMismatch("No import statements found in composition file.")
        return end

    @staticmethod
    def _find_declarations(text: str) -> _Span:
        """Span of the text between ``declarations: [`` and its ``]``."""
        match = _DECLARATIONS.search(text)
        if match is None:
            raise RegistrationPatternMismatch("No 'declarations: [...]' list found in composition file.")
        close = text.find("]", match.end())
        if close < 0:
            raise RegistrationPatternMismatch("Unterminated declarations list in composition file.")
        return _Span(match.end(), close)

    def _declaration_indent(self) -> str:
        line_start = self.text.rfind("\n", 0, self._declarations.start) + 1
        line = self.text[line_start:self._declarations.start]
        return line[: len(line) - len(line.lstrip())]


def _class_reference(short_name: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(short_name)}{re.escape(CLASS_SUFFIX)}")


def _append_entry(body: str, entry: str, base_indent: str) -> str:
    """Return *body* with *entry* appended, following its existing layout."""
    stripped = body.rstrip()
    trailing = body[len(stripped):]

    if not stripped.strip():
        return f"\n{base_indent}    {entry},\n{base_indent}"

    had_trailing_comma = stripped.endswith(",")
    head = stripped if had_trailing_comma else stripped + ","
    tail_comma = "," if had_trailing_comma else ""

    if "\n" in body:
        last_line = stripped.rsplit("\n", 1)[-1]
        indent = last_line[: len(last_line) - len(last_line.lstrip())]
        if "\n" not in stripped:
            indent = base_indent + "    "
        return f"{head}\n{indent}{entry}{tail_comma}{trailing}"

    return f"{head} {entry}{tail_comma}{trailing}"


class CompositionSplicer:
    """Registers a generated class in an existing composition file."""

    def register(self, path: str | Path, fqcn: str, short_name: str) -> RegistrationResult:
        """Idempotently add *fqcn* to the file at *path*.

        Never raises for a missing file, an unrecognised layout, or a file
        that cannot be read or written; those come back as ``MISSING_FILE``,
        ``PATTERN_MISMATCH`` or ``IO_ERROR`` with the file left as it was.
        """
        target = Path(path)
        if not target.is_file():
            return RegistrationResult(RegistrationStatus.MISSING_FILE, target)

        try:
            text = target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return RegistrationResult(RegistrationStatus.IO_ERROR, target, str(exc))

        if _class_reference(short_name).search(text):
            return RegistrationResult(RegistrationStatus.ALREADY_REGISTERED, target)

        try:
            document = CompositionDocument.parse(text)
            document.register(fqcn, short_name)
        except RegistrationPatternMismatch as exc:
            return RegistrationResult(RegistrationStatus.PATTERN_MISMATCH, target, exc.message)

        try:
            atomic_write(target, str(document))
        except OSError as exc:
            return RegistrationResult(RegistrationStatus.IO_ERROR, target, str(exc))
        return RegistrationResult(RegistrationStatus.REGISTERED, target)
