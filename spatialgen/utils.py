"""Shared utility functions for spatialgen.

Provides Rich-based console output (including the three-part structured
error block and dry-run previews), name-casing helpers, and small
formatting helpers.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterable

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from spatialgen.errors import GeneratorError
    from spatialgen.generator.materializer import FilePreview

console = Console()

# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def to_pascal_case(value: str) -> str:
    """Convert ``some-thing``, ``some_thing`` or ``some thing`` to ``SomeThing``.

    Only the first letter of each word is upper-cased, so names that are
    already PascalCase pass through unchanged.

    Examples::

        to_pascal_case("identity")      -> "Identity"
        to_pascal_case("get_users")     -> "GetUsers"
        to_pascal_case("IdentityApi")   -> "IdentityApi"
    """
    parts = re.split(r"[-_\s]+", value.strip())
    return "".join(part[0].upper() + part[1:] for part in parts if part)


def to_snake_case(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


def to_kebab_case(value: str) -> str:
    """Convert ``IdentityApi`` to ``identity-api``."""
    return to_snake_case(value).replace("_", "-")


def with_suffix(name: str, suffix: str) -> str:
    """Append *suffix* unless *name* already ends with it."""
    if suffix and not name.endswith(suffix):
        return name + suffix
    return name


def strip_suffix(name: str, suffix: str) -> str:
    """Remove a trailing *suffix* (``UserController`` -> ``User``)."""
    if suffix and name.endswith(suffix) and name != suffix:
        return name[: -len(suffix)]
    return name


def levenshtein(a: str, b: str) -> int:
    """Classic edit distance (insert, delete, substitute all cost 1)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_size(size: int) -> str:
    """Format a byte count as ``"<n> bytes"``."""
    return f"{size} byte" if size == 1 else f"{size} bytes"


def join_names(names: Iterable[str]) -> str:
    """Comma-separate *names* for inline messages."""
    return ", ".join(names)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


class Reporter:
    """Console front for everything the engine tells the user.

    Wraps a Rich ``Console`` so tests can inject one that records output.
    All user-supplied text is escaped before it reaches Rich markup.
    """

    def __init__(self, out: Console | None = None) -> None:
        self.console = out or console

    def line(self, message: str = "") -> None:
        self.console.print(escape(message), soft_wrap=True, highlight=False)

    def success(self, message: str) -> None:
        self.console.print(f"[bold green]{escape(message)}[/bold green]", soft_wrap=True)

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]{escape(message)}[/bold red]", soft_wrap=True)

    def warning(self, message: str) -> None:
        self.console.print(f"[bold yellow]{escape(message)}[/bold yellow]", soft_wrap=True)

    def note(self, message: str) -> None:
        self.console.print(f"[dim]{escape(message)}[/dim]", soft_wrap=True)

    def structured_error(self, error: GeneratorError) -> None:
        """Render the message, the Suggestions block and the Correct usage block."""
        self.error(f"Error: {error.message}")
        self.line()

        if error.suggestions:
            self.console.print("[bold cyan]Suggestions:[/bold cyan]")
            for suggestion in error.suggestions:
                self.line(f"   • {suggestion}")
            self.line()

        if error.usage is not None:
            self.console.print("[bold cyan]Correct usage:[/bold cyan]")
            self.line(f"   {error.usage}")
            self.line()

    def preview(self, preview: FilePreview) -> None:
        """Render one dry-run file preview."""
        self.console.print(
            f"[bold]Would create {escape(preview.kind)}:[/bold] {escape(preview.path)}",
            soft_wrap=True,
        )
        self.line(f"   Lines: {preview.line_count} | Size: {format_size(preview.size)}")
        self.line()
        self.line("   Preview:")
        for number, text in preview.lines:
            self.line(f"   {number:>3} | {text}")
        if preview.remaining:
            self.line(f"   ... ({preview.remaining} more lines)")
        self.line()

    def table(self, title: str, columns: list[str], rows: list[list[str]]) -> None:
        """Print a simple table (used by ``--list``)."""
        table = Table(title=title, show_header=True, header_style="bold cyan")
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*(escape(cell) for cell in row))
        self.console.print(table)
        self.console.print()
