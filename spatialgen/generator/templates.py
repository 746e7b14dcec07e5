"""Jinja2 template rendering for generated source files.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``spatialgen/generator/templates/`` directory and renders them with the
context built from a generation request.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from spatialgen.utils import to_kebab_case, to_pascal_case, to_snake_case


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for generated files.

    Templates are ``.j2`` files under a configurable directory. Undefined
    variables raise instead of rendering as empty strings, so a template
    never silently produces broken source.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        # Register custom filters
        self.env.filters["pascal_case"] = to_pascal_case
        self.env.filters["snake_case"] = to_snake_case
        self.env.filters["kebab_case"] = to_kebab_case
        self.env.filters["php_imports"] = _php_imports_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"handler.php.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)

    def list_templates(self) -> list[str]:
        """Return a sorted list of all ``.j2`` template paths."""
        if not self.template_dir.is_dir():
            return []
        return sorted(
            str(p.relative_to(self.template_dir))
            for p in self.template_dir.rglob("*.j2")
        )


def build_imports(base: list[str], conditional: list[tuple[bool, list[str]]] | None = None) -> list[str]:
    """Base imports plus every conditional group whose flag is set, sorted."""
    imports = list(base)
    for enabled, extra in conditional or []:
        if enabled:
            imports.extend(extra)
    return sorted(set(imports))


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _php_imports_filter(imports: list[str]) -> str:
    """``use`` lines in the given order."""
    return "\n".join(f"use {name};" for name in imports)
