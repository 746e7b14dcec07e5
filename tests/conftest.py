"""Shared pytest fixtures for the spatialgen test suite.

Provides:
- project_root: a temporary project with two presentation modules
- module_file_text: a realistic module composition file
- write_config: helper that writes ``.spatial.yml`` from a dict
- reporter / output: a Reporter whose console writes to a string buffer
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml
from rich.console import Console

from spatialgen.utils import Reporter


MODULE_FILE_TEXT = """<?php

declare(strict_types=1);

namespace Presentation\\Identity;

use Presentation\\Identity\\Controllers\\AccountController;
use Spatial\\Core\\Attributes\\ApiModule;

#[ApiModule(
    imports: [],
    declarations: [
        AccountController::class,
    ],
    providers: [],
)]
class IdentityModule
{
}
"""


# ---------------------------------------------------------------------------
# Project tree
# ---------------------------------------------------------------------------


@pytest.fixture
def module_file_text() -> str:
    """Content of ``IdentityModule.php`` before any registration."""
    return MODULE_FILE_TEXT


@pytest.fixture
def project_root(tmp_path: Path, module_file_text: str) -> Path:
    """Temporary project with ``Identity`` and ``IdentityApi`` modules.

    Layout::

        <tmp>/src/presentation/Identity/IdentityModule.php
        <tmp>/src/presentation/IdentityApi/
        <tmp>/src/presentation/.cache/        (hidden, never listed)
    """
    presentation = tmp_path / "src" / "presentation"
    (presentation / "Identity").mkdir(parents=True)
    (presentation / "IdentityApi").mkdir()
    (presentation / ".cache").mkdir()
    (presentation / "Identity" / "IdentityModule.php").write_text(
        module_file_text, encoding="utf-8"
    )
    return tmp_path


@pytest.fixture
def write_config(project_root: Path) -> Callable[[dict[str, Any]], Path]:
    """Return a helper that dumps a dict to ``<project_root>/.spatial.yml``."""

    def _write(data: dict[str, Any]) -> Path:
        path = project_root / ".spatial.yml"
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Console capture
# ---------------------------------------------------------------------------


@pytest.fixture
def reporter() -> Reporter:
    """Reporter writing plain text (no colour codes) into a StringIO."""
    console = Console(
        file=io.StringIO(),
        width=200,
        color_system=None,
        force_terminal=False,
        highlight=False,
    )
    return Reporter(console)


@pytest.fixture
def output(reporter: Reporter) -> Callable[[], str]:
    """Return a callable giving everything *reporter* has printed so far."""

    def _output() -> str:
        return reporter.console.file.getvalue()

    return _output
