"""Input validation with corrective suggestions.

Checks that required parameters are present and that a referenced module
exists on disk. Failures raise :class:`~spatialgen.errors.GeneratorError`
subclasses carrying a message, a list of suggestions and a correct-usage
line; nothing is rendered or written before validation passes.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from spatialgen.errors import MissingParameterError, UnknownModuleError
from spatialgen.utils import join_names, levenshtein, to_pascal_case

MODULE_ROOT = Path("src") / "presentation"
SUGGESTION_MAX_DISTANCE = 3
MODULE_SUFFIX = "api"
CLI_NAME = "spatialgen"


class InputValidator:
    """Validates the named parameters of one generator invocation."""

    def __init__(self, project_root: str | Path, command_id: str) -> None:
        self.project_root = Path(project_root)
        self.command_id = command_id

    @property
    def module_root(self) -> Path:
        return self.project_root / MODULE_ROOT

    # -- Required parameters -----------------------------------------------

    def require_parameters(
        self,
        args: Mapping[str, Any],
        names: list[str],
        usage: str | None = None,
    ) -> None:
        """Raise :class:`MissingParameterError` if any of *names* is absent or empty."""
        missing = [name for name in names if not _present(args, name)]
        if not missing:
            return

        flags = join_names(f"--{name}" for name in missing)
        noun = "parameter is" if len(missing) == 1 else "parameters are"
        raise MissingParameterError(
            f"{flags} {noun} required.",
            usage=usage or self._usage(" ".join(f"--{name}=<{to_pascal_case(name)}>" for name in names)),
        )

    # -- Modules -----------------------------------------------------------

    def list_available_modules(self) -> list[str]:
        """Directory names under ``src/presentation``, in scan (name) order."""
        if not self.module_root.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self.module_root.iterdir()
            if entry.is_dir() and not entry.name.startswith(".")
        )

    def suggest_modules(self, attempted: str) -> list[str]:
        """Modules within edit distance 3 of *attempted*, case-insensitively.

        A candidate is also compared without its ``Api`` suffix, so
        ``identty`` finds ``IdentityApi``. Results keep scan order.
        """
        return [
            module
            for module in self.list_available_modules()
            if module_distance(attempted, module) <= SUGGESTION_MAX_DISTANCE
        ]

    def resolve_module(self, args: Mapping[str, Any], usage: str | None = None) -> str:
        """Validate ``--module`` alone and return it in PascalCase."""
        if not _present(args, "module"):
            raise MissingParameterError(
                "--module parameter is required.",
                suggestions=self._available_modules_hint(),
                usage=usage or self._usage("--module=<Module>"),
            )
        module = to_pascal_case(str(args["module"]))
        self._ensure_module_exists(module)
        return module

    def resolve_module_and_entity(self, args: Mapping[str, Any]) -> dict[str, str]:
        """Validate ``--module`` and ``--entity``; both come back in PascalCase.

        Raises:
            MissingParameterError: Either parameter is absent.
            UnknownModuleError: The module has no directory under the
                presentation root.
        """
        has_module = _present(args, "module")
        if not has_module or not _present(args, "entity"):
            raise MissingParameterError(
                "Both --module and --entity parameters are required.",
                suggestions=[] if has_module else self._available_modules_hint(),
                usage=self._usage("--module=<Module> --entity=<Entity>"),
            )

        module = to_pascal_case(str(args["module"]))
        entity = to_pascal_case(str(args["entity"]))
        self._ensure_module_exists(module)
        return {"module": module, "entity": entity}

    # -- Internal helpers --------------------------------------------------

    def _ensure_module_exists(self, module: str) -> None:
        if (self.module_root / module).is_dir():
            return

        suggestions: list[str] = []
        similar = self.suggest_modules(module)
        if similar:
            suggestions.append(f"Did you mean: {join_names(similar)}?")
        else:
            available = self.list_available_modules()
            if available:
                suggestions.append(f"Available modules: {join_names(available)}")
        suggestions.append(f"Create the module first: {CLI_NAME} make:module {module}")

        raise UnknownModuleError(module, suggestions)

    def _available_modules_hint(self) -> list[str]:
        available = self.list_available_modules()
        if available:
            return [f"Available modules: {join_names(available)}"]
        return [f"No modules found. Create one with: {CLI_NAME} make:module <ModuleName>"]

    def _usage(self, params: str) -> str:
        return f"{CLI_NAME} {self.command_id} <name> {params}"


def module_distance(attempted: str, module: str) -> int:
    """Case-insensitive edit distance to *module* or to its ``Api``-less stem."""
    attempted = attempted.lower()
    candidate = module.lower()
    distance = levenshtein(attempted, candidate)
    if candidate.endswith(MODULE_SUFFIX) and len(candidate) > len(MODULE_SUFFIX):
        distance = min(distance, levenshtein(attempted, candidate[: -len(MODULE_SUFFIX)]))
    return distance


def _present(args: Mapping[str, Any], name: str) -> bool:
    value = args.get(name)
    return value is not None and str(value).strip() != ""
