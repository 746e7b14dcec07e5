"""Generator orchestration.

Every ``make:*`` command is a :class:`GeneratorSpec` (plain data: flag
names, scalar options, required parameters and a template provider) run by
the single :class:`GeneratorEngine`:

1. resolve flags (CLI > per-command override > global default > built-in)
2. validate parameters and referenced modules, failing before anything is
   rendered or written
3. render the artifacts through the generator's provider
4. write or preview them
5. register controllers in their module file
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from spatialgen.config import ConfigStore
from spatialgen.errors import GeneratorError, MissingParameterError
from spatialgen.generator.flags import FlagResolver
from spatialgen.generator.materializer import FileArtifact, FileMaterializer
from spatialgen.generator.splicer import CompositionSplicer, RegistrationStatus
from spatialgen.generator.templates import TemplateRenderer
from spatialgen.generator.validator import CLI_NAME, MODULE_ROOT, InputValidator
from spatialgen.utils import Reporter, to_pascal_case, with_suffix

DRY_RUN_ALIASES = ("dry-run", "preview")


# ---------------------------------------------------------------------------
# Request / spec models
# ---------------------------------------------------------------------------


class GenerationRequest(BaseModel):
    """Everything a template provider gets to see."""

    command_id: str
    name: str = Field(..., description="PascalCase class name, suffix applied")
    params: dict[str, Any] = Field(default_factory=dict)
    flags: dict[str, Any] = Field(default_factory=dict)
    project: dict[str, Any] = Field(default_factory=dict)
    dry_run: bool = False

    @property
    def module(self) -> str:
        return self.params["module"]

    @property
    def entity(self) -> str:
        return self.params["entity"]

    def context(self) -> dict[str, Any]:
        """Template context: params and flags flattened next to the name."""
        return {
            **self.params,
            **self.flags,
            "name": self.name,
            "command_id": self.command_id,
            "flags": dict(self.flags),
            "project": dict(self.project),
        }


Provider = Callable[[GenerationRequest, TemplateRenderer], list[FileArtifact]]


@dataclass(frozen=True)
class GeneratorSpec:
    """Declarative description of one generator command."""

    command_id: str
    description: str
    kind: str
    provider: Provider
    name_suffix: str = ""
    flags: tuple[str, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)
    requires: Literal["module_entity", "module"] | None = None
    required_params: tuple[str, ...] = ()
    register_in_module: bool = False
    example: str = ""
    next_steps: Callable[[GenerationRequest], list[str]] | None = None

    @property
    def usage(self) -> str:
        """One-line usage string shown in errors and help."""
        parts = [CLI_NAME, self.command_id, "<name>"]
        if self.requires == "module_entity":
            parts += ["--module=<Module>", "--entity=<Entity>"]
        elif self.requires == "module":
            parts.append("--module=<Module>")
        parts += [f"--{param}=<{to_pascal_case(param)}>" for param in self.required_params]
        parts += [f"[--{option}=<{option}>]" for option in self.options]
        parts += [f"[--{flag}]" for flag in self.flags]
        parts.append("[--dry-run]")
        return " ".join(parts)


@dataclass
class Invocation:
    """Raw arguments of one CLI call.

    ``options`` only holds what was actually given: switches map to
    ``True``, named parameters to their string value.
    """

    positional: list[str] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def dry_run(self) -> bool:
        return any(alias in self.options for alias in DRY_RUN_ALIASES)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class GeneratorEngine:
    """Runs generator specs against one project root."""

    def __init__(
        self,
        project_root: str | Path,
        store: ConfigStore | None = None,
        reporter: Reporter | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.store = store or ConfigStore(self.project_root)
        self.reporter = reporter or Reporter()
        self.renderer = renderer or TemplateRenderer()
        self.splicer = CompositionSplicer()

    # -- Public API --------------------------------------------------------

    def run(self, spec: GeneratorSpec, invocation: Invocation) -> int:
        """Execute *spec*; returns the process exit code (0 or 1)."""
        try:
            request = self.prepare(spec, invocation)
            artifacts = spec.provider(request, self.renderer)
            materializer = FileMaterializer(
                self.project_root, self.reporter, dry_run=request.dry_run
            )
            materializer.create_files(artifacts)
        except GeneratorError as exc:
            self.reporter.structured_error(exc)
            return 1

        if spec.register_in_module:
            self._register(request)

        if spec.next_steps is not None and not request.dry_run:
            steps = spec.next_steps(request)
            if steps:
                self.reporter.line()
                for step in steps:
                    self.reporter.line(step)

        return 0

    def prepare(self, spec: GeneratorSpec, invocation: Invocation) -> GenerationRequest:
        """Validate *invocation* and resolve its options into a request.

        Raises:
            MissingParameterError: No name, or a required parameter is absent.
            UnknownModuleError: The referenced module does not exist.
        """
        options = invocation.options

        # A name made only of separators normalises to "".
        base = to_pascal_case(invocation.positional[0]) if invocation.positional else ""
        if not base:
            raise MissingParameterError(
                f"Please provide {_article(spec.kind)} {spec.kind} name.",
                suggestions=[f"Example: {spec.example}"] if spec.example else [],
                usage=spec.usage,
            )
        name = with_suffix(base, spec.name_suffix)

        validator = InputValidator(self.project_root, spec.command_id)
        params: dict[str, Any] = {}
        if spec.requires == "module_entity":
            params.update(validator.resolve_module_and_entity(options))
        elif spec.requires == "module":
            params["module"] = validator.resolve_module(options, usage=spec.usage)
        if spec.required_params:
            validator.require_parameters(options, list(spec.required_params), usage=spec.usage)
            for param in spec.required_params:
                params[param] = to_pascal_case(str(options[param]))

        resolver = FlagResolver(self.store, spec.command_id)
        flags: dict[str, Any] = resolver.resolve_flags(options, list(spec.flags))
        for option, fallback in spec.options.items():
            params[option] = resolver.resolve_flag_value(options, option, fallback)

        return GenerationRequest(
            command_id=spec.command_id,
            name=name,
            params=params,
            flags=flags,
            project=self.store.get_project_config(),
            dry_run=invocation.dry_run,
        )

    # -- Internal helpers --------------------------------------------------

    def _register(self, request: GenerationRequest) -> None:
        module = request.module
        module_file = f"{module}Module.php"
        if request.dry_run:
            self.reporter.note(f"Would register {request.name} in {module_file}")
            return

        path = self.project_root / MODULE_ROOT / module / module_file
        fqcn = f"Presentation\\{module}\\Controllers\\{request.name}"
        result = self.splicer.register(path, fqcn, request.name)

        if result.status is RegistrationStatus.REGISTERED:
            self.reporter.success(f"Registered in {module_file}")
        elif result.status is RegistrationStatus.ALREADY_REGISTERED:
            self.reporter.note(f"Already registered in {module_file}")
        else:
            self.reporter.warning(
                f"Note: Could not auto-register. Please add to {module_file} manually."
            )
            if result.reason:
                self.reporter.note(f"   {result.reason}")


def _article(word: str) -> str:
    return "an" if word[:1].lower() in "aeiou" else "a"
