"""The built-in generator commands.

Each entry is data for :class:`~spatialgen.generator.engine.GeneratorEngine`:
which flags and options the command understands, what it validates, and a
provider that renders its files. Paths are relative to the project root.
"""

from __future__ import annotations

from spatialgen.generator.engine import GenerationRequest, GeneratorSpec
from spatialgen.generator.materializer import FileArtifact
from spatialgen.generator.templates import TemplateRenderer, build_imports
from spatialgen.utils import strip_suffix, to_kebab_case, to_pascal_case, to_snake_case

LOGIC_ROOT = "src/core/Application/Logics"

LOGGER = "Psr\\Log\\LoggerInterface"
TRACER = "OpenTelemetry\\API\\Trace\\TracerInterface"
STATUS_CODE = "OpenTelemetry\\API\\Trace\\StatusCode"

HANDLER_IMPORTS = [
    "Common\\Response\\ServerResponse",
    "Exception",
    "GuzzleHttp\\Psr7\\Response",
    "JsonException",
    "Psr\\Http\\Message\\ResponseInterface",
    "Psr\\Http\\Message\\ServerRequestInterface",
    "Spatial\\Psr7\\RequestHandler",
]

CONTROLLER_IMPORTS = [
    "Common\\Libraries\\Controller",
    "Psr\\Http\\Message\\ResponseInterface",
    "Spatial\\Common\\BindSourceAttributes\\FromBody",
    "Spatial\\Common\\HttpAttributes\\HttpDelete",
    "Spatial\\Common\\HttpAttributes\\HttpGet",
    "Spatial\\Common\\HttpAttributes\\HttpPost",
    "Spatial\\Common\\HttpAttributes\\HttpPut",
    "Spatial\\Core\\Attributes\\ApiController",
    "Spatial\\Core\\Attributes\\Area",
    "Spatial\\Core\\Attributes\\Route",
]
AUTHORIZE = "Spatial\\Core\\Attributes\\Authorize"
AUTH_SERVICE = "Infrastructure\\Services\\AuthenticationService"


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


def _cqrs_provider(kind: str, folder: str):
    """Request class plus handler under ``Logics/<Module>/<Entity>/<folder>``."""

    def provide(request: GenerationRequest, renderer: TemplateRenderer) -> list[FileArtifact]:
        base = f"{LOGIC_ROOT}/{request.module}/{request.entity}/{folder}"
        context = {
            **request.context(),
            "namespace": f"Core\\Application\\Logics\\{request.module}\\{request.entity}\\{folder}",
            "request_kind": kind,
            "handler_imports": build_imports(
                HANDLER_IMPORTS,
                [
                    (request.flags["tracing"], [STATUS_CODE, TRACER]),
                    (request.flags["logging"], [LOGGER]),
                ],
            ),
        }
        return [
            FileArtifact(
                path=f"{base}/{request.name}.php",
                content=renderer.render(f"{kind}.php.j2", context),
                kind=kind,
            ),
            FileArtifact(
                path=f"{base}/{request.name}Handler.php",
                content=renderer.render("handler.php.j2", context),
                kind="handler",
            ),
        ]

    return provide


def provide_controller(request: GenerationRequest, renderer: TemplateRenderer) -> list[FileArtifact]:
    short_name = strip_suffix(request.name, "Controller")
    context = {
        **request.context(),
        "short_name": short_name,
        "route_name": short_name.lower(),
        "area_name": to_kebab_case(request.module),
        "imports": build_imports(
            CONTROLLER_IMPORTS + [
                f"Core\\Application\\Logics\\{short_name}\\{short_name}\\Commands\\{verb}{short_name}"
                for verb in ("Create", "Update", "Delete")
            ]
            + [
                f"Core\\Application\\Logics\\{short_name}\\{short_name}\\Queries\\Get{short_name}{plural}"
                for plural in ("", "s")
            ],
            [
                (request.flags["auth"], [AUTHORIZE, AUTH_SERVICE]),
                (request.flags["logging"], [LOGGER]),
                (request.flags["tracing"], [TRACER]),
            ],
        ),
    }
    return [
        FileArtifact(
            path=f"src/presentation/{request.module}/Controllers/{request.name}.php",
            content=renderer.render("controller.php.j2", context),
            kind="controller",
        )
    ]


def provide_job(request: GenerationRequest, renderer: TemplateRenderer) -> list[FileArtifact]:
    context = {**request.context(), "short_name": strip_suffix(request.name, "Job")}
    return [
        FileArtifact(
            path=f"src/core/Jobs/{request.name}.php",
            content=renderer.render("job.php.j2", context),
            kind="job",
        )
    ]


def provide_event(request: GenerationRequest, renderer: TemplateRenderer) -> list[FileArtifact]:
    module = to_pascal_case(str(request.params["module"]))
    context = {
        **request.context(),
        "module": module,
        "short_name": strip_suffix(request.name, "Event"),
    }
    return [
        FileArtifact(
            path=f"src/core/Application/Events/{module}/{request.name}.php",
            content=renderer.render("event.php.j2", context),
            kind="event",
        )
    ]


def provide_listener(request: GenerationRequest, renderer: TemplateRenderer) -> list[FileArtifact]:
    context = {
        **request.context(),
        "short_name": strip_suffix(request.name, "Listener"),
        "imports": build_imports(
            ["Spatial\\Events\\Attributes\\Listener"],
            [(request.flags["tracing"], [TRACER]), (request.flags["logging"], [LOGGER])],
        ),
    }
    return [
        FileArtifact(
            path=f"src/core/Application/Listeners/{request.name}.php",
            content=renderer.render("listener.php.j2", context),
            kind="listener",
        )
    ]


def provide_entity(request: GenerationRequest, renderer: TemplateRenderer) -> list[FileArtifact]:
    schema = to_pascal_case(str(request.params["schema"]))
    context = {
        **request.context(),
        "schema": schema,
        "table_name": f"{to_snake_case(request.name)}s",
    }
    return [
        FileArtifact(
            path=f"src/core/Domain/{schema}/{request.name}.php",
            content=renderer.render("entity.php.j2", context),
            kind="entity",
        )
    ]


def provide_seeder(request: GenerationRequest, renderer: TemplateRenderer) -> list[FileArtifact]:
    return [
        FileArtifact(
            path=f"src/core/Database/Seeders/{request.name}.php",
            content=renderer.render("seeder.php.j2", request.context()),
            kind="seeder",
        )
    ]


def provide_trait(request: GenerationRequest, renderer: TemplateRenderer) -> list[FileArtifact]:
    """Database-access trait for one domain, or a plain trait for any other ``--type``."""
    domain = strip_suffix(request.name, "Trait")
    context = {
        **request.context(),
        "type": str(request.params["type"]),
        "domain": domain,
        "em_var": f"em{domain}",
        "db_class": f"{domain}DB",
    }
    return [
        FileArtifact(
            path=f"src/core/Application/Traits/{request.name}.php",
            content=renderer.render("trait.php.j2", context),
            kind="trait",
        )
    ]


def _infrastructure_provider(kind: str, suffix: str):
    """Single class under ``src/infrastructure/<folder>``."""

    def provide(request: GenerationRequest, renderer: TemplateRenderer) -> list[FileArtifact]:
        folder = to_pascal_case(str(request.params["folder"]))
        context = {
            **request.context(),
            "folder": folder,
            "short_name": strip_suffix(request.name, suffix),
        }
        return [
            FileArtifact(
                path=f"src/infrastructure/{folder}/{request.name}.php",
                content=renderer.render(f"{kind}.php.j2", context),
                kind=kind,
            )
        ]

    return provide


# ---------------------------------------------------------------------------
# Next-step hints
# ---------------------------------------------------------------------------


def _job_steps(request: GenerationRequest) -> list[str]:
    return [
        "Dispatch job:",
        f"  $queue->dispatch(new {request.name}($data));",
        "Process jobs:",
        f"  spatial queue:work --queue={request.params['queue']}",
    ]


def _event_steps(request: GenerationRequest) -> list[str]:
    return [
        "Create a listener with:",
        f"  spatialgen make:listener Handle{request.name} --event={request.name}",
    ]


def _entity_steps(request: GenerationRequest) -> list[str]:
    return [
        "Next steps:",
        "  1. Add properties to the entity",
        "  2. Run doctrine:schema:update to create tables",
    ]


def _seeder_steps(request: GenerationRequest) -> list[str]:
    return ["Run seeder with:", f"  spatial db:seed --class={request.name}"]


def _trait_steps(request: GenerationRequest) -> list[str]:
    return [
        "Usage in your Command/Query:",
        f"  use Core\\Application\\Traits\\{request.name};",
        "  class MyCommand extends Request {",
        f"      use {request.name};",
        "  }",
    ]


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

GENERATORS: dict[str, GeneratorSpec] = {
    spec.command_id: spec
    for spec in (
        GeneratorSpec(
            command_id="make:command",
            description="Create a new CQRS command and handler",
            kind="command",
            provider=_cqrs_provider("command", "Commands"),
            flags=("logging", "tracing", "releaseEntity"),
            requires="module_entity",
            example="spatialgen make:command CreateUser --module=Identity --entity=User --logging",
        ),
        GeneratorSpec(
            command_id="make:query",
            description="Create a new CQRS query and handler",
            kind="query",
            provider=_cqrs_provider("query", "Queries"),
            flags=("logging", "tracing", "releaseEntity"),
            requires="module_entity",
            example="spatialgen make:query GetUsers --module=Identity --entity=User",
        ),
        GeneratorSpec(
            command_id="make:controller",
            description="Create a new controller class in a module",
            kind="controller",
            provider=provide_controller,
            name_suffix="Controller",
            flags=("logging", "tracing", "auth"),
            requires="module",
            register_in_module=True,
            example="spatialgen make:controller User --module=IdentityApi --auth",
        ),
        GeneratorSpec(
            command_id="make:job",
            description="Create a new queued background job",
            kind="job",
            provider=provide_job,
            name_suffix="Job",
            flags=("logging", "tracing"),
            options={"queue": "default", "tries": 3, "timeout": 60},
            example="spatialgen make:job SendEmail --queue=emails",
            next_steps=_job_steps,
        ),
        GeneratorSpec(
            command_id="make:event",
            description="Create a new domain event",
            kind="event",
            provider=provide_event,
            name_suffix="Event",
            options={"module": "App"},
            example="spatialgen make:event OrderCreated --module=Orders",
            next_steps=_event_steps,
        ),
        GeneratorSpec(
            command_id="make:listener",
            description="Create a new event listener",
            kind="listener",
            provider=provide_listener,
            name_suffix="Listener",
            flags=("logging", "tracing"),
            required_params=("event",),
            example="spatialgen make:listener SendConfirmationEmail --event=OrderCreatedEvent",
            next_steps=lambda request: ["Register this listener in your event configuration."],
        ),
        GeneratorSpec(
            command_id="make:service",
            description="Create a new infrastructure service",
            kind="service",
            provider=_infrastructure_provider("service", "Service"),
            name_suffix="Service",
            options={"folder": "Services"},
            example="spatialgen make:service PaymentGateway --folder=Gateway",
            next_steps=lambda request: [
                "Don't forget to register this service as a provider in your module!"
            ],
        ),
        GeneratorSpec(
            command_id="make:middleware",
            description="Create a new PSR-15 middleware",
            kind="middleware",
            provider=_infrastructure_provider("middleware", "Middleware"),
            name_suffix="Middleware",
            options={"folder": "Middlewares"},
            example="spatialgen make:middleware RateLimit",
            next_steps=lambda request: ["Register in your module providers to use it."],
        ),
        GeneratorSpec(
            command_id="make:entity",
            description="Create a new Doctrine entity",
            kind="entity",
            provider=provide_entity,
            options={"schema": "Default"},
            example="spatialgen make:entity User --schema=Identity",
            next_steps=_entity_steps,
        ),
        GeneratorSpec(
            command_id="make:seeder",
            description="Create a new database seeder",
            kind="seeder",
            provider=provide_seeder,
            name_suffix="Seeder",
            options={"connection": "default"},
            example="spatialgen make:seeder UserSeeder",
            next_steps=_seeder_steps,
        ),
        GeneratorSpec(
            command_id="make:trait",
            description="Create a new domain trait (entity manager access by default)",
            kind="trait",
            provider=provide_trait,
            name_suffix="Trait",
            options={"type": "db"},
            example="spatialgen make:trait Identity --type=db",
            next_steps=_trait_steps,
        ),
    )
}


def get_generator(command_id: str) -> GeneratorSpec:
    """Look up a generator by command id (``KeyError`` if unknown)."""
    return GENERATORS[command_id]
