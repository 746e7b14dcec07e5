"""spatialgen -- project code generator.

Resolves generator options from ``.spatial.yml`` and the command line,
validates the request, renders files from Jinja2 templates and writes (or
previews) them.

Quick usage::

    from spatialgen import GeneratorEngine, Invocation, get_generator

    engine = GeneratorEngine("/path/to/project")
    exit_code = engine.run(
        get_generator("make:query"),
        Invocation(positional=["GetUsers"], options={"module": "identity", "entity": "user"}),
    )
"""

from spatialgen.config import ConfigStore, SpatialConfig
from spatialgen.errors import (
    AlreadyExistsError,
    ConfigParseError,
    GeneratorError,
    MissingParameterError,
    RegistrationPatternMismatch,
    UnknownModuleError,
    WriteError,
)
from spatialgen.generator import (
    CompositionSplicer,
    FileArtifact,
    FileMaterializer,
    FlagResolver,
    GenerationRequest,
    GeneratorEngine,
    GeneratorSpec,
    InputValidator,
    Invocation,
    get_generator,
)

__version__ = "1.0.0"

__all__ = [
    "AlreadyExistsError",
    "CompositionSplicer",
    "ConfigParseError",
    "ConfigStore",
    "FileArtifact",
    "FileMaterializer",
    "FlagResolver",
    "GenerationRequest",
    "GeneratorEngine",
    "GeneratorError",
    "GeneratorSpec",
    "InputValidator",
    "Invocation",
    "MissingParameterError",
    "RegistrationPatternMismatch",
    "SpatialConfig",
    "UnknownModuleError",
    "WriteError",
    "get_generator",
]
