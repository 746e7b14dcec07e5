"""Generator engine -- flag resolution, validation, rendering and file output.

Quick usage::

    from spatialgen.generator import GeneratorEngine, Invocation, get_generator

    engine = GeneratorEngine(project_root)
    engine.run(get_generator("make:command"), Invocation(["CreateUser"], {...}))
"""

from spatialgen.generator.catalogue import GENERATORS, get_generator
from spatialgen.generator.engine import (
    GenerationRequest,
    GeneratorEngine,
    GeneratorSpec,
    Invocation,
)
from spatialgen.generator.flags import FlagResolver
from spatialgen.generator.materializer import FileArtifact, FileMaterializer, FilePreview
from spatialgen.generator.splicer import (
    CompositionDocument,
    CompositionSplicer,
    RegistrationResult,
    RegistrationStatus,
)
from spatialgen.generator.templates import TemplateRenderer
from spatialgen.generator.validator import InputValidator

__all__ = [
    "GENERATORS",
    "CompositionDocument",
    "CompositionSplicer",
    "FileArtifact",
    "FileMaterializer",
    "FilePreview",
    "FlagResolver",
    "GenerationRequest",
    "GeneratorEngine",
    "GeneratorSpec",
    "InputValidator",
    "Invocation",
    "RegistrationResult",
    "RegistrationStatus",
    "TemplateRenderer",
    "get_generator",
]
