"""spatialgen command-line entry point.

One sub-command per generator in the catalogue::

    spatialgen make:query GetUsers --module=Identity --entity=User --logging
    spatialgen make:controller User --module=IdentityApi --auth --dry-run
    spatialgen --list

Exit code 0 on success, 1 on any validation or write failure.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Mapping

from spatialgen.config import ConfigStore, resolve_project_root
from spatialgen.generator.catalogue import GENERATORS
from spatialgen.generator.engine import GeneratorEngine, GeneratorSpec, Invocation
from spatialgen.utils import Reporter

_SPEC_KEY = "_spec"


def build_parser(generators: Mapping[str, GeneratorSpec] = GENERATORS) -> argparse.ArgumentParser:
    """Build the argparse tree from the generator catalogue."""
    parser = argparse.ArgumentParser(
        prog="spatialgen",
        description="Generate project source files from templates.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  spatialgen make:query GetUsers --module=Identity --entity=User\n"
            "  spatialgen make:controller User --module=IdentityApi --dry-run\n"
        ),
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Project root (default: $SPATIAL_ROOT or the current directory)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the available generators and exit",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    for spec in generators.values():
        sub = subparsers.add_parser(
            spec.command_id,
            help=spec.description,
            description=f"{spec.description}.\n\nUsage: {spec.usage}",
            epilog=f"Example: {spec.example}" if spec.example else None,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        sub.add_argument("name", nargs="?", default=None, help=f"Name of the {spec.kind}")

        for option in _value_options(spec):
            sub.add_argument(f"--{option}", dest=option, default=None, metavar=option.upper())
        for flag in spec.flags:
            sub.add_argument(
                f"--{flag}", dest=flag, action="store_const", const=True, default=None
            )
        sub.add_argument(
            "--dry-run", dest="dry-run", action="store_const", const=True, default=None,
            help="Preview the files without writing them",
        )
        sub.add_argument(
            "--preview", dest="preview", action="store_const", const=True, default=None,
            help="Alias for --dry-run",
        )
        sub.set_defaults(**{_SPEC_KEY: spec})

    return parser


def _value_options(spec: GeneratorSpec) -> list[str]:
    """Named ``--key=value`` parameters a generator accepts, without duplicates."""
    names: list[str] = []
    if spec.requires == "module_entity":
        names += ["module", "entity"]
    elif spec.requires == "module":
        names.append("module")
    names += list(spec.required_params)
    names += list(spec.options)
    return list(dict.fromkeys(names))


def to_invocation(args: argparse.Namespace, spec: GeneratorSpec) -> Invocation:
    """Keep only the arguments that were actually given."""
    values = vars(args)
    known = _value_options(spec) + list(spec.flags) + ["dry-run", "preview"]
    options = {name: values[name] for name in known if values.get(name) is not None}
    positional = [args.name] if args.name is not None else []
    return Invocation(positional=positional, options=options)


def list_generators(reporter: Reporter, generators: Mapping[str, GeneratorSpec] = GENERATORS) -> None:
    reporter.table(
        "Available generators",
        ["Command", "Description", "Usage"],
        [[spec.command_id, spec.description, spec.usage] for spec in generators.values()],
    )


def main(argv: list[str] | None = None, reporter: Reporter | None = None) -> int:
    """Parse *argv*, run the selected generator, return the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    reporter = reporter or Reporter()

    if args.list:
        list_generators(reporter)
        return 0

    spec: GeneratorSpec | None = getattr(args, _SPEC_KEY, None)
    if spec is None:
        parser.print_help()
        return 1

    root = resolve_project_root(args.root)
    engine = GeneratorEngine(root, store=ConfigStore(root), reporter=reporter)
    return engine.run(spec, to_invocation(args, spec))


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
