"""Flag resolution with configuration fallback.

Precedence, applied to every flag independently:

1. present on the command line
2. ``generators.overrides[<command>]`` in ``.spatial.yml``
3. ``generators.defaults`` in ``.spatial.yml``
4. the built-in default (``False`` for switches)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from spatialgen.config import ConfigStore


class FlagResolver:
    """Resolves the effective flag values for one generator command."""

    def __init__(self, store: ConfigStore, command_id: str) -> None:
        self.store = store
        self.command_id = command_id

    def resolve_flags(self, args: Mapping[str, Any], flag_names: list[str]) -> dict[str, bool]:
        """Resolve boolean switches.

        A switch present in *args* is ``True`` whatever value it carries; an
        absent switch falls back to the configured value (read as truthy or
        falsy) and finally to ``False``.
        """
        configured = self.store.get_generator_defaults(self.command_id)

        result: dict[str, bool] = {}
        for name in flag_names:
            if name in args:
                result[name] = True
            else:
                result[name] = bool(configured.get(name, False))
        return result

    def resolve_flag_value(self, args: Mapping[str, Any], flag_name: str, fallback: Any) -> Any:
        """Resolve a scalar option; configured values pass through unmodified."""
        if flag_name in args:
            return args[flag_name]

        configured = self.store.get_generator_defaults(self.command_id)
        if flag_name in configured and configured[flag_name] is not None:
            return configured[flag_name]
        return fallback
