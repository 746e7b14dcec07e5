"""Unit tests for the configuration layer (spatialgen.config).

Tests cover:
- SpatialConfig.parse_text (empty, null sections, malformed, wrong shape)
- ConfigStore.load (missing file, invalid file, caching, reset)
- ConfigStore.get_generator_defaults (merge precedence, isolation, purity)
- ConfigStore.get_project_config / exists
- resolve_project_root (argument, environment, cwd)
"""

from __future__ import annotations

from pathlib import Path

import pytest

from spatialgen.config import (
    CONFIG_FILENAME,
    ROOT_ENV_VAR,
    ConfigStore,
    SpatialConfig,
    resolve_project_root,
)
from spatialgen.errors import ConfigParseError


# ---------------------------------------------------------------------------
# SpatialConfig.parse_text
# ---------------------------------------------------------------------------


class TestParseText:
    @pytest.mark.unit
    def test_empty_text_gives_empty_config(self):
        config = SpatialConfig.parse_text("")
        assert config.generators.defaults == {}
        assert config.generators.overrides == {}
        assert config.project.namespace is None

    @pytest.mark.unit
    def test_sections_without_body(self):
        config = SpatialConfig.parse_text("generators:\nproject:\n")
        assert config.generators.defaults == {}
        assert config.project.paths == {}

    @pytest.mark.unit
    def test_override_without_body_is_empty(self):
        config = SpatialConfig.parse_text(
            "generators:\n  defaults:\n  overrides:\n    make:query:\n"
        )
        assert config.generators.defaults == {}
        assert config.generators.overrides == {"make:query": {}}

    @pytest.mark.unit
    def test_full_document(self):
        config = SpatialConfig.parse_text(
            "generators:\n"
            "  defaults:\n"
            "    logging: true\n"
            "  overrides:\n"
            "    make:query:\n"
            "      tracing: true\n"
            "project:\n"
            "  namespace: App\n"
            "  paths:\n"
            "    presentation: src/presentation\n"
            "  vendor: acme\n"
        )
        assert config.generators.defaults == {"logging": True}
        assert config.generators.overrides["make:query"] == {"tracing": True}
        assert config.project.namespace == "App"
        assert config.project.paths == {"presentation": "src/presentation"}
        assert config.project.model_dump()["vendor"] == "acme"

    @pytest.mark.unit
    def test_unknown_top_level_keys_are_ignored(self):
        config = SpatialConfig.parse_text("database:\n  host: localhost\n")
        assert config.generators.defaults == {}

    @pytest.mark.unit
    def test_malformed_yaml_raises(self):
        with pytest.raises(ConfigParseError) as exc_info:
            SpatialConfig.parse_text("generators: [unclosed\n")
        assert CONFIG_FILENAME in exc_info.value.message

    @pytest.mark.unit
    def test_top_level_list_raises(self):
        with pytest.raises(ConfigParseError):
            SpatialConfig.parse_text("- one\n- two\n")

    @pytest.mark.unit
    def test_wrong_section_shape_raises(self):
        with pytest.raises(ConfigParseError):
            SpatialConfig.parse_text("generators:\n  defaults: [logging]\n")

    @pytest.mark.unit
    def test_document_is_frozen(self):
        config = SpatialConfig.parse_text("")
        with pytest.raises(Exception):
            config.project = None  # type: ignore[misc]


# ---------------------------------------------------------------------------
# ConfigStore.load
# ---------------------------------------------------------------------------


class TestConfigStoreLoad:
    @pytest.mark.unit
    def test_missing_file_is_silent_and_empty(self, tmp_path: Path, capsys):
        store = ConfigStore(tmp_path)
        assert store.exists() is False
        assert store.get_generator_defaults("make:query") == {}
        assert store.get_generator_defaults("make:query") == {}
        assert capsys.readouterr().out == ""

    @pytest.mark.unit
    def test_invalid_file_warns_and_is_empty(self, tmp_path: Path, capsys):
        (tmp_path / CONFIG_FILENAME).write_text("generators: [oops\n", encoding="utf-8")
        store = ConfigStore(tmp_path)

        assert store.get_generator_defaults("make:query") == {}
        out = capsys.readouterr().out
        assert "Warning:" in out
        assert "Invalid" in out

    @pytest.mark.unit
    def test_invalid_file_warns_once(self, tmp_path: Path, capsys):
        (tmp_path / CONFIG_FILENAME).write_text("- a list\n", encoding="utf-8")
        store = ConfigStore(tmp_path)

        store.get_generator_defaults("make:query")
        store.get_generator_defaults("make:command")
        store.get_project_config()
        assert capsys.readouterr().out.count("Warning:") == 1

    @pytest.mark.unit
    def test_load_is_cached(self, project_root: Path, write_config):
        write_config({"generators": {"defaults": {"logging": True}}})
        store = ConfigStore(project_root)
        assert store.get_generator_defaults("make:job") == {"logging": True}

        write_config({"generators": {"defaults": {"logging": False}}})
        assert store.get_generator_defaults("make:job") == {"logging": True}

    @pytest.mark.unit
    def test_reset_rereads_file(self, project_root: Path, write_config):
        write_config({"generators": {"defaults": {"logging": True}}})
        store = ConfigStore(project_root)
        store.load()

        write_config({"generators": {"defaults": {"logging": False}}})
        store.reset()
        assert store.get_generator_defaults("make:job") == {"logging": False}

    @pytest.mark.unit
    def test_stores_are_independent(self, project_root: Path, tmp_path_factory, write_config):
        write_config({"generators": {"defaults": {"tracing": True}}})
        other = tmp_path_factory.mktemp("other")

        assert ConfigStore(project_root).get_generator_defaults("x") == {"tracing": True}
        assert ConfigStore(other).get_generator_defaults("x") == {}


# ---------------------------------------------------------------------------
# ConfigStore.get_generator_defaults
# ---------------------------------------------------------------------------


class TestGeneratorDefaults:
    @pytest.mark.unit
    def test_override_wins_over_default(self, project_root: Path, write_config):
        write_config({
            "generators": {
                "defaults": {"logging": True, "tracing": False},
                "overrides": {"make:query": {"tracing": True, "releaseEntity": True}},
            }
        })
        store = ConfigStore(project_root)
        assert store.get_generator_defaults("make:query") == {
            "logging": True,
            "tracing": True,
            "releaseEntity": True,
        }

    @pytest.mark.unit
    def test_override_does_not_leak_to_other_commands(self, project_root: Path, write_config):
        write_config({
            "generators": {
                "defaults": {"logging": True},
                "overrides": {"make:query": {"tracing": True}},
            }
        })
        store = ConfigStore(project_root)
        assert store.get_generator_defaults("make:command") == {"logging": True}

    @pytest.mark.unit
    def test_override_can_disable_default(self, project_root: Path, write_config):
        write_config({
            "generators": {
                "defaults": {"logging": True},
                "overrides": {"make:job": {"logging": False}},
            }
        })
        assert ConfigStore(project_root).get_generator_defaults("make:job") == {"logging": False}

    @pytest.mark.unit
    def test_returned_dict_is_a_copy(self, project_root: Path, write_config):
        write_config({"generators": {"defaults": {"logging": True}}})
        store = ConfigStore(project_root)

        first = store.get_generator_defaults("make:query")
        first["logging"] = False
        first["extra"] = 1

        assert store.get_generator_defaults("make:query") == {"logging": True}

    @pytest.mark.unit
    def test_scalar_values_pass_through(self, project_root: Path, write_config):
        write_config({"generators": {"overrides": {"make:job": {"queue": "emails", "tries": 5}}}})
        assert ConfigStore(project_root).get_generator_defaults("make:job") == {
            "queue": "emails",
            "tries": 5,
        }


# ---------------------------------------------------------------------------
# Project section / exists
# ---------------------------------------------------------------------------


class TestProjectConfig:
    @pytest.mark.unit
    def test_project_section(self, project_root: Path, write_config):
        write_config({"project": {"namespace": "Acme", "paths": {"core": "src/core"}}})
        store = ConfigStore(project_root)
        assert store.exists() is True
        project = store.get_project_config()
        assert project["namespace"] == "Acme"
        assert project["paths"] == {"core": "src/core"}

    @pytest.mark.unit
    def test_project_section_defaults(self, tmp_path: Path):
        project = ConfigStore(tmp_path).get_project_config()
        assert project == {"namespace": None, "paths": {}}

    @pytest.mark.unit
    def test_config_path(self, tmp_path: Path):
        assert ConfigStore(tmp_path).config_path == tmp_path / ".spatial.yml"


# ---------------------------------------------------------------------------
# resolve_project_root
# ---------------------------------------------------------------------------


class TestResolveProjectRoot:
    @pytest.mark.unit
    def test_explicit_argument_wins(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(ROOT_ENV_VAR, "/somewhere/else")
        assert resolve_project_root(tmp_path) == tmp_path

    @pytest.mark.unit
    def test_environment_variable(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(ROOT_ENV_VAR, str(tmp_path))
        assert resolve_project_root() == tmp_path

    @pytest.mark.unit
    def test_falls_back_to_cwd(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv(ROOT_ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)
        assert resolve_project_root() == Path.cwd()


class TestGeneratorDefaultsPurity:
    @pytest.mark.unit
    def test_repeated_calls_are_identical(self, project_root: Path, write_config):
        write_config({"generators": {"defaults": {"logging": True}, "overrides": {"make:query": {"tracing": 1}}}})
        store = ConfigStore(project_root)
        assert store.get_generator_defaults("make:query") == store.get_generator_defaults("make:query")

    @pytest.mark.unit
    def test_other_command_override_change_has_no_effect(self, project_root: Path, write_config):
        base = {"defaults": {"logging": True}, "overrides": {"make:query": {"tracing": True}}}
        write_config({"generators": base})
        store = ConfigStore(project_root)
        before = store.get_generator_defaults("make:query")

        write_config({"generators": {**base, "overrides": {**base["overrides"], "make:job": {"logging": False}}}})
        store.reset()

        assert store.get_generator_defaults("make:query") == before
