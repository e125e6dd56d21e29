"""Tests for config/settings: YAML loading, defaults from the example file, validation rules."""

from pathlib import Path

import pytest

from intersection.config import settings
from intersection.config.settings import (
    EXAMPLE_CONFIG_PATH,
    CoordinatorConfig,
    _deep_merge,
    coordinator_config_from_dict,
    get_logging_config,
    load_config,
    read_config,
    validate_config,
)
from intersection.core.state.enums import Color, Position
from intersection.errors import InvalidConfigError


class TestExampleConfig:
    def test_example_config_is_valid(self, config):
        out = coordinator_config_from_dict(config)
        validate_config(out)
        assert out.cycle_duration > out.amber_duration >= 0

    def test_empty_dict_uses_example_defaults(self):
        out = coordinator_config_from_dict({})
        assert out.amber_duration == 5
        assert out.cycle_duration == 30
        assert dict(out.initial_signals) == {Position.NORTH: Color.GREEN, Position.EAST: Color.RED}
        assert out.initial_elapsed_time == 0
        assert out.all_red_recovery is None

    def test_logging_defaults(self):
        out = get_logging_config({})
        assert out["level"] == "INFO"
        assert out["metrics_every_ticks"] == 60

    def test_example_ships_inside_package(self):
        assert EXAMPLE_CONFIG_PATH.parent == Path(settings.__file__).resolve().parent
        assert EXAMPLE_CONFIG_PATH.is_file()

    def test_example_declared_as_package_data(self, project_root):
        tomllib = pytest.importorskip("tomllib")
        with open(project_root / "pyproject.toml", "rb") as f:
            data = tomllib.load(f)
        assert EXAMPLE_CONFIG_PATH.name in data["tool"]["setuptools"]["package-data"]["intersection.config"]

    def test_defaults_load_from_any_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("INTERSECTION_CONFIG", raising=False)
        raw, path = read_config()
        assert path == str(EXAMPLE_CONFIG_PATH)
        assert "intersection" in raw
        assert load_config().cycle_duration == 30


class TestCoordinatorConfigFromDict:
    def test_overrides(self):
        cfg = {
            "intersection": {
                "amber_duration": 3,
                "cycle_duration": 8,
                "initial_elapsed_time": 2,
                "initial_signals": {"north": "red", "east": "amber"},
                "all_red_recovery": "east",
            }
        }
        out = coordinator_config_from_dict(cfg)
        assert out.amber_duration == 3
        assert out.cycle_duration == 8
        assert out.initial_elapsed_time == 2
        assert out.initial_signals[Position.EAST] == Color.AMBER
        assert out.initial_signals[Position.NORTH] == Color.RED
        assert out.all_red_recovery == Position.EAST
        assert out.amber_start == 5

    def test_initial_signals_replace_example_and_missing_are_red(self):
        out = coordinator_config_from_dict({"intersection": {"initial_signals": {"east": "green"}}})
        assert dict(out.initial_signals) == {Position.NORTH: Color.RED, Position.EAST: Color.GREEN}
        validate_config(out)

    def test_names_case_insensitive(self):
        out = coordinator_config_from_dict({"intersection": {"initial_signals": {"EAST": "Green", "north": "RED"}}})
        assert out.initial_signals[Position.EAST] == Color.GREEN

    def test_unknown_position_rejected(self):
        with pytest.raises(InvalidConfigError, match="Unknown position"):
            coordinator_config_from_dict({"intersection": {"initial_signals": {"south": "green"}}})

    def test_unknown_color_rejected(self):
        with pytest.raises(InvalidConfigError, match="Unknown color"):
            coordinator_config_from_dict({"intersection": {"initial_signals": {"east": "blue"}}})

    def test_non_integer_duration_rejected(self):
        with pytest.raises(InvalidConfigError, match="cycle_duration"):
            coordinator_config_from_dict({"intersection": {"cycle_duration": "soon"}})

    def test_bool_duration_rejected(self):
        with pytest.raises(InvalidConfigError, match="amber_duration"):
            coordinator_config_from_dict({"intersection": {"amber_duration": True}})


class TestValidateConfig:
    def _cfg(self, **kwargs) -> CoordinatorConfig:
        base = dict(
            amber_duration=5,
            cycle_duration=30,
            initial_signals={Position.EAST: Color.RED, Position.NORTH: Color.GREEN},
            initial_elapsed_time=0,
        )
        base.update(kwargs)
        return CoordinatorConfig(**base)

    def test_valid(self):
        validate_config(self._cfg())

    def test_zero_cycle(self):
        with pytest.raises(InvalidConfigError, match="non-zero cycle"):
            validate_config(self._cfg(amber_duration=0, cycle_duration=0))

    def test_amber_not_less_than_cycle(self):
        with pytest.raises(InvalidConfigError, match="less than the total cycle"):
            validate_config(self._cfg(amber_duration=31))

    def test_two_non_red(self):
        with pytest.raises(InvalidConfigError, match="maximum of 1 light"):
            validate_config(self._cfg(initial_signals={Position.EAST: Color.AMBER, Position.NORTH: Color.GREEN}))

    def test_string_keys_coerced(self):
        cfg = self._cfg(initial_signals={"east": "red", "north": "green"}, all_red_recovery="north")
        validate_config(cfg)
        assert cfg.initial_signals[Position.NORTH] == Color.GREEN
        assert cfg.all_red_recovery == Position.NORTH

    def test_unknown_recovery_position(self):
        with pytest.raises(InvalidConfigError, match="all_red_recovery"):
            validate_config(self._cfg(all_red_recovery="south"))

    def test_config_is_immutable(self):
        cfg = self._cfg()
        with pytest.raises(AttributeError):
            cfg.cycle_duration = 10
        with pytest.raises(TypeError):
            cfg.initial_signals[Position.EAST] = Color.GREEN


class TestReadConfig:
    def test_read_explicit_path(self, tmp_path):
        p = tmp_path / "c.yaml"
        p.write_text("intersection:\n  cycle_duration: 12\n  amber_duration: 2\n", encoding="utf-8")
        raw, path = read_config(str(p))
        assert raw["intersection"]["cycle_duration"] == 12
        assert path == str(p.resolve())

    def test_env_override(self, tmp_path, monkeypatch):
        p = tmp_path / "env.yaml"
        p.write_text("intersection:\n  cycle_duration: 40\n", encoding="utf-8")
        monkeypatch.setenv("INTERSECTION_CONFIG", str(p))
        raw, _ = read_config()
        assert raw["intersection"]["cycle_duration"] == 40

    def test_missing_file_falls_back_to_example(self, tmp_path, caplog):
        raw, path = read_config(str(tmp_path / "nope.yaml"))
        assert path.endswith("config.yaml.example")
        assert "intersection" in raw
        assert "Config file not found" in caplog.text

    def test_load_config(self, tmp_path):
        p = tmp_path / "c.yaml"
        p.write_text(
            "intersection:\n  amber_duration: 1\n  cycle_duration: 4\n"
            "  initial_signals: {east: red, north: green}\n  initial_elapsed_time: 3\n",
            encoding="utf-8",
        )
        out = load_config(str(p))
        assert (out.amber_duration, out.cycle_duration, out.initial_elapsed_time) == (1, 4, 3)


def test_deep_merge_override_wins():
    out = _deep_merge({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}, "c": 4})
    assert out == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
