import pytest

from cmdx import config
from cmdx.errors import ConfigError


def _write(workspace, text):
    marker = workspace.global_root / ".cmd"
    marker.mkdir(exist_ok=True)
    (marker / "config.yaml").write_text(text)


def test_config_defaults_without_file(workspace):
    cfg = config.load_config()
    assert cfg == config.DEFAULT_CONFIG


def test_config_loads_file_values(workspace):
    _write(workspace, "editor: nano\nworkdir: script\nlock: false\n")
    cfg = config.load_config()
    assert cfg["editor"] == "nano"
    assert cfg["workdir"] == "script"
    assert cfg["lock"] is False
    assert cfg["propagate_exit_code"] is False


def test_config_is_cached(workspace):
    first = config.load_config()
    _write(workspace, "editor: nano\n")
    assert config.load_config() is first
    config.clear_cache()
    assert config.load_config()["editor"] == "nano"


def test_env_overrides_file(workspace, monkeypatch):
    _write(workspace, "workdir: script\npropagate_exit_code: false\n")
    monkeypatch.setenv("CMDX_WORKDIR", "current")
    monkeypatch.setenv("CMDX_PROPAGATE_EXIT_CODE", "yes")
    cfg = config.load_config()
    assert cfg["workdir"] == "current"
    assert cfg["propagate_exit_code"] is True


def test_unknown_env_keys_ignored(workspace, monkeypatch):
    monkeypatch.setenv("CMDX_GLOBAL_ROOT_EXTRA", "x")
    assert "global_root_extra" not in config.load_config()


def test_empty_file_uses_defaults(workspace):
    _write(workspace, "")
    assert config.load_config() == config.DEFAULT_CONFIG


def test_non_mapping_rejected(workspace):
    _write(workspace, "- editor\n- nano\n")
    with pytest.raises(ConfigError):
        config.load_config()


def test_invalid_workdir_rejected(workspace):
    _write(workspace, "workdir: elsewhere\n")
    with pytest.raises(ConfigError):
        config.load_config()


def test_malformed_yaml_rejected(workspace):
    _write(workspace, "editor: [unclosed\n")
    with pytest.raises(ConfigError):
        config.load_config()
