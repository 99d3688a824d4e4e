"""Tests for Config loading precedence."""

import pytest
from pydantic import ValidationError

from bumpcheck.config import Config, get_config


def test_defaults():
    config = Config()
    assert config.GIT_EXECUTABLE == "git"
    assert config.DESCRIPTOR_FILE == "pom.xml"
    assert config.VERSION_FIELD == "version"
    assert config.REVISION == "HEAD~0"
    assert config.PROCESS_TIMEOUT_SECONDS == 60.0
    assert config.LOG_LEVEL == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BUMPCHECK_DESCRIPTOR_FILE", "build.xml")
    monkeypatch.setenv("BUMPCHECK_PROCESS_TIMEOUT_SECONDS", "5")
    config = Config()
    assert config.DESCRIPTOR_FILE == "build.xml"
    assert config.PROCESS_TIMEOUT_SECONDS == 5.0


def test_log_level_is_normalized():
    assert Config(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


def test_invalid_log_level():
    with pytest.raises(ValidationError):
        Config(LOG_LEVEL="loud")


def test_yaml_file_fills_unset_fields(tmp_path, monkeypatch):
    config_file = tmp_path / "bumpcheck.yml"
    config_file.write_text("descriptor_file: module/pom.xml\nrevision: v1.0\nlog_level: warning\n")
    monkeypatch.setenv("BUMPCHECK_REVISION", "HEAD~2")

    config = Config(CONFIG_FILE=str(config_file), VERSION_FIELD="rev")

    assert config.DESCRIPTOR_FILE == "module/pom.xml"
    assert config.LOG_LEVEL == "WARNING"
    # environment and constructor beat the file
    assert config.REVISION == "HEAD~2"
    assert config.VERSION_FIELD == "rev"


def test_yaml_file_unknown_keys_are_ignored(tmp_path):
    config_file = tmp_path / "bumpcheck.yml"
    config_file.write_text("colour: blue\ntemp_file_name: old.xml\n")
    config = Config(CONFIG_FILE=str(config_file))
    assert config.TEMP_FILE_NAME == "old.xml"
    assert not hasattr(config, "colour")


def test_broken_yaml_is_ignored(tmp_path):
    config_file = tmp_path / "bumpcheck.yml"
    config_file.write_text("descriptor_file: [unterminated\n")
    assert Config(CONFIG_FILE=str(config_file)).DESCRIPTOR_FILE == "pom.xml"


def test_project_file_in_working_directory(tmp_path, monkeypatch):
    (tmp_path / ".bumpcheck.yml").write_text("descriptor_file: build.xml\n")
    monkeypatch.chdir(tmp_path)
    assert Config().DESCRIPTOR_FILE == "build.xml"


def test_user_file_in_home(isolated_environment, tmp_path, monkeypatch):
    user_dir = isolated_environment / ".bumpcheck"
    user_dir.mkdir()
    (user_dir / "config.yml").write_text("git_executable: /opt/git/bin/git\n")
    monkeypatch.chdir(tmp_path)
    assert Config().GIT_EXECUTABLE == "/opt/git/bin/git"


def test_get_config_drops_none_overrides():
    config = get_config(DESCRIPTOR_FILE=None, REVISION="v2")
    assert config.DESCRIPTOR_FILE == "pom.xml"
    assert config.REVISION == "v2"


def test_badly_typed_yaml_value_is_rejected(tmp_path):
    config_file = tmp_path / "bumpcheck.yml"
    config_file.write_text("process_timeout_seconds: abc\n")
    with pytest.raises(ValidationError):
        Config(CONFIG_FILE=str(config_file))


def test_yaml_log_level_is_validated(tmp_path):
    config_file = tmp_path / "bumpcheck.yml"
    config_file.write_text("log_level: loud\n")
    with pytest.raises(ValidationError):
        Config(CONFIG_FILE=str(config_file))


def test_yaml_values_are_coerced(tmp_path):
    config_file = tmp_path / "bumpcheck.yml"
    config_file.write_text("process_timeout_seconds: '15'\n")
    assert Config(CONFIG_FILE=str(config_file)).PROCESS_TIMEOUT_SECONDS == 15.0
