import json
from pathlib import Path

import pytest

from envchecker.config import CheckerConfig, load_config
from envchecker.exceptions import EnvCheckerError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("SCHEMA_FILE", "ENV_FILES", "INCLUDE_PROCESS_ENV", "EXAMPLE_FILE", "JSON_LOGS", "LOG_LEVEL"):
        monkeypatch.delenv(f"ENVCHECKER_{name}", raising=False)


def test_defaults(tmp_path):
    config = load_config(tmp_path)
    assert config.schema_file is None
    assert config.env_files == [".env"]
    assert config.include_process_env is False
    assert config.log_level == "INFO"


def test_environment_variables(monkeypatch, tmp_path):
    monkeypatch.setenv("ENVCHECKER_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("ENVCHECKER_ENV_FILES", '[".env", ".env.local"]')
    monkeypatch.setenv("ENVCHECKER_JSON_LOGS", "true")

    config = load_config(tmp_path)

    assert config.log_level == "DEBUG"
    assert config.env_files == [".env", ".env.local"]
    assert config.json_logs is True


def test_config_file_overrides_environment(monkeypatch, write_file, tmp_path):
    monkeypatch.setenv("ENVCHECKER_LOG_LEVEL", "DEBUG")
    write_file(
        ".envchecker.json",
        json.dumps({"schema_file": "env.schema.yml", "log_level": "WARNING"}),
    )

    config = load_config(tmp_path)

    assert config.schema_file == Path("env.schema.yml")
    assert config.log_level == "WARNING"


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_invalid_config_file(write_file, tmp_path, content):
    write_file(".envchecker.json", content)
    with pytest.raises(EnvCheckerError):
        load_config(tmp_path)


def test_direct_construction():
    assert CheckerConfig(env_files=["*.env"]).env_files == ["*.env"]


def test_wrong_type_in_config_file(write_file, tmp_path):
    write_file(".envchecker.json", json.dumps({"env_files": 5}))
    with pytest.raises(EnvCheckerError, match="Invalid checker settings"):
        load_config(tmp_path)


def test_wrong_type_in_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("ENVCHECKER_JSON_LOGS", "sometimes")
    with pytest.raises(EnvCheckerError, match="Invalid checker settings"):
        load_config(tmp_path)


def test_malformed_list_in_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("ENVCHECKER_ENV_FILES", "[not json")
    with pytest.raises(EnvCheckerError):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "overrides",
    [{"env_file": [".env"]}, {"schema_files": ["env.schema.yml"], "auto_discover": True}],
)
def test_unknown_keys_in_config_file(write_file, tmp_path, overrides):
    write_file(".envchecker.json", json.dumps(overrides))
    with pytest.raises(EnvCheckerError, match="Unknown keys"):
        load_config(tmp_path)


def test_non_utf8_config_file(tmp_path):
    (tmp_path / ".envchecker.json").write_bytes(b'{"log_level": "caf\xe9"}')
    with pytest.raises(EnvCheckerError, match="Failed to read"):
        load_config(tmp_path)
