import json
from pathlib import Path

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from .exceptions import EnvCheckerError

CONFIG_FILE_NAME = ".envchecker.json"


class CheckerConfig(BaseSettings):
    """
    Settings of the env checker, read from ENVCHECKER_* environment variables.
    Values from `.envchecker.json` are passed as init arguments and take precedence.
    """

    schema_file: Path | None = Field(default=None)
    env_files: list[str] = Field(default_factory=lambda: [".env"])
    include_process_env: bool = Field(default=False)
    example_file: Path | None = Field(default=None)
    json_logs: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="ENVCHECKER_",
        case_sensitive=False,
        extra="ignore",
    )


def _build_config(source: str, **overrides) -> CheckerConfig:
    try:
        return CheckerConfig(**overrides)
    except (PydanticValidationError, SettingsError) as e:
        raise EnvCheckerError(f"Invalid checker settings in {source}: {e}") from e


def load_config(workspace_root: str | Path) -> CheckerConfig:
    """
    Build the checker settings for a workspace, honouring `.envchecker.json` if present.

    Raises:
        EnvCheckerError: If the file is unreadable, has unknown keys or values of the wrong type.
    """
    config_path = Path(workspace_root) / CONFIG_FILE_NAME
    if not config_path.exists():
        return _build_config("ENVCHECKER_* environment variables")

    try:
        overrides = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise EnvCheckerError(f"Failed to read {config_path}: {e}") from e

    if not isinstance(overrides, dict):
        raise EnvCheckerError(f"{config_path} must contain a JSON object")

    unknown = sorted(set(overrides) - set(CheckerConfig.model_fields))
    if unknown:
        raise EnvCheckerError(f"Unknown keys in {config_path}: {', '.join(unknown)}")
    return _build_config(str(config_path), **overrides)
