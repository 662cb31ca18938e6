"""Workspace-level env check: resolve files, load the schema and compare."""

import glob
import os
from pathlib import Path

import structlog
from pydantic import BaseModel

from . import app_schema
from .config import CheckerConfig
from .env_file import EnvFileEntry, as_mapping, merge_env_files, parse_env_file
from .exceptions import FieldIssue, SchemaLoadError, ValidationError
from .schema import EnvSchema
from .validation import CheckResult, check_env
from .yaml_schema import load_yaml_schema

logger = structlog.get_logger(__name__)

PROCESS_ENV_SOURCE = "<environment>"


class CheckReport(BaseModel):
    env_files: list[str]
    result: CheckResult
    invalid: list[FieldIssue] = []
    empty: list[str] = []

    @property
    def ok(self) -> bool:
        return self.result.ok and not self.invalid


def resolve_env_files(workspace_root: Path, patterns: list[str]) -> list[Path]:
    """
    Expand configured env file names or glob patterns relative to the workspace.
    Absolute patterns are used as given. Falls back to `<root>/.env` when
    nothing matches.
    """
    env_files: list[Path] = []
    for pattern in patterns:
        if not pattern:
            continue
        candidate = workspace_root / pattern
        if candidate.is_file():
            env_files.append(candidate)
            continue
        matches = sorted(glob.glob(str(candidate), recursive=True))
        env_files.extend(Path(p) for p in matches if Path(p).is_file())

    if not env_files:
        default_path = workspace_root / ".env"
        if default_path.is_file():
            env_files.append(default_path)
    return env_files


def load_schema(workspace_root: Path, config: CheckerConfig) -> EnvSchema:
    if config.schema_file is None:
        return app_schema.schema

    schema = load_yaml_schema(workspace_root / config.schema_file)
    if schema is None:
        raise SchemaLoadError(f"Schema file {config.schema_file} declares no variables")
    return schema


def _process_env_entries(schema: EnvSchema) -> list[EnvFileEntry]:
    return [
        EnvFileEntry(name=name, value=value, line=0, file_path=PROCESS_ENV_SOURCE)
        for name, value in os.environ.items()
        if name in schema
    ]


def run_check(workspace_root: str | Path, config: CheckerConfig) -> CheckReport:
    """
    Check the workspace env files against the configured schema.

    Missing and unknown variables come from the declared names; values that
    are present but do not parse as the field type are reported as invalid.
    Required variables declared with an empty value are listed in `empty`;
    they do not fail the check.
    """
    root = Path(workspace_root)
    schema = load_schema(root, config)
    env_files = resolve_env_files(root, config.env_files)

    entry_lists = [parse_env_file(path) for path in env_files]
    if config.include_process_env:
        entry_lists.append(_process_env_entries(schema))
    entries = merge_env_files(entry_lists)

    result = check_env(schema, entries)

    invalid: list[FieldIssue] = []
    empty: list[str] = []
    try:
        schema.load_env(as_mapping(entries))
    except ValidationError as e:
        invalid = [issue for issue in e.issues if issue.kind != "missing"]
        declared = {entry.name for entry in entries}
        empty = [
            issue.field
            for issue in e.issues
            if issue.kind == "missing" and issue.field in declared
        ]

    logger.info(
        "Env check finished",
        env_files=len(env_files),
        missing=len(result.missing),
        unused=len(result.unused),
        invalid=len(invalid),
        empty=len(empty),
    )
    return CheckReport(
        env_files=[str(path) for path in env_files],
        result=result,
        invalid=invalid,
        empty=empty,
    )
