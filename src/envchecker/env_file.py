"""Parsing of dotenv-style files."""

import re
from pathlib import Path

import structlog
from pydantic import BaseModel

from .exceptions import EnvFileError

logger = structlog.get_logger(__name__)

EXPORT_PREFIX = re.compile(r"^\s*export\s+")
VARIABLE_LINE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$")

_ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", '"': '"'}


class EnvFileEntry(BaseModel):
    name: str
    value: str | None
    line: int
    file_path: str


def parse_env_value(value: str) -> str:
    """Strip quotes from a raw value and resolve \\n, \\t and \\\\ escapes."""
    value = value.strip()

    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        stripped = value[1:-1]
        return stripped.replace(r"\n", "\n").replace(r"\t", "\t").replace("\\\\", "\\")

    if value.startswith('"'):
        # Unterminated double quote: read to end of line.
        result = []
        in_escape = False
        for char in value[1:]:
            if in_escape:
                result.append(_ESCAPES.get(char, char))
                in_escape = False
            elif char == "\\":
                in_escape = True
            else:
                result.append(char)
        return "".join(result)

    return value


def parse_env_text(text: str, file_path: str = "<string>") -> list[EnvFileEntry]:
    """
    Parse env file contents into entries.

    Blank lines and comments are skipped, a leading `export ` is ignored and
    lines that are not `NAME=value` assignments are dropped. Empty values,
    `''` and `""` are recorded as None. Line numbers are 0-based.
    """
    entries = []
    for line_num, line in enumerate(text.splitlines()):
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        line = EXPORT_PREFIX.sub("", line, count=1)
        match = VARIABLE_LINE.match(line)
        if not match:
            continue

        name, raw_value = match.group(1), match.group(2).strip()
        if raw_value in ("", "''", '""'):
            value = None
        else:
            value = parse_env_value(raw_value)

        entries.append(
            EnvFileEntry(name=name, value=value, line=line_num, file_path=file_path)
        )
    return entries


def parse_env_file(file_path: str | Path) -> list[EnvFileEntry]:
    path = Path(file_path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise EnvFileError(f"Failed to read env file: {path}") from e

    entries = parse_env_text(text, str(path))
    logger.debug("Parsed env file", file=str(path), entries=len(entries))
    return entries


def merge_env_files(entry_lists: list[list[EnvFileEntry]]) -> list[EnvFileEntry]:
    """Merge entries from several files; the first occurrence of a name wins."""
    merged = []
    seen = set()
    for entries in entry_lists:
        for entry in entries:
            if entry.name not in seen:
                seen.add(entry.name)
                merged.append(entry)
    return merged


def as_mapping(entries: list[EnvFileEntry]) -> dict[str, str]:
    return {entry.name: entry.value for entry in entries if entry.value is not None}
