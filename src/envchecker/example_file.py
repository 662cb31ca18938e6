"""Generation of `.env.example` content from schema variables."""

from pathlib import Path

import structlog

from .registry import EnvType
from .schema import EnvVariable
from .validation import group_variables

logger = structlog.get_logger(__name__)


def format_entry(variable: EnvVariable) -> str:
    """Format one variable; optional variables are commented out."""
    result = ""
    if variable.description:
        result += f"# {variable.description}\n"
    if variable.optional:
        result += "#"
    result += f"{variable.name}={variable.default or ''}\n"
    return result


def _select(variables: list[EnvVariable], env_type: EnvType | None) -> list[EnvVariable]:
    if env_type is None:
        return variables
    return [v for v in variables if v.env_type == env_type]


def generate_example(variables: list[EnvVariable], env_type: EnvType | None = None) -> str:
    """
    Render a full `.env.example` document.

    Args:
        variables: Schema variables to include.
        env_type: Only include variables of this classification when given.

    Returns:
        Grouped content, groups separated by a blank line, without trailing newline.
    """
    content = ""
    for group, members in group_variables(_select(variables, env_type)):
        content += f"# {group}\n"
        for variable in members:
            content += format_entry(variable)
        content += "\n"
    return content.rstrip("\n")


def generate_missing_block(variables: list[EnvVariable]) -> str:
    """Render entries for appending to an existing env file."""
    content = ""
    for group, members in group_variables(variables):
        content += f"\n# {group}\n"
        for variable in members:
            content += format_entry(variable)
    return content.removeprefix("\n")


def write_example(
    path: str | Path, variables: list[EnvVariable], env_type: EnvType | None = None
) -> Path:
    path = Path(path)
    path.write_text(generate_example(variables, env_type) + "\n", encoding="utf-8")
    logger.info("Wrote example env file", file=str(path), variables=len(variables))
    return path
