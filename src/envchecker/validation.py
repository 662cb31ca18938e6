"""Checks of parsed env files against a schema."""

from pydantic import BaseModel

from .env_file import EnvFileEntry
from .schema import EnvSchema, EnvVariable

UNGROUPED = "Other"


class MissingVariable(BaseModel):
    variable: EnvVariable

    @property
    def message(self) -> str:
        message = f"Missing required environment variable: '{self.variable.name}'"
        if self.variable.description:
            message += f"\n  Description: {self.variable.description}"
        if self.variable.default is not None:
            message += f"\n  Default: {self.variable.default}"
        return message


class UnusedVariable(BaseModel):
    entry: EnvFileEntry

    @property
    def message(self) -> str:
        return f"Environment variable '{self.entry.name}' is not defined in any schema"


class CheckResult(BaseModel):
    missing: list[MissingVariable] = []
    unused: list[UnusedVariable] = []

    @property
    def ok(self) -> bool:
        return not self.missing


def check_env(schema: EnvSchema, entries: list[EnvFileEntry]) -> CheckResult:
    """
    Compare env entries with a schema.

    A required variable is missing when no entry declares it at all; an entry
    with an empty value still counts as declared. Entries with no matching
    schema field are reported as unused.
    """
    declared = {entry.name for entry in entries}

    missing = [
        MissingVariable(variable=variable)
        for variable in schema.variables()
        if not variable.optional and variable.name not in declared
    ]
    unused = [UnusedVariable(entry=entry) for entry in entries if entry.name not in schema]

    return CheckResult(missing=missing, unused=unused)


def group_variables(variables: list[EnvVariable]) -> list[tuple[str, list[EnvVariable]]]:
    """Group variables by registry group, sorted by group then by name."""
    groups: dict[str, list[EnvVariable]] = {}
    for variable in variables:
        groups.setdefault(variable.group or UNGROUPED, []).append(variable)

    return [
        (group, sorted(members, key=lambda v: v.name))
        for group, members in sorted(groups.items())
    ]
