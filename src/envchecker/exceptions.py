from pydantic import BaseModel


class FieldIssue(BaseModel):
    """A single problem found while validating one field."""

    field: str
    kind: str
    message: str
    expected_type: str | None = None

    def __str__(self):
        if self.expected_type:
            return f"{self.field}: {self.message} (expected {self.expected_type})"
        return f"{self.field}: {self.message}"


class EnvCheckerError(Exception):
    """Base exception for all envchecker errors."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(self.detail)


class ValidationError(EnvCheckerError):
    """
    Raised when a mapping does not satisfy a schema.

    Carries one FieldIssue per offending field so callers can report every
    problem at once instead of stopping at the first.
    """

    def __init__(self, issues: list[FieldIssue]):
        self.issues = issues
        lines = "\n".join(f"  {issue}" for issue in issues)
        super().__init__(f"{len(issues)} invalid field(s):\n{lines}")

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]

    def issue_for(self, field: str) -> FieldIssue | None:
        for issue in self.issues:
            if issue.field == field:
                return issue
        return None


class SchemaDefinitionError(EnvCheckerError):
    """Raised when a schema is declared with invalid fields."""


class DuplicateRegistrationError(EnvCheckerError):
    """Raised when a field is registered twice in the same registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Field '{name}' is already registered")


class EnvFileError(EnvCheckerError):
    """Raised when an env file cannot be read."""


class SchemaLoadError(EnvCheckerError):
    """Raised when a schema file cannot be read or parsed."""
