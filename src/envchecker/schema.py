"""
Declarative environment schema.

A schema is an ordered mapping of field name to FieldDefinition. Building an
EnvSchema validates the definitions, registers their metadata into an
EnvRegistry and compiles a strict pydantic model used for validation.
"""

import math
from collections.abc import Iterator, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional

import structlog
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    create_model,
)
from pydantic import ValidationError as PydanticValidationError

from .exceptions import (
    DuplicateRegistrationError,
    FieldIssue,
    SchemaDefinitionError,
    ValidationError,
)
from .registry import EnvMetadata, EnvRegistry, EnvType

logger = structlog.get_logger(__name__)

TRUE_VALUES = {"true", "1"}
FALSE_VALUES = {"false", "0"}


class ValueType(str, Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"


_STRICT_TYPES: dict[ValueType, Any] = {
    ValueType.STRING: StrictStr,
    ValueType.BOOLEAN: StrictBool,
    ValueType.INTEGER: StrictInt,
    ValueType.NUMBER: StrictFloat,
}

_DEFAULT_TYPES: dict[ValueType, tuple[type, ...]] = {
    ValueType.STRING: (str,),
    ValueType.BOOLEAN: (bool,),
    ValueType.INTEGER: (int,),
    ValueType.NUMBER: (int, float),
}


class FieldDefinition(BaseModel):
    """One configurable value: its type, optional default, description and metadata."""

    model_config = ConfigDict(frozen=True)

    value_type: ValueType
    default: str | bool | int | float | None = None
    description: str | None = None
    metadata: EnvMetadata | None = None
    optional: bool = False
    required: bool | None = None

    @property
    def is_required(self) -> bool:
        """An explicit `required` flag wins; otherwise a field without default or `optional` is required."""
        if self.required is not None:
            return self.required
        return self.default is None and not self.optional


class EnvVariable(BaseModel):
    """Flattened, display-oriented view of a schema field."""

    model_config = ConfigDict(frozen=True)

    name: str
    value_type: ValueType
    description: str | None = None
    default: str | None = None
    optional: bool = False
    group: str | None = None
    env_type: EnvType | None = None


def format_default(value: Any) -> str | None:
    """Render a default the way it would be written in an env file."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def coerce_env_value(value_type: ValueType, raw: Any) -> Any:
    """
    Convert a raw environment string to the field's type where unambiguous.

    Text that does not parse is returned unchanged so strict validation
    reports it against the expected type. Digit separators (`1_000`) and
    non-finite numbers (`nan`, `inf`) are not accepted.
    """
    if not isinstance(raw, str):
        return raw

    if value_type == ValueType.BOOLEAN:
        lowered = raw.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        return raw

    if value_type == ValueType.INTEGER:
        if "_" in raw:
            return raw
        try:
            return int(raw.strip())
        except ValueError:
            return raw

    if value_type == ValueType.NUMBER:
        if "_" in raw:
            return raw
        try:
            number = float(raw.strip())
        except ValueError:
            return raw
        return number if math.isfinite(number) else raw

    return raw


def _check_definition(name: str, definition: FieldDefinition) -> None:
    if not name.isidentifier() or name.startswith("_"):
        raise SchemaDefinitionError(f"Invalid field name: '{name}'")
    if hasattr(BaseModel, name):
        raise SchemaDefinitionError(f"Field name '{name}' shadows a model attribute")

    default = definition.default
    if default is None:
        return
    allowed = _DEFAULT_TYPES[definition.value_type]
    is_bool_mismatch = isinstance(default, bool) and definition.value_type != ValueType.BOOLEAN
    if is_bool_mismatch or not isinstance(default, allowed):
        raise SchemaDefinitionError(
            f"Default for '{name}' must be of type {definition.value_type.value}, "
            f"got {default!r}"
        )


class EnvSchema:
    """
    Validates raw mappings against declared field types.

    Absent optional fields take their defaults, unknown keys are ignored and
    every offending field is reported in a single ValidationError.
    """

    def __init__(
        self,
        fields: Mapping[str, FieldDefinition],
        registry: EnvRegistry | None = None,
        model_name: str = "EnvConfig",
    ):
        for name, definition in fields.items():
            _check_definition(name, definition)

        self._fields: dict[str, FieldDefinition] = dict(fields)
        self._registry = registry if registry is not None else EnvRegistry()

        for name, definition in self._fields.items():
            if definition.metadata is not None and name in self._registry:
                raise DuplicateRegistrationError(name)
        for name, definition in self._fields.items():
            if definition.metadata is not None:
                self._registry.register(name, definition.metadata)

        self._model = self._build_model(model_name)
        logger.debug("Environment schema built", model=model_name, fields=len(self._fields))

    def _build_model(self, model_name: str) -> type[BaseModel]:
        field_specs: dict[str, Any] = {}
        for name, definition in self._fields.items():
            annotation = _STRICT_TYPES[definition.value_type]
            if definition.is_required:
                field_specs[name] = (
                    annotation,
                    Field(..., description=definition.description),
                )
            elif definition.default is None:
                field_specs[name] = (
                    Optional[annotation],
                    Field(default=None, description=definition.description),
                )
            else:
                field_specs[name] = (
                    annotation,
                    Field(default=definition.default, description=definition.description),
                )

        return create_model(
            model_name,
            __config__=ConfigDict(frozen=True, extra="ignore", protected_namespaces=()),
            **field_specs,
        )

    @property
    def fields(self) -> Mapping[str, FieldDefinition]:
        return MappingProxyType(self._fields)

    @property
    def registry(self) -> EnvRegistry:
        return self._registry

    @property
    def model(self) -> type[BaseModel]:
        return self._model

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __getitem__(self, name: str) -> FieldDefinition:
        return self._fields[name]

    def validate(self, data: Mapping[str, Any]) -> BaseModel:
        """
        Validate a raw mapping into a typed, immutable configuration object.

        Args:
            data: Untyped key/value mapping, e.g. from a loader.

        Returns:
            Instance of the compiled model; attributes are the field names.

        Raises:
            ValidationError: If required fields are absent or values have the wrong type.
        """
        try:
            return self._model.model_validate(dict(data))
        except PydanticValidationError as exc:
            raise ValidationError(self._issues_from(exc)) from exc

    def load_env(self, environ: Mapping[str, str]) -> BaseModel:
        """Validate a string mapping such as os.environ or a parsed env file."""
        coerced = {
            name: coerce_env_value(self._fields[name].value_type, value)
            for name, value in environ.items()
            if name in self._fields
        }
        return self.validate(coerced)

    def variables(self) -> list[EnvVariable]:
        result = []
        for name, definition in self._fields.items():
            metadata = self._registry.get(name)
            result.append(
                EnvVariable(
                    name=name,
                    value_type=definition.value_type,
                    description=definition.description,
                    default=format_default(definition.default),
                    optional=not definition.is_required,
                    group=metadata.group if metadata else None,
                    env_type=metadata.env_type if metadata else None,
                )
            )
        return result

    def _issues_from(self, exc: PydanticValidationError) -> list[FieldIssue]:
        issues: dict[str, FieldIssue] = {}
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "<root>"
            if field in issues:
                continue
            definition = self._fields.get(field)
            expected = definition.value_type.value if definition else None
            if error["type"] == "missing":
                issues[field] = FieldIssue(
                    field=field,
                    kind="missing",
                    message="Required field is missing",
                    expected_type=expected,
                )
            else:
                issues[field] = FieldIssue(
                    field=field,
                    kind="type",
                    message=error["msg"],
                    expected_type=expected,
                )
        return list(issues.values())
