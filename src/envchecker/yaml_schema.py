"""
Loading of schemas declared in YAML.

Expected layout::

    variables:
      API_URL:
        type: string
        description: API endpoint URL
        required: true
        group: API
        env_type: runtime
"""

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import EnvCheckerError, SchemaLoadError
from .registry import EnvMetadata, EnvRegistry, EnvType
from .schema import EnvSchema, FieldDefinition, ValueType, coerce_env_value
from .validation import UNGROUPED

logger = structlog.get_logger(__name__)


class YamlVariable(BaseModel):
    type: str
    description: str | None = None
    default: str | bool | int | float | None = None
    required: bool = False
    group: str | None = None
    env_type: EnvType = EnvType.RUNTIME


def map_type_name(type_name: str) -> ValueType:
    """Map a loose type name (`bool`, `int32`, `number`, ...) to a ValueType."""
    type_name = type_name.strip().lower()
    if "bool" in type_name:
        return ValueType.BOOLEAN
    if "int" in type_name:
        return ValueType.INTEGER
    if "number" in type_name or "float" in type_name or "double" in type_name:
        return ValueType.NUMBER
    return ValueType.STRING


def _to_definition(variable: YamlVariable) -> FieldDefinition:
    value_type = map_type_name(variable.type)
    return FieldDefinition(
        value_type=value_type,
        default=coerce_env_value(value_type, variable.default),
        description=variable.description,
        metadata=EnvMetadata(env_type=variable.env_type, group=variable.group or UNGROUPED),
        required=variable.required,
    )


def parse_yaml_schema(
    content: str, registry: EnvRegistry | None = None, source: str = "<string>"
) -> EnvSchema | None:
    try:
        document: Any = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"Failed to parse YAML schema {source}: {e}") from e

    raw_variables = document.get("variables") if isinstance(document, dict) else None
    if not raw_variables:
        return None
    if not isinstance(raw_variables, dict):
        raise SchemaLoadError(f"'variables' in {source} must be a mapping")

    fields: dict[str, FieldDefinition] = {}
    for name, raw in raw_variables.items():
        env_name = str(name).upper()
        if env_name in fields:
            raise SchemaLoadError(f"Variable '{env_name}' is declared twice in {source}")
        try:
            fields[env_name] = _to_definition(YamlVariable.model_validate(raw or {}))
        except PydanticValidationError as e:
            raise SchemaLoadError(f"Invalid variable '{name}' in {source}: {e}") from e

    try:
        schema = EnvSchema(fields, registry=registry)
    except EnvCheckerError as e:
        raise SchemaLoadError(f"Invalid schema {source}: {e.detail}") from e

    logger.info("Loaded YAML schema", file=source, variables=len(schema))
    return schema


def load_yaml_schema(file_path: str | Path, registry: EnvRegistry | None = None) -> EnvSchema | None:
    """
    Load an EnvSchema from a YAML file.

    Returns:
        The schema, or None when the file declares no variables.

    Raises:
        SchemaLoadError: If the file cannot be read or its content is invalid.
    """
    path = Path(file_path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaLoadError(f"Failed to read YAML file: {path}") from e
    return parse_yaml_schema(content, registry=registry, source=str(path))
