from .exceptions import (
    DuplicateRegistrationError,
    EnvCheckerError,
    FieldIssue,
    SchemaDefinitionError,
    ValidationError,
)
from .registry import EnvMetadata, EnvRegistry, EnvType
from .schema import EnvSchema, EnvVariable, FieldDefinition, ValueType
