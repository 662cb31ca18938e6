"""Environment schema of the application."""

from .registry import EnvMetadata, EnvRegistry, EnvType
from .schema import EnvSchema, FieldDefinition, ValueType

env_registry = EnvRegistry()

schema = EnvSchema(
    {
        "mySecret": FieldDefinition(
            value_type=ValueType.STRING,
            default="defaultValue",
            description="This is a secret value",
            metadata=EnvMetadata(env_type=EnvType.RUNTIME, group="Secrets"),
        ),
        "debug": FieldDefinition(
            value_type=ValueType.BOOLEAN,
            default=False,
            description="Enable debug mode",
            metadata=EnvMetadata(env_type=EnvType.BUILD_TIME, group="Settings"),
        ),
        "apiUrl": FieldDefinition(
            value_type=ValueType.STRING,
            description="API endpoint URL",
            metadata=EnvMetadata(env_type=EnvType.RUNTIME, group="API"),
        ),
    },
    registry=env_registry,
    model_name="AppEnv",
)
