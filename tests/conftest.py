import pytest

from envchecker.registry import EnvMetadata, EnvRegistry, EnvType
from envchecker.schema import EnvSchema, FieldDefinition, ValueType


@pytest.fixture
def registry() -> EnvRegistry:
    return EnvRegistry()


@pytest.fixture
def service_schema(registry: EnvRegistry) -> EnvSchema:
    """
    A small schema covering every value type, with one ungrouped
    optional field that has no default.
    """
    return EnvSchema(
        {
            "SERVICE_URL": FieldDefinition(
                value_type=ValueType.STRING,
                description="Base URL of the service",
                metadata=EnvMetadata(env_type=EnvType.RUNTIME, group="API"),
            ),
            "WORKERS": FieldDefinition(
                value_type=ValueType.INTEGER,
                default=4,
                metadata=EnvMetadata(env_type=EnvType.RUNTIME, group="Settings"),
            ),
            "RATIO": FieldDefinition(
                value_type=ValueType.NUMBER,
                default=0.5,
                metadata=EnvMetadata(env_type=EnvType.BUILD_TIME, group="Settings"),
            ),
            "VERBOSE": FieldDefinition(
                value_type=ValueType.BOOLEAN,
                default=False,
                metadata=EnvMetadata(env_type=EnvType.BUILD_TIME, group="Settings"),
            ),
            "TRACE_ID": FieldDefinition(value_type=ValueType.STRING, optional=True),
        },
        registry=registry,
    )


@pytest.fixture
def write_file(tmp_path):
    def _write(name: str, content: str):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
