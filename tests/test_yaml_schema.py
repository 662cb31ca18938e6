import pytest

from envchecker.exceptions import SchemaLoadError, ValidationError
from envchecker.registry import EnvType
from envchecker.schema import ValueType
from envchecker.validation import check_env
from envchecker.yaml_schema import load_yaml_schema, map_type_name, parse_yaml_schema

SCHEMA_YAML = """\
variables:
  api_url:
    type: string
    description: API endpoint URL
    required: true
    group: API
  debug:
    type: bool
    default: false
    env_type: build-time
  port:
    type: int32
    default: "8080"
"""


def test_load_yaml_schema(write_file):
    schema = load_yaml_schema(write_file("env.schema.yml", SCHEMA_YAML))

    assert list(schema) == ["API_URL", "DEBUG", "PORT"]
    assert schema["API_URL"].is_required
    assert schema["DEBUG"].value_type is ValueType.BOOLEAN
    assert schema["PORT"].default == 8080

    assert schema.registry["API_URL"].group == "API"
    assert schema.registry["DEBUG"].group == "Other"
    assert schema.registry["DEBUG"].env_type is EnvType.BUILD_TIME
    assert schema.registry["PORT"].env_type is EnvType.RUNTIME


def test_loaded_schema_validates():
    schema = parse_yaml_schema(SCHEMA_YAML)

    config = schema.load_env({"API_URL": "https://x", "PORT": "9000"})
    assert config.PORT == 9000
    assert config.DEBUG is False

    with pytest.raises(ValidationError):
        schema.load_env({"PORT": "9000"})


def test_unrequired_variable_without_default_is_optional():
    schema = parse_yaml_schema("variables:\n  token:\n    type: string\n")
    assert not schema["TOKEN"].is_required
    assert schema.validate({}).TOKEN is None


@pytest.mark.parametrize("content", ["", "other: 1\n", "variables: {}\n"])
def test_no_variables_returns_none(content):
    assert parse_yaml_schema(content) is None


@pytest.mark.parametrize(
    "content",
    [
        "variables: [\n",
        "variables:\n  - a\n  - b\n",
        "variables:\n  flag:\n    type: bool\n    default: maybe\n",
        "variables:\n  flag:\n    type: bool\n    env_type: sometimes\n",
        "variables:\n  flag:\n    description: no type\n",
        "variables:\n  flag:\n    type: string\n  FLAG:\n    type: string\n",
    ],
)
def test_invalid_schema_raises(content):
    with pytest.raises(SchemaLoadError):
        parse_yaml_schema(content)


def test_missing_file_raises(tmp_path):
    with pytest.raises(SchemaLoadError, match="Failed to read YAML file"):
        load_yaml_schema(tmp_path / "env.schema.yml")


@pytest.mark.parametrize(
    "type_name, expected",
    [
        ("Boolean", ValueType.BOOLEAN),
        ("uint64", ValueType.INTEGER),
        ("number", ValueType.NUMBER),
        ("double", ValueType.NUMBER),
        ("str", ValueType.STRING),
    ],
)
def test_map_type_name(type_name, expected):
    assert map_type_name(type_name) == expected


def test_non_utf8_file_raises(tmp_path):
    path = tmp_path / "env.schema.yml"
    path.write_bytes(b"variables:\n  name:\n    type: string\n    default: caf\xe9\n")
    with pytest.raises(SchemaLoadError, match="Failed to read YAML file"):
        load_yaml_schema(path)


def test_required_flag_holds_with_default():
    """`required: true` keeps a variable required even when a default is given."""
    schema = parse_yaml_schema(
        "variables:\n  port:\n    type: integer\n    default: '8080'\n    required: true\n"
    )

    assert schema["PORT"].is_required
    assert [m.variable.name for m in check_env(schema, []).missing] == ["PORT"]
    with pytest.raises(ValidationError):
        schema.load_env({})


def test_leading_underscore_names_are_rejected():
    with pytest.raises(SchemaLoadError, match="_INTERNAL"):
        parse_yaml_schema("variables:\n  _internal:\n    type: string\n")
