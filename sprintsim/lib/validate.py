"""
Schema validation for simulation config.

Balance values are validated against JSON Schemas shipped inside the
package. Fails hard with clear errors when data doesn't match.
"""

import json
from pathlib import Path

import jsonschema


class ValidationError(Exception):
    """Schema validation failed."""

    def __init__(self, schema_name: str, message: str, path: str = None):
        self.schema_name = schema_name
        self.path = path
        super().__init__(f"[{schema_name}] {message}" + (f" at {path}" if path else ""))


# Cache loaded schemas
_schema_cache: dict[str, dict] = {}


def _get_schemas_dir() -> Path:
    """Get path to the packaged schemas directory."""
    return Path(__file__).parent.parent / "schemas"


def _load_schema(schema_name: str) -> dict:
    """Load schema by name, with caching."""
    if schema_name not in _schema_cache:
        schema_path = _get_schemas_dir() / f"{schema_name}.schema.json"
        if not schema_path.exists():
            raise ValidationError(schema_name, f"Schema file not found: {schema_path}")
        _schema_cache[schema_name] = json.loads(schema_path.read_text())
    return _schema_cache[schema_name]


def validate(data: dict, schema_name: str) -> None:
    """
    Validate data against named schema.

    Args:
        data: Dictionary to validate
        schema_name: Schema name (e.g., "balance")

    Raises:
        ValidationError: If validation fails
    """
    schema = _load_schema(schema_name)

    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        path = ".".join(str(p) for p in e.absolute_path) if e.absolute_path else "(root)"
        raise ValidationError(schema_name, e.message, path) from None


def validate_range(value: list, schema_name: str, path: str) -> None:
    """Check a [min, max] pair is ordered. JSON Schema can't express this."""
    if value[0] > value[1]:
        raise ValidationError(schema_name, f"range {value} has min > max", path)


def validate_archetype(key: str, data: dict) -> None:
    """Validate one archetype override from archetypes.yaml.

    Raises:
        ValidationError: If the entry is malformed or a range is inverted
    """
    validate(data, "archetype")
    for field_name in ("velocity_range", "cost_range"):
        if field_name in data:
            validate_range(data[field_name], "archetype", f"{key}.{field_name}")
