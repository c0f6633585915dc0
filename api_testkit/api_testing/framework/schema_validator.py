# ================================================================================
# Schema Validator
# ================================================================================
#
# Validates decoded JSON payloads against a declarative structural schema and
# reports every violation found in a single pass.
#
# Key Features:
#   - Required field checks with dotted paths (data.user.email)
#   - Type checks per field (a mismatch stops further checks on that field)
#   - String length, pattern and enum rules
#   - Numeric finiteness and range rules
#   - Recursive validation of nested objects and array items (items[2].price)
#   - Allure integration for test reporting
#
# Usage:
#   validator = SchemaValidator()
#   result = validator.validate(response.data, USER_SCHEMA)
#   assert result.valid, result.errors
#
# ================================================================================

import json
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TypedDict

import allure
from loguru import logger


class SchemaNode(TypedDict, total=False):
    """
    One declarative constraint node.

    Schemas are plain dicts; this type only documents the recognized keys.
    """
    type: str
    required: List[str]
    properties: Dict[str, "SchemaNode"]
    items: "SchemaNode"
    minLength: int
    maxLength: int
    pattern: str
    enum: List[Any]
    minimum: float
    maximum: float


@dataclass
class ValidationResult:
    """
    Outcome of a single validate() call.

    Attributes:
        valid: True when no violation was found
        errors: Human-readable violations in discovery order
    """
    valid: bool
    errors: List[str] = field(default_factory=list)


def _type_name(value: Any) -> str:
    """Map a decoded JSON value to its schema type name."""
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if value is None:
        return "null"
    return type(value).__name__


def _join_path(parent: str, child: str) -> str:
    return f"{parent}.{child}" if parent else child


def _display(path: str) -> str:
    return path or "<root>"


class SchemaValidator:
    """
    Recursive structural validator.

    The validator keeps no state between calls and never mutates the schema,
    so one instance can be shared by every service in a test run.

    Example:
        schema = {
            "type": "object",
            "required": ["id", "email"],
            "properties": {
                "id": {"type": "number", "minimum": 1},
                "email": {"type": "string", "pattern": "^[^@]+@[^@]+$"},
            },
        }
        result = SchemaValidator().validate({"id": 0, "email": "bad"}, schema)
        # result.errors == ["id is below minimum: 1",
        #                   "email does not match pattern: ^[^@]+@[^@]+$"]
    """

    def validate(self, data: Any, schema: SchemaNode) -> ValidationResult:
        """
        Validate data against schema.

        Never raises: internal failures are reported as one more error string.
        """
        errors: List[str] = []

        try:
            root_type = schema.get("type") if isinstance(schema, dict) else None
            if root_type is None or (root_type == "object" and isinstance(data, dict)):
                self._validate_object(data, schema, "", errors)
            else:
                self._validate_field(data, schema, "", errors)
        except Exception as e:
            errors.append(f"Validation error: {e}")

        valid = not errors
        if valid:
            logger.debug("Schema validation passed")
        else:
            logger.error(
                f"Schema validation failed: {errors} | received: {_dump(data)}"
            )
            self._attach_errors(errors, data)

        return ValidationResult(valid=valid, errors=errors)

    def validate_and_assert(self, data: Any, schema: SchemaNode) -> None:
        """
        Validate data and raise AssertionError listing every violation.

        Raises:
            AssertionError: If the data does not satisfy the schema
        """
        result = self.validate(data, schema)
        if not result.valid:
            error_text = "\n".join(f"- {error}" for error in result.errors)
            raise AssertionError(
                f"Schema validation failed ({len(result.errors)} errors):\n{error_text}"
            )

    def _validate_object(
        self,
        data: Any,
        schema: SchemaNode,
        path: str,
        errors: List[str],
    ) -> None:
        if not isinstance(schema, dict):
            errors.append(f"Invalid schema at path: {_display(path)}")
            return

        if not isinstance(data, dict):
            errors.append(
                f"Type mismatch at {_display(path)}: expected object, got {_type_name(data)}"
            )
            return

        for name in schema.get("required") or []:
            if name not in data:
                errors.append(f"Missing required field: {_join_path(path, name)}")

        for name, field_schema in (schema.get("properties") or {}).items():
            # missing required fields were reported above
            if name not in data:
                continue
            self._validate_field(data[name], field_schema, _join_path(path, name), errors)

    def _validate_field(
        self,
        value: Any,
        field_schema: Optional[SchemaNode],
        path: str,
        errors: List[str],
    ) -> None:
        if not isinstance(field_schema, dict):
            errors.append(f"Invalid schema at path: {_display(path)}")
            return

        expected_type = field_schema.get("type")
        actual_type = _type_name(value)

        if expected_type and actual_type != expected_type:
            errors.append(
                f"Type mismatch at {_display(path)}: expected {expected_type}, got {actual_type}"
            )
            return

        if expected_type == "string":
            self._check_string(value, field_schema, path, errors)
        elif expected_type == "number":
            self._check_number(value, field_schema, path, errors)
        elif expected_type == "boolean":
            if not isinstance(value, bool):
                errors.append(f"{_display(path)} must be a boolean")
        elif expected_type == "array":
            items_schema = field_schema.get("items")
            if items_schema is None:
                return
            for index, item in enumerate(value):
                self._validate_field(item, items_schema, f"{path}[{index}]", errors)
        elif expected_type == "object" and field_schema.get("properties"):
            self._validate_object(value, field_schema, path, errors)

    def _check_string(
        self, value: str, field_schema: SchemaNode, path: str, errors: List[str]
    ) -> None:
        name = _display(path)
        min_length = field_schema.get("minLength")
        max_length = field_schema.get("maxLength")
        pattern = field_schema.get("pattern")
        choices = field_schema.get("enum")

        if min_length is not None and len(value) < min_length:
            errors.append(f"{name} is too short (min: {min_length})")
        if max_length is not None and len(value) > max_length:
            errors.append(f"{name} is too long (max: {max_length})")
        if pattern is not None and re.search(pattern, value) is None:
            errors.append(f"{name} does not match pattern: {pattern}")
        if choices is not None and value not in choices:
            errors.append(f"{name} should be one of: {', '.join(str(c) for c in choices)}")

    def _check_number(
        self, value: Any, field_schema: SchemaNode, path: str, errors: List[str]
    ) -> None:
        name = _display(path)
        minimum = field_schema.get("minimum")
        maximum = field_schema.get("maximum")

        if not math.isfinite(value):
            errors.append(f"{name} must be a valid number")
        if minimum is not None and value < minimum:
            errors.append(f"{name} is below minimum: {minimum}")
        if maximum is not None and value > maximum:
            errors.append(f"{name} exceeds maximum: {maximum}")

    def _attach_errors(self, errors: List[str], data: Any) -> None:
        """Attach the violations and the received payload to Allure."""
        summary_lines = [f"Violations: {len(errors)}", "-" * 40]
        summary_lines.extend(f"❌ {error}" for error in errors)
        summary_lines.extend(["", "Received:", _dump(data)])

        allure.attach(
            "\n".join(summary_lines),
            name="Schema Validation Errors",
            attachment_type=allure.attachment_type.TEXT
        )


def _dump(data: Any) -> str:
    try:
        return json.dumps(data, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(data)
