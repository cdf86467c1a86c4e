"""
    Field coercion for snapshot and user-supplied values.

    Loaded data is never trusted: numeric fields may arrive as strings,
    flags as "true"/"1", and anything unusable falls back to a default
    instead of failing the whole load.
"""
import math
from enum import Enum
from typing import Any


class ValueType(Enum):
    FLOAT = "float"
    BOOL = "bool"


class TypeValidator:
    """Validation and conversion of field values"""

    @staticmethod
    def convert_to_type(value: Any, target_type: ValueType) -> Any:
        """Convert value to target type"""
        if target_type == ValueType.FLOAT:
            result = float(value.strip() if isinstance(value, str) else value)
            if not math.isfinite(result):
                raise ValueError(f"{value!r} is not a finite number")
            return result
        elif target_type == ValueType.BOOL:
            if isinstance(value, str):
                return value.strip().lower() in ('true', '1', 'yes')
            return bool(value)
        raise TypeError(f"Unsupported target type: {target_type}")

    @staticmethod
    def validate_and_convert(value: Any, target_type: ValueType) -> Any:
        """Validate and convert value"""
        try:
            return TypeValidator.convert_to_type(value, target_type)
        except (ValueError, TypeError, OverflowError) as e:
            raise ValueError(f"Cannot convert {value} to {target_type.value}: {str(e)}")

    @staticmethod
    def coerce(value: Any, target_type: ValueType, default: Any) -> Any:
        """
        Convert value, falling back to ``default`` when it is missing
        or cannot be converted.
        """
        if value is None or value == "":
            return default
        try:
            return TypeValidator.convert_to_type(value, target_type)
        except (ValueError, TypeError, OverflowError):
            return default

    @staticmethod
    def as_number(value: Any) -> Any:
        """Keep integral values as int, everything else as float."""
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    @staticmethod
    def number(value: Any) -> Any:
        """Finite number from ``value``; raises ``ValueError`` otherwise."""
        return TypeValidator.as_number(
            TypeValidator.validate_and_convert(value, ValueType.FLOAT))
