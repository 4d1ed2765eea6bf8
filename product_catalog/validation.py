"""
Request field validation helpers shared by the entity managers.

Each helper either returns the value converted to its typed form or raises
ValidationError naming the offending field.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

from .errors import ValidationError


E = TypeVar('E', bound=Enum)


def _label(field_name: str) -> str:
    return field_name.replace('_', ' ').capitalize()


def require_text(data: Dict[str, Any], field_name: str, max_length: Optional[int] = None) -> str:
    value = data.get(field_name)
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{_label(field_name)} is required", {"field": field_name})
    value = value.strip()
    if max_length and len(value) > max_length:
        raise ValidationError(f"{_label(field_name)} must be at most {max_length} characters",
                              {"field": field_name})
    return value


KEY_SEPARATOR = "/"


def require_code(data: Dict[str, Any], field_name: str, max_length: Optional[int] = None) -> str:
    """Required identifying code; it becomes part of a business key, so it may not hold the separator"""
    value = require_text(data, field_name, max_length=max_length)
    if KEY_SEPARATOR in value:
        raise ValidationError(f"{_label(field_name)} must not contain '{KEY_SEPARATOR}'",
                              {"field": field_name, "value": value})
    return value


def optional_text(data: Dict[str, Any], field_name: str) -> Optional[str]:
    value = data.get(field_name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{_label(field_name)} must be a string", {"field": field_name})
    return value


def parse_enum(enum_type: Type[E], value: Any, field_name: str, required: bool = True) -> Optional[E]:
    """Accept an enum member, its value, or its name (case-insensitive)"""
    if value is None or value == "":
        if required:
            raise ValidationError(f"{_label(field_name)} is required", {"field": field_name})
        return None
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        for member in enum_type:
            if value == member.value or value.upper() == member.name:
                return member
    allowed = ", ".join(member.name for member in enum_type)
    raise ValidationError(
        f"Invalid {field_name} value: {value}. Allowed values: {allowed}",
        {"field": field_name, "value": value}
    )


def parse_decimal(value: Any, field_name: str, required: bool = True,
                  minimum: Optional[Decimal] = None, maximum: Optional[Decimal] = None,
                  exclusive_minimum: bool = True) -> Optional[Decimal]:
    if value is None or value == "":
        if required:
            raise ValidationError(f"{_label(field_name)} is required", {"field": field_name})
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{_label(field_name)} must be a decimal number", {"field": field_name})
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{_label(field_name)} must be a decimal number", {"field": field_name})
    if not amount.is_finite():
        raise ValidationError(f"{_label(field_name)} must be a decimal number", {"field": field_name})

    if minimum is not None:
        if exclusive_minimum and amount <= minimum:
            raise ValidationError(f"{_label(field_name)} must be greater than {minimum}",
                                  {"field": field_name})
        if not exclusive_minimum and amount < minimum:
            raise ValidationError(f"{_label(field_name)} must be at least {minimum}",
                                  {"field": field_name})
    if maximum is not None and amount > maximum:
        raise ValidationError(f"{_label(field_name)} must be at most {maximum}", {"field": field_name})
    return amount


def parse_int(value: Any, field_name: str, required: bool = True,
              minimum: Optional[int] = None) -> Optional[int]:
    if value is None:
        if required:
            raise ValidationError(f"{_label(field_name)} is required", {"field": field_name})
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{_label(field_name)} must be an integer", {"field": field_name})
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{_label(field_name)} must be an integer", {"field": field_name})
    if isinstance(value, float) and value != number:
        raise ValidationError(f"{_label(field_name)} must be an integer", {"field": field_name})
    if minimum is not None and number < minimum:
        raise ValidationError(f"{_label(field_name)} must be at least {minimum}", {"field": field_name})
    return number


def parse_bool(value: Any, field_name: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValidationError(f"{_label(field_name)} must be true or false", {"field": field_name})


def parse_date(value: Any, field_name: str, required: bool = True) -> Optional[date]:
    """Accept a date, a datetime (date part kept) or an ISO YYYY-MM-DD string"""
    if value is None or value == "":
        if required:
            raise ValidationError(f"{_label(field_name)} is required", {"field": field_name})
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {field_name}: use ISO format (YYYY-MM-DD)", {"field": field_name})
