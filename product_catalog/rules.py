"""
Product Rules Module

Configurable business rules of a product (limits, eligibility, validations).
The rule value is an opaque string; for typed data it must parse as that type.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional
import json

from .entity_manager import SubResourceManager
from .errors import ValidationError
from .validation import parse_enum, require_code, require_text
from .versioning import VersionedEntity


class RuleType(Enum):
    SIMPLE = "SIMPLE"
    VALIDATION = "VALIDATION"
    ELIGIBILITY = "ELIGIBILITY"
    LIMIT = "LIMIT"
    TRANSACTION_LIMIT = "TRANSACTION_LIMIT"


class RuleDataType(Enum):
    STRING = "STRING"
    NUMBER = "NUMBER"
    PERCENTAGE = "PERCENTAGE"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    JSON = "JSON"


class RuleValidationType(Enum):
    EXACT = "EXACT"
    MIN_MAX = "MIN_MAX"
    RANGE = "RANGE"
    REGEX = "REGEX"
    NONE = "NONE"


@dataclass
class ProductRule(VersionedEntity):
    rule_code: str
    rule_name: str
    rule_type: RuleType
    data_type: RuleDataType
    rule_value: str
    validation_type: Optional[RuleValidationType] = None

    def parsed_value(self) -> Any:
        """Rule value converted according to its data type"""
        return _parse_rule_value(self.data_type, self.rule_value)


def _parse_rule_value(data_type: RuleDataType, value: str) -> Any:
    if data_type in (RuleDataType.NUMBER, RuleDataType.PERCENTAGE):
        return Decimal(value)
    if data_type == RuleDataType.BOOLEAN:
        if value.lower() not in ("true", "false"):
            raise ValueError(f"not a boolean: {value}")
        return value.lower() == "true"
    if data_type == RuleDataType.JSON:
        return json.loads(value)
    return value


class RuleManager(SubResourceManager):
    """Versioned rules of a product"""

    kind = "rule"
    label = "Rule"
    entity_type = ProductRule
    code_field = "rule_code"

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        values = {
            "rule_code": require_code(data, "rule_code", max_length=100),
            "rule_name": require_text(data, "rule_name"),
            "rule_type": parse_enum(RuleType, data.get("rule_type"), "rule_type"),
            "data_type": parse_enum(RuleDataType, data.get("data_type"), "data_type"),
            "rule_value": require_text(data, "rule_value"),
            "validation_type": parse_enum(RuleValidationType, data.get("validation_type"),
                                          "validation_type", required=False),
        }
        try:
            _parse_rule_value(values["data_type"], values["rule_value"])
        except (ValueError, InvalidOperation):
            raise ValidationError(
                f"Rule value is not valid {values['data_type'].value}",
                {"field": "rule_value"}
            )
        return values
