"""
Product Charges Module

Fees and charges attached to a product, versioned per product + charge code.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from .entity_manager import SubResourceManager
from .errors import ValidationError
from .validation import parse_decimal, parse_enum, require_code, require_text
from .versioning import VersionedEntity


class ChargeType(Enum):
    FLAT = "FLAT"               # Fixed amount
    PERCENTAGE = "PERCENTAGE"   # Percentage of amount
    SLAB = "SLAB"               # Tiered based on balance/amount


class ChargeCalculationType(Enum):
    FIXED = "FIXED"
    PERCENTAGE_OF_BALANCE = "PERCENTAGE_OF_BALANCE"
    PERCENTAGE_OF_TRANSACTION = "PERCENTAGE_OF_TRANSACTION"
    TIERED = "TIERED"


class ChargeFrequency(Enum):
    ONE_TIME = "ONE_TIME"
    PER_TRANSACTION = "PER_TRANSACTION"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    ANNUALLY = "ANNUALLY"


class DebitCredit(Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


@dataclass
class ProductCharge(VersionedEntity):
    charge_code: str
    charge_name: str
    charge_type: ChargeType
    calculation_type: ChargeCalculationType
    amount: Decimal
    debit_credit: DebitCredit
    frequency: Optional[ChargeFrequency] = None


class ChargeManager(SubResourceManager):
    """Versioned charges of a product"""

    kind = "charge"
    label = "Charge"
    entity_type = ProductCharge
    code_field = "charge_code"

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        values = {
            "charge_code": require_code(data, "charge_code", max_length=100),
            "charge_name": require_text(data, "charge_name"),
            "charge_type": parse_enum(ChargeType, data.get("charge_type"), "charge_type"),
            "calculation_type": parse_enum(ChargeCalculationType, data.get("calculation_type"),
                                           "calculation_type"),
            "amount": parse_decimal(data.get("amount"), "amount", minimum=Decimal("0")),
            "debit_credit": parse_enum(DebitCredit, data.get("debit_credit"), "debit_credit"),
            "frequency": parse_enum(ChargeFrequency, data.get("frequency"), "frequency", required=False),
        }
        if values["charge_type"] == ChargeType.PERCENTAGE and values["amount"] > Decimal("100"):
            raise ValidationError("Percentage charge amount must be at most 100")
        return values
