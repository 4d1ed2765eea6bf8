"""
Product Transactions Module

Transaction types a product supports, and whether each one is allowed.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from .entity_manager import SubResourceManager
from .errors import ValidationError
from .validation import parse_bool, parse_decimal, parse_enum, require_code, require_text
from .versioning import VersionedEntity


class TransactionType(Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    TRANSFER = "TRANSFER"
    PAYMENT = "PAYMENT"
    DISBURSEMENT = "DISBURSEMENT"
    INTEREST_ACCRUED = "INTEREST_ACCRUED"
    FEE = "FEE"


@dataclass
class ProductTransaction(VersionedEntity):
    transaction_code: str
    transaction_name: str
    transaction_type: TransactionType
    allowed: bool = True
    minimum_amount: Optional[Decimal] = None
    maximum_amount: Optional[Decimal] = None


class TransactionManager(SubResourceManager):
    """Versioned transaction types of a product"""

    kind = "transaction"
    label = "Transaction"
    entity_type = ProductTransaction
    code_field = "transaction_code"

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        values = {
            "transaction_code": require_code(data, "transaction_code", max_length=50),
            "transaction_name": require_text(data, "transaction_name"),
            "transaction_type": parse_enum(TransactionType, data.get("transaction_type"),
                                           "transaction_type"),
            "allowed": parse_bool(data.get("allowed"), "allowed", default=True),
            "minimum_amount": parse_decimal(data.get("minimum_amount"), "minimum_amount",
                                            required=False, minimum=Decimal("0")),
            "maximum_amount": parse_decimal(data.get("maximum_amount"), "maximum_amount",
                                            required=False, minimum=Decimal("0")),
        }
        if (values["minimum_amount"] is not None and values["maximum_amount"] is not None
                and values["minimum_amount"] > values["maximum_amount"]):
            raise ValidationError("Minimum amount must not exceed maximum amount")
        return values
