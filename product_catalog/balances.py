"""
Product Balances Module

Balance types a product maintains. The balance type itself is the code, so
a product holds at most one current record per balance type.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from .entity_manager import SubResourceManager
from .errors import ValidationError
from .validation import parse_bool, parse_enum
from .versioning import VersionedEntity


class BalanceType(Enum):
    LOAN_PRINCIPAL = "LOAN_PRINCIPAL"   # Outstanding loan amount
    LOAN_INTEREST = "LOAN_INTEREST"     # Accrued or charged interest
    FD_PRINCIPAL = "FD_PRINCIPAL"       # Deposited amount
    FD_INTEREST = "FD_INTEREST"         # Earned interest
    OVERDRAFT = "OVERDRAFT"
    PENALTY = "PENALTY"
    LEDGER_BALANCE = "LEDGER_BALANCE"
    AVAILABLE_BALANCE = "AVAILABLE_BALANCE"


@dataclass
class ProductBalance(VersionedEntity):
    balance_type: BalanceType
    active: bool = True


class BalanceManager(SubResourceManager):
    """Versioned balance types of a product"""

    kind = "balance"
    label = "Balance"
    entity_type = ProductBalance
    code_field = "balance_type"

    def normalize_code(self, code: Any) -> str:
        # Unknown types are left as given so lookups report them as not found
        try:
            return parse_enum(BalanceType, code, "balance_type").value
        except ValidationError:
            return super().normalize_code(code)

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "balance_type": parse_enum(BalanceType, data.get("balance_type"), "balance_type"),
            "active": parse_bool(data.get("active"), "active", default=True),
        }
