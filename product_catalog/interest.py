"""
Product Interest Rates Module

Term-based interest rate slabs for deposit and loan products. Rates are
fractions (0.0800 is 8.00%).
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict

from .entity_manager import SubResourceManager
from .errors import NotFoundError
from .validation import parse_decimal, parse_int, require_code
from .versioning import VersionedEntity


RATE_FIELDS = (
    "rate_cumulative",
    "rate_non_cumulative_monthly",
    "rate_non_cumulative_quarterly",
    "rate_non_cumulative_yearly",
)


@dataclass
class ProductInterestRate(VersionedEntity):
    rate_code: str                       # e.g. RATE_12M, RATE_36M
    term_in_months: int
    rate_cumulative: Decimal
    rate_non_cumulative_monthly: Decimal
    rate_non_cumulative_quarterly: Decimal
    rate_non_cumulative_yearly: Decimal


class InterestRateManager(SubResourceManager):
    """Versioned interest rates of a product"""

    kind = "interest"
    label = "Interest rate"
    entity_type = ProductInterestRate
    code_field = "rate_code"

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        values = {
            "rate_code": require_code(data, "rate_code", max_length=50),
            "term_in_months": parse_int(data.get("term_in_months"), "term_in_months", minimum=1),
        }
        for name in RATE_FIELDS:
            values[name] = parse_decimal(data.get(name), name,
                                         minimum=Decimal("0"), maximum=Decimal("1"))
        return values

    def rate_for_term(self, product_code: str, term_in_months: int) -> ProductInterestRate:
        """
        Current rate slab covering a term: the slab with the smallest term
        that is at least the requested one.
        """
        candidates = [rate for rate in self.current_for_product(product_code)
                      if rate.term_in_months >= term_in_months]
        if not candidates:
            raise NotFoundError(f"No interest rate for {term_in_months} months on {product_code}")
        return min(candidates, key=lambda rate: rate.term_in_months)
