"""
Product Engine Module

Versioned product definitions (savings accounts, loans, fixed deposits, ...).
A product is identified by its product code; every change appends a new
version, and a deleted product disappears from all reads while its history
remains available.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from .audit import AuditContext
from .entity_manager import VersionedEntityManager
from .errors import ValidationError
from .pagination import Page, paginate
from .resolver import RECORD_FIELDS, resolve_all_current
from .validation import optional_text, parse_date, parse_enum, require_code, require_text
from .versioning import CrudMarker, VersionedEntity


class ProductType(Enum):
    """Kinds of banking product"""
    SAVINGS = "SAVINGS"
    CURRENT = "CURRENT"
    DEPOSIT = "DEPOSIT"
    FIXED_DEPOSIT = "FIXED_DEPOSIT"
    RECURRING_DEPOSIT = "RECURRING_DEPOSIT"
    LOAN = "LOAN"
    CREDIT_CARD = "CREDIT_CARD"


class ProductStatus(Enum):
    """Product lifecycle status"""
    DRAFT = "DRAFT"         # Being configured, not available for accounts
    ACTIVE = "ACTIVE"       # Available for new accounts
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED" # Temporarily unavailable for new accounts
    RETIRED = "RETIRED"     # Permanently unavailable for new accounts


class ProductCurrency(Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"
    JPY = "JPY"
    CHF = "CHF"
    CAD = "CAD"
    AUD = "AUD"
    SGD = "SGD"
    AED = "AED"


class InterestType(Enum):
    """Interest calculation methods"""
    SIMPLE = "SIMPLE"       # On principal only
    COMPOUND = "COMPOUND"   # On principal plus accumulated interest


class CompoundingFrequency(Enum):
    DAILY = "DAILY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    SEMI_ANNUALLY = "SEMI_ANNUALLY"
    ANNUALLY = "ANNUALLY"


@dataclass
class Product(VersionedEntity):
    """Product definition as of one version"""
    product_name: str
    product_type: ProductType
    currency: ProductCurrency
    effective_date: date
    status: ProductStatus = ProductStatus.DRAFT
    description: Optional[str] = None
    interest_type: Optional[InterestType] = None
    compounding_frequency: Optional[CompoundingFrequency] = None
    expiry_date: Optional[date] = None

    def is_available_on(self, day: date) -> bool:
        """Check if product can be used for new accounts on the given day"""
        if self.status != ProductStatus.ACTIVE:
            return False
        if day < self.effective_date:
            return False
        if self.expiry_date and day > self.expiry_date:
            return False
        return True


class ProductEngine(VersionedEntityManager):
    """Manager for versioned product definitions"""

    kind = "product"
    label = "Product"
    entity_type = Product

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        values = {
            "product_name": require_text(data, "product_name"),
            "product_type": parse_enum(ProductType, data.get("product_type"), "product_type"),
            "currency": parse_enum(ProductCurrency, data.get("currency"), "currency"),
            "effective_date": parse_date(data.get("effective_date"), "effective_date"),
            "status": parse_enum(ProductStatus, data.get("status"), "status", required=False)
                      or ProductStatus.DRAFT,
            "description": optional_text(data, "description"),
            "interest_type": parse_enum(InterestType, data.get("interest_type"),
                                        "interest_type", required=False),
            "compounding_frequency": parse_enum(CompoundingFrequency, data.get("compounding_frequency"),
                                                "compounding_frequency", required=False),
            "expiry_date": parse_date(data.get("expiry_date"), "expiry_date", required=False),
        }
        if values["expiry_date"] and values["expiry_date"] < values["effective_date"]:
            raise ValidationError("Expiry date must be after effective date")
        return values

    def create_product(self, data: Dict[str, Any],
                       context: Optional[AuditContext] = None) -> Product:
        """
        Create a new product definition.

        Args:
            data: Product fields; product_code, product_name, product_type,
                currency and effective_date are required
            context: Caller identity stamped on the version

        Raises:
            ValidationError: If fields are missing or invalid, or the product
                code already has a current state
        """
        product_code = require_code(data, "product_code", max_length=50)
        values = self.validate(data)

        with self.storage.atomic():
            if self._current_version(product_code) is not None:
                raise ValidationError(f"Product code {product_code} already exists")
            return self._append(CrudMarker.CREATE, product_code, product_code, values, context)

    def get_product(self, product_code: str) -> Product:
        """
        Current state of a product.

        Raises:
            NotFoundError: If the product was never created or is deleted
        """
        return self._project(self._require_current(product_code, product_code))

    def find_product(self, product_code: str) -> Optional[Product]:
        """Current state of a product, or None"""
        current = self._current_version(product_code)
        return self._project(current) if current else None

    def current_products(self) -> List[Product]:
        """Every product with a current state, ordered by product code"""
        return resolve_all_current(self.store.all_records(), RECORD_FIELDS, self._project)

    def list_products(self, page: int = 0, size: Optional[int] = None) -> Page:
        return paginate(self.current_products(), page, size)

    def search_products(self, product_type: Optional[Any] = None, status: Optional[Any] = None,
                        start_date: Optional[Any] = None, end_date: Optional[Any] = None) -> List[Product]:
        """
        Search current products.

        Filters are exclusive and tried in order: product type, then status,
        then an effective date strictly between start_date and end_date. With
        no filter every current product is returned.
        """
        products = self.current_products()

        if product_type is not None:
            wanted_type = parse_enum(ProductType, product_type, "product_type")
            return [p for p in products if p.product_type == wanted_type]

        if status is not None:
            wanted_status = parse_enum(ProductStatus, status, "status")
            return [p for p in products if p.status == wanted_status]

        if start_date is not None and end_date is not None:
            start = parse_date(start_date, "start_date")
            end = parse_date(end_date, "end_date")
            if end < start:
                raise ValidationError("End date must be after start date")
            return [p for p in products if start < p.effective_date < end]

        return products

    def update_product(self, product_code: str, changes: Dict[str, Any],
                       context: Optional[AuditContext] = None) -> Product:
        """Append an UPDATE version with the changes applied"""
        changes = dict(changes)
        new_code = changes.pop("product_code", None)
        if new_code is not None and new_code != product_code:
            raise ValidationError("product_code cannot be changed by an update")

        with self.storage.atomic():
            current = self._require_current(product_code, product_code)
            values = self._merge(current, changes)
            return self._append(CrudMarker.UPDATE, product_code, product_code, values, context)

    def delete_product(self, product_code: str, context: Optional[AuditContext] = None) -> Product:
        """Append a DELETE marker for the product"""
        with self.storage.atomic():
            current = self._require_current(product_code, product_code)
            values = self._project(current).payload()
            return self._append(CrudMarker.DELETE, product_code, product_code, values, context)

    def product_history(self, product_code: str) -> List[Product]:
        """All versions of a product (deleted ones included), newest first"""
        return self._history(self.store.all_versions(product_code), product_code)
