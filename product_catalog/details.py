"""
Product Details Module

Assembles the full view of one product: its current definition plus the
currently visible records of every sub-resource kind.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .entity_manager import SubResourceManager
from .products import Product, ProductEngine
from .versioning import VersionedEntity


@dataclass
class ProductDetails:
    """Current product state with its sub-resources"""
    product: Product
    charges: List[VersionedEntity] = field(default_factory=list)
    rules: List[VersionedEntity] = field(default_factory=list)
    roles: List[VersionedEntity] = field(default_factory=list)
    transactions: List[VersionedEntity] = field(default_factory=list)
    communications: List[VersionedEntity] = field(default_factory=list)
    interest_rates: List[VersionedEntity] = field(default_factory=list)
    balances: List[VersionedEntity] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result = self.product.to_dict()
        for name in SECTIONS:
            result[name] = [item.to_dict() for item in getattr(self, name)]
        return result


SECTIONS = ("charges", "rules", "roles", "transactions",
            "communications", "interest_rates", "balances")


class ProductAggregateAssembler:
    """
    Builds ProductDetails from the product engine and one manager per
    sub-resource kind, keyed by section name.
    """

    def __init__(self, product_engine: ProductEngine,
                 managers: Mapping[str, SubResourceManager]):
        unknown = set(managers) - set(SECTIONS)
        if unknown:
            raise ValueError(f"Unknown detail sections: {sorted(unknown)}")
        self.product_engine = product_engine
        self.managers = dict(managers)

    def get_product_details(self, product_code: str) -> ProductDetails:
        """
        Raises:
            NotFoundError: If the product has no current state
        """
        product = self.product_engine.get_product(product_code)
        sections = {
            name: manager.current_for_product(product_code)
            for name, manager in self.managers.items()
        }
        return ProductDetails(product=product, **sections)
