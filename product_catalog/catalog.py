"""
Product catalog container wiring storage, the product engine, the
sub-resource managers and the details assembler together.
"""

from datetime import datetime
from typing import Callable, Dict, Optional

from .balances import BalanceManager
from .charges import ChargeManager
from .communications import CommunicationManager
from .config import get_config
from .details import ProductAggregateAssembler
from .entity_manager import SubResourceManager
from .interest import InterestRateManager
from .logging_config import get_logger
from .products import ProductEngine
from .roles import RoleManager
from .rules import RuleManager
from .storage import StorageInterface, create_storage
from .transactions import TransactionManager


logger = get_logger("product_catalog.catalog")


class ProductCatalog:
    """Product catalog with all components initialized"""

    def __init__(self, storage: Optional[StorageInterface] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        if storage is None:
            config = get_config()
            storage = create_storage(config.storage_backend, config.database_path)
        self.storage = storage

        self.product_engine = ProductEngine(self.storage, clock=clock)
        self.charge_manager = ChargeManager(self.storage, self.product_engine, clock=clock)
        self.rule_manager = RuleManager(self.storage, self.product_engine, clock=clock)
        self.role_manager = RoleManager(self.storage, self.product_engine, clock=clock)
        self.transaction_manager = TransactionManager(self.storage, self.product_engine, clock=clock)
        self.communication_manager = CommunicationManager(self.storage, self.product_engine, clock=clock)
        self.interest_rate_manager = InterestRateManager(self.storage, self.product_engine, clock=clock)
        self.balance_manager = BalanceManager(self.storage, self.product_engine, clock=clock)

        self.assembler = ProductAggregateAssembler(self.product_engine, self.sub_resources)
        logger.info(f"Product catalog initialized with {type(self.storage).__name__}")

    @property
    def sub_resources(self) -> Dict[str, SubResourceManager]:
        """Sub-resource managers keyed by details section name"""
        return {
            "charges": self.charge_manager,
            "rules": self.rule_manager,
            "roles": self.role_manager,
            "transactions": self.transaction_manager,
            "communications": self.communication_manager,
            "interest_rates": self.interest_rate_manager,
            "balances": self.balance_manager,
        }

    def close(self) -> None:
        self.storage.close()
