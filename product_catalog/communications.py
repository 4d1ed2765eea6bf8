"""
Product Communications Module

Message templates sent to customers of a product on business events.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .entity_manager import SubResourceManager
from .validation import parse_enum, parse_int, require_code, require_text
from .versioning import VersionedEntity


class CommunicationType(Enum):
    ALERT = "ALERT"
    NOTICE = "NOTICE"
    STATEMENT = "STATEMENT"
    TRANSACTIONAL = "TRANSACTIONAL"
    REMINDER = "REMINDER"
    MARKETING = "MARKETING"


class CommunicationChannel(Enum):
    EMAIL = "EMAIL"
    SMS = "SMS"
    POST = "POST"
    PUSH = "PUSH"


@dataclass
class ProductCommunication(VersionedEntity):
    comm_code: str
    communication_type: CommunicationType
    channel: CommunicationChannel
    event: str              # e.g. ACCOUNT_OPENING, TRANSACTION_COMPLETE
    template: str
    frequency_limit: Optional[int] = None

    def render(self, **values: Any) -> str:
        """Fill {placeholders} in the template"""
        return self.template.format(**values)


class CommunicationManager(SubResourceManager):
    """Versioned communication templates of a product"""

    kind = "communication"
    label = "Communication"
    entity_type = ProductCommunication
    code_field = "comm_code"

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "comm_code": require_code(data, "comm_code", max_length=50),
            "communication_type": parse_enum(CommunicationType, data.get("communication_type"),
                                             "communication_type"),
            "channel": parse_enum(CommunicationChannel, data.get("channel"), "channel"),
            "event": require_text(data, "event"),
            "template": require_text(data, "template"),
            "frequency_limit": parse_int(data.get("frequency_limit"), "frequency_limit",
                                         required=False, minimum=0),
        }
