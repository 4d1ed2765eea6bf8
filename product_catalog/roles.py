"""
Product Roles Module

Parties that can hold a role on accounts of a product (owner, nominee, ...).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from .entity_manager import SubResourceManager
from .validation import parse_bool, parse_enum, parse_int, require_code, require_text
from .versioning import VersionedEntity


class RoleType(Enum):
    OWNER = "OWNER"
    CO_OWNER = "CO_OWNER"
    NOMINEE = "NOMINEE"
    GUARANTOR = "GUARANTOR"
    AUTHORIZED_SIGNATORY = "AUTHORIZED_SIGNATORY"
    BENEFICIARY = "BENEFICIARY"


@dataclass
class ProductRole(VersionedEntity):
    role_code: str
    role_name: str
    role_type: RoleType
    mandatory: bool = False
    max_count: int = 1


class RoleManager(SubResourceManager):
    """Versioned roles of a product"""

    kind = "role"
    label = "Role"
    entity_type = ProductRole
    code_field = "role_code"

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "role_code": require_code(data, "role_code", max_length=50),
            "role_name": require_text(data, "role_name"),
            "role_type": parse_enum(RoleType, data.get("role_type"), "role_type"),
            "mandatory": parse_bool(data.get("mandatory"), "mandatory", default=False),
            "max_count": parse_int(data.get("max_count", 1), "max_count", minimum=1),
        }
