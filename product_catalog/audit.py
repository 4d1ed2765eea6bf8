"""
Audit Stamping Module

Every appended version carries the identity of the caller that produced it
(user, workstation and program ids) plus a fresh reference id. Stamping is a
single step shared by all create, update and delete paths. The stamped fields
are informational only; they never influence which version is current.
"""

from dataclasses import dataclass, replace
from typing import Optional
import uuid

from .config import get_config
from .versioning import VersionRecord


@dataclass(frozen=True)
class AuditContext:
    """Caller identity stamped onto version rows"""
    user_id: str
    workstation_id: str
    program_id: str

    @classmethod
    def system(cls) -> 'AuditContext':
        """Identity used when the caller supplies none"""
        config = get_config()
        return cls(
            user_id=config.default_user_id,
            workstation_id=config.default_workstation_id,
            program_id=config.default_program_id,
        )

    @classmethod
    def build(cls, user_id: Optional[str] = None,
              workstation_id: Optional[str] = None,
              program_id: Optional[str] = None) -> 'AuditContext':
        """Fill any missing part of the identity from the system defaults"""
        default = cls.system()
        return cls(
            user_id=user_id or default.user_id,
            workstation_id=workstation_id or default.workstation_id,
            program_id=program_id or default.program_id,
        )


def stamp_version(record: VersionRecord, context: Optional[AuditContext] = None) -> VersionRecord:
    """Return a copy of the draft version carrying the caller's audit fields"""
    context = context or AuditContext.system()
    return replace(
        record,
        user_id=context.user_id,
        workstation_id=context.workstation_id,
        program_id=context.program_id,
        reference_id=str(uuid.uuid4()),
    )
