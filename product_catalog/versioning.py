"""
Versioned Record Store Module

Insert-only persistence for every product entity kind. A logical record is a
business key; each create, update or delete appends a new immutable version
row carrying a CRUD marker. Rows are never changed or removed, so the full
history of every business key stays queryable.
"""

from dataclasses import dataclass, field, fields, asdict, replace
from datetime import datetime, date, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, Union, get_type_hints
import typing
import uuid

from .errors import IntegrityError
from .storage import StorageInterface
from .logging_config import get_logger, log_action


logger = get_logger("product_catalog.versioning")


class CrudMarker(Enum):
    """What a version row represents"""
    CREATE = "C"
    UPDATE = "U"
    DELETE = "D"


@dataclass(frozen=True)
class VersionRecord:
    """One immutable version row"""
    record_id: str
    kind: str
    business_key: str
    parent_key: str
    crud_marker: CrudMarker
    created_at: datetime
    sequence: int
    payload: Dict[str, Any] = field(default_factory=dict)
    user_id: Optional[str] = None
    workstation_id: Optional[str] = None
    program_id: Optional[str] = None
    reference_id: Optional[str] = None

    @classmethod
    def draft(cls, kind: str, business_key: str, parent_key: str,
              crud_marker: CrudMarker, payload: Dict[str, Any]) -> 'VersionRecord':
        """Unsaved version; the store assigns id, timestamp and sequence on append"""
        return cls(
            record_id="",
            kind=kind,
            business_key=business_key,
            parent_key=parent_key,
            crud_marker=crud_marker,
            created_at=datetime.min.replace(tzinfo=timezone.utc),
            sequence=0,
            payload=dict(payload),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        result = asdict(self)
        result['crud_marker'] = self.crud_marker.value
        result['created_at'] = self.created_at.isoformat()
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VersionRecord':
        data = dict(data)
        if isinstance(data.get('crud_marker'), str):
            data['crud_marker'] = CrudMarker(data['crud_marker'])
        if isinstance(data.get('created_at'), str):
            data['created_at'] = datetime.fromisoformat(data['created_at'])
        return cls(**data)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class VersionedRecordStore:
    """
    Append-only store for one record kind.

    append() never consults prior state to decide whether a write is allowed;
    "does this key exist" is a business rule owned by the callers. The store
    only guards its own invariants: a business key belongs to exactly one
    parent, and version timestamps never run backwards for a key.
    """

    def __init__(self, storage: StorageInterface, kind: str,
                 clock: Optional[Callable[[], datetime]] = None):
        self.storage = storage
        self.kind = kind
        self.table_name = f"{kind}_versions"
        self._clock = clock or utc_now

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now

    def append(self, record: VersionRecord) -> VersionRecord:
        """
        Insert a new version row and return it as committed.

        Args:
            record: Draft version (see VersionRecord.draft), already stamped
                with the caller's audit identity

        Returns:
            The stored version with record_id, created_at and sequence set

        Raises:
            IntegrityError: If the key is owned by another parent, or the
                clock produced a timestamp older than the key's newest version
        """
        if record.kind != self.kind:
            raise IntegrityError(
                f"Cannot append {record.kind} version to {self.kind} store"
            )

        with self.storage.atomic():
            existing = self.all_versions(record.business_key)
            now = self._now()

            if existing:
                newest = existing[0]
                if newest.parent_key != record.parent_key:
                    self._integrity_violation(
                        f"Business key {record.business_key} belongs to {newest.parent_key}, "
                        f"not {record.parent_key}",
                        record
                    )
                if now < newest.created_at:
                    self._integrity_violation(
                        f"Clock regression for {record.business_key}: "
                        f"{now.isoformat()} precedes {newest.created_at.isoformat()}",
                        record
                    )

            stored = replace(
                record,
                record_id=record.record_id or str(uuid.uuid4()),
                created_at=now,
                sequence=self.storage.count(self.table_name) + 1,
            )
            self.storage.insert(self.table_name, stored.record_id, stored.to_dict())

        log_action(
            logger, "info",
            f"Appended {stored.crud_marker.name} version of {self.kind} {stored.business_key}",
            user_id=stored.user_id,
            action=stored.crud_marker.name.lower(),
            resource=self.kind,
            business_key=stored.business_key,
            parent_key=stored.parent_key,
            extra={"record_id": stored.record_id, "sequence": stored.sequence}
        )
        return stored

    def _integrity_violation(self, message: str, record: VersionRecord) -> None:
        log_action(
            logger, "error", message,
            user_id=record.user_id,
            action="append",
            resource=self.kind,
            business_key=record.business_key,
            parent_key=record.parent_key
        )
        raise IntegrityError(message, {"business_key": record.business_key})

    def all_versions(self, business_key: str) -> List[VersionRecord]:
        """Every version of a business key, newest first"""
        rows = self.storage.find(self.table_name, {"business_key": business_key})
        return self._newest_first(rows)

    def versions_by_parent(self, parent_key: str) -> List[VersionRecord]:
        """Every version of every business key under a parent, newest first"""
        rows = self.storage.find(self.table_name, {"parent_key": parent_key})
        return self._newest_first(rows)

    def all_records(self) -> List[VersionRecord]:
        """Every version in the store, newest first"""
        return self._newest_first(self.storage.load_all(self.table_name))

    def business_keys(self, parent_key: Optional[str] = None) -> List[str]:
        """Distinct business keys, optionally restricted to one parent"""
        versions = self.versions_by_parent(parent_key) if parent_key else self.all_records()
        return sorted({version.business_key for version in versions})

    @staticmethod
    def _newest_first(rows: List[Dict[str, Any]]) -> List[VersionRecord]:
        versions = [VersionRecord.from_dict(row) for row in rows]
        versions.sort(key=lambda v: (v.created_at, v.sequence), reverse=True)
        return versions


E = TypeVar('E', bound='VersionedEntity')


def _encode(value: Any) -> Any:
    """Convert a typed value to its JSON-ready stored form"""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _decode(annotation: Any, value: Any) -> Any:
    """Convert a stored value back to the annotated type"""
    if value is None:
        return None
    if typing.get_origin(annotation) is Union:
        inner = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        annotation = inner[0] if len(inner) == 1 else Any
    if isinstance(annotation, type):
        if isinstance(value, annotation) and annotation is not date:
            return value
        if issubclass(annotation, Enum):
            return annotation(value)
        if annotation is Decimal:
            return Decimal(str(value))
        if annotation is datetime:
            return datetime.fromisoformat(value)
        if annotation is date:
            return value if isinstance(value, date) else date.fromisoformat(value)
    return value


@dataclass
class VersionedEntity:
    """
    Typed view of a version row: the version metadata plus the kind-specific
    payload decoded into typed fields by the subclass annotations.
    """
    record_id: str
    business_key: str
    product_code: str
    crud_marker: CrudMarker
    created_at: datetime
    user_id: Optional[str]
    workstation_id: Optional[str]
    program_id: Optional[str]
    reference_id: Optional[str]

    @classmethod
    def payload_fields(cls) -> List[str]:
        base = {f.name for f in fields(VersionedEntity)}
        return [f.name for f in fields(cls) if f.name not in base]

    @classmethod
    def encode_payload(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """Store-ready payload holding only this kind's fields"""
        return {name: _encode(values.get(name)) for name in cls.payload_fields()}

    @classmethod
    def from_version(cls: Type[E], version: VersionRecord) -> E:
        hints = get_type_hints(cls)
        payload = {
            name: _decode(hints[name], version.payload.get(name))
            for name in cls.payload_fields()
            if name in version.payload
        }
        return cls(
            record_id=version.record_id,
            business_key=version.business_key,
            product_code=version.parent_key,
            crud_marker=version.crud_marker,
            created_at=version.created_at,
            user_id=version.user_id,
            workstation_id=version.workstation_id,
            program_id=version.program_id,
            reference_id=version.reference_id,
            **payload
        )

    def payload(self) -> Dict[str, Any]:
        """Typed payload values keyed by field name"""
        return {name: getattr(self, name) for name in self.payload_fields()}

    def to_dict(self, include_audit: bool = False) -> Dict[str, Any]:
        """JSON-ready view; audit fields only when include_audit is set"""
        result = {
            "record_id": self.record_id,
            "product_code": self.product_code,
        }
        result.update({name: _encode(value) for name, value in self.payload().items()})
        if include_audit:
            result.update({
                "business_key": self.business_key,
                "crud_marker": self.crud_marker.value,
                "created_at": self.created_at.isoformat(),
                "user_id": self.user_id,
                "workstation_id": self.workstation_id,
                "program_id": self.program_id,
                "reference_id": self.reference_id,
            })
        return result
