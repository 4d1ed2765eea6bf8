"""
Entity Manager Module

Shared create / read / update / delete plumbing for the versioned entity
kinds. Each kind plugs in its typed entity class and its validation; reads
go through the generic resolver and every write is a stamped append.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type
from datetime import datetime

from .audit import AuditContext, stamp_version
from .errors import NotFoundError, ValidationError
from .pagination import Page, paginate
from .resolver import RECORD_FIELDS, resolve_all_current, resolve_record
from .storage import StorageInterface
from .validation import KEY_SEPARATOR
from .versioning import CrudMarker, VersionRecord, VersionedEntity, VersionedRecordStore


class VersionedEntityManager:
    """Base manager for one versioned entity kind"""

    kind: str = ""
    label: str = "Record"
    entity_type: Type[VersionedEntity] = VersionedEntity

    def __init__(self, storage: StorageInterface, clock: Optional[Callable[[], datetime]] = None):
        self.storage = storage
        self.store = VersionedRecordStore(storage, self.kind, clock=clock)

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Check a request and return its typed payload values"""
        raise NotImplementedError

    def _project(self, version: VersionRecord) -> VersionedEntity:
        return self.entity_type.from_version(version)

    def _current_version(self, business_key: str) -> Optional[VersionRecord]:
        return resolve_record(self.store.all_versions(business_key))

    def _require_current(self, business_key: str, description: str) -> VersionRecord:
        current = self._current_version(business_key)
        if current is None:
            # Deleted and never-created keys are reported identically
            raise NotFoundError(f"{self.label} not found: {description}")
        return current

    def _append(self, crud_marker: CrudMarker, business_key: str, parent_key: str,
                values: Dict[str, Any], context: Optional[AuditContext]) -> VersionedEntity:
        draft = VersionRecord.draft(
            self.kind, business_key, parent_key, crud_marker,
            self.entity_type.encode_payload(values)
        )
        stored = self.store.append(stamp_version(draft, context))
        return self._project(stored)

    def _merge(self, current: VersionRecord, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Overlay the provided (non-None) changes on the current typed payload"""
        merged = self._project(current).payload()
        unknown = set(changes) - set(merged)
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
        merged.update({name: value for name, value in changes.items() if value is not None})
        return self.validate(merged)

    def _history(self, versions: List[VersionRecord], description: str) -> List[VersionedEntity]:
        if not versions:
            raise NotFoundError(f"{self.label} not found: {description}")
        return [self._project(version) for version in versions]


class SubResourceManager(VersionedEntityManager):
    """
    Manager for a product sub-resource. The business key is the owning
    product code joined with the sub-resource code by KEY_SEPARATOR. Neither
    code may contain the separator, so a key can never be shared between
    products.
    """

    code_field: str = ""

    def __init__(self, storage: StorageInterface, product_engine,
                 clock: Optional[Callable[[], datetime]] = None):
        super().__init__(storage, clock=clock)
        self.product_engine = product_engine

    def normalize_code(self, code: Any) -> str:
        if isinstance(code, Enum):
            return code.value
        return str(code).strip()

    def business_key(self, product_code: str, code: Any) -> str:
        code = self.normalize_code(code)
        if KEY_SEPARATOR in product_code or KEY_SEPARATOR in code:
            # Stored codes never hold the separator
            raise NotFoundError(f"{self.label} not found: {product_code}{KEY_SEPARATOR}{code}")
        return f"{product_code}{KEY_SEPARATOR}{code}"

    def create(self, product_code: str, data: Dict[str, Any],
               context: Optional[AuditContext] = None) -> VersionedEntity:
        """
        Add a sub-resource to a product.

        Raises:
            ValidationError: If the request is invalid or the code already
                has a current state under this product
            NotFoundError: If the product has no current state
        """
        values = self.validate(data)
        code = self.normalize_code(values[self.code_field])

        with self.storage.atomic():
            self.product_engine.get_product(product_code)
            business_key = self.business_key(product_code, code)
            if self._current_version(business_key) is not None:
                raise ValidationError(
                    f"{self.label} {code} already exists for product {product_code}"
                )
            return self._append(CrudMarker.CREATE, business_key, product_code, values, context)

    def get(self, product_code: str, code: Any) -> VersionedEntity:
        """Current state of one sub-resource"""
        code = self.normalize_code(code)
        current = self._require_current(self.business_key(product_code, code), code)
        return self._project(current)

    def current_for_product(self, product_code: str) -> List[VersionedEntity]:
        """Every currently visible sub-resource of this kind under a product"""
        return resolve_all_current(
            self.store.versions_by_parent(product_code), RECORD_FIELDS, self._project
        )

    def list_for_product(self, product_code: str, page: int = 0,
                         size: Optional[int] = None) -> Page:
        """Page through the visible sub-resources of a product"""
        self.product_engine.get_product(product_code)
        return paginate(self.current_for_product(product_code), page, size)

    def update(self, product_code: str, code: Any, changes: Dict[str, Any],
               context: Optional[AuditContext] = None) -> VersionedEntity:
        """Append an UPDATE version carrying the merged payload"""
        code = self.normalize_code(code)
        new_code = changes.get(self.code_field)
        if new_code is not None and self.normalize_code(new_code) != code:
            raise ValidationError(f"{self.code_field} cannot be changed by an update")

        with self.storage.atomic():
            business_key = self.business_key(product_code, code)
            current = self._require_current(business_key, code)
            values = self._merge(current, changes)
            return self._append(CrudMarker.UPDATE, business_key, product_code, values, context)

    def delete(self, product_code: str, code: Any,
               context: Optional[AuditContext] = None) -> VersionedEntity:
        """Append a DELETE marker; earlier versions stay in the history"""
        code = self.normalize_code(code)
        with self.storage.atomic():
            business_key = self.business_key(product_code, code)
            current = self._require_current(business_key, code)
            values = self._project(current).payload()
            return self._append(CrudMarker.DELETE, business_key, product_code, values, context)

    def history(self, product_code: str, code: Any) -> List[VersionedEntity]:
        """All versions of one sub-resource, newest first"""
        code = self.normalize_code(code)
        return self._history(self.store.all_versions(self.business_key(product_code, code)), code)

    def product_history(self, product_code: str) -> List[VersionedEntity]:
        """All versions of this kind under a product, newest first"""
        return self._history(self.store.versions_by_parent(product_code),
                             f"no {self.kind} versions for product {product_code}")
