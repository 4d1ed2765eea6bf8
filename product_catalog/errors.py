"""
Error Types Module

Exception hierarchy shared by the storage, versioning and service layers.
The REST layer maps each type to an HTTP status.
"""

from typing import Any, Dict, Optional


class ProductCatalogError(Exception):
    """Base class for all product catalog errors"""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(ProductCatalogError, ValueError):
    """Malformed or missing fields, unknown enum values, out-of-range numbers"""

    status_code = 400


class NotFoundError(ProductCatalogError, LookupError):
    """A business key has no current state (never created, or deleted)"""

    status_code = 404


class IntegrityError(ProductCatalogError):
    """
    Violation of the version store invariants: a business key shared by two
    parents, a timestamp earlier than the newest existing version, or a
    reused surrogate id. Always unexpected.
    """

    status_code = 500
