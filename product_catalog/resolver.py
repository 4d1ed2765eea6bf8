"""
Latest State Resolver Module

Derives the externally visible state of a business key from its version
history. The rule is the same for every entity kind:

    1. no versions                  -> not found
    2. pick the newest version by (created_at, tiebreak)
    3. newest version is a DELETE   -> not found
    4. otherwise                    -> the newest version's payload

A DELETE marker hides the key completely. Earlier CREATE/UPDATE versions are
never resurrected, which is what a "latest non-deleted row" query would
wrongly do.

The functions are generic over the version representation: a VersionFields
bundle says how to read the business key, CRUD marker, timestamp and
tiebreak out of a version, and a projector turns the winning version into
whatever the caller wants back.
"""

from dataclasses import dataclass
from datetime import datetime
from operator import attrgetter
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar

from .versioning import CrudMarker, VersionRecord


V = TypeVar('V')
R = TypeVar('R')


@dataclass(frozen=True)
class VersionFields(Generic[V]):
    """Extractors for the fields the resolver needs from a version"""
    business_key: Callable[[V], str]
    crud_marker: Callable[[V], CrudMarker]
    created_at: Callable[[V], datetime]
    tiebreak: Callable[[V], Any]

    def ordering(self, version: V) -> Tuple[datetime, Any]:
        return (self.created_at(version), self.tiebreak(version))


RECORD_FIELDS: VersionFields[VersionRecord] = VersionFields(
    business_key=attrgetter('business_key'),
    crud_marker=attrgetter('crud_marker'),
    created_at=attrgetter('created_at'),
    tiebreak=attrgetter('sequence'),
)


def latest_version(versions: Iterable[V], fields: VersionFields[V]) -> Optional[V]:
    """Newest version of a single business key, delete markers included"""
    versions = list(versions)
    keys = {fields.business_key(version) for version in versions}
    if len(keys) > 1:
        raise ValueError(f"Versions span several business keys: {sorted(keys)}")
    return max(versions, key=fields.ordering, default=None)


def resolve_current(versions: Iterable[V], fields: VersionFields[V],
                    project: Callable[[V], R]) -> Optional[R]:
    """
    Current state of a single business key.

    Returns:
        The projected newest version, or None when there are no versions or
        the newest one is a delete marker
    """
    latest = latest_version(versions, fields)
    if latest is None or fields.crud_marker(latest) == CrudMarker.DELETE:
        return None
    return project(latest)


def resolve_all_current(versions: Iterable[V], fields: VersionFields[V],
                        project: Callable[[V], R]) -> List[R]:
    """
    Current states of every business key in a mixed version list, ordered
    by business key. Keys resolving to a delete marker are left out.
    """
    by_key: Dict[str, List[V]] = {}
    for version in versions:
        by_key.setdefault(fields.business_key(version), []).append(version)

    results = []
    for key in sorted(by_key):
        current = resolve_current(by_key[key], fields, project)
        if current is not None:
            results.append(current)
    return results


def resolve_record(versions: Iterable[VersionRecord]) -> Optional[VersionRecord]:
    """resolve_current for stored VersionRecords, returning the version itself"""
    return resolve_current(versions, RECORD_FIELDS, lambda version: version)
