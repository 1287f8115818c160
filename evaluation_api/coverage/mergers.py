"""
Set-union merges over coverage collections.

Every merger walks ``existing`` completely before ``additions``, left to
right, so the earlier side wins whenever both supply a scalar for the same
record. Membership does not depend on that order.
"""

from __future__ import annotations

from collections.abc import Callable
from itertools import chain
from typing import Any, Optional, TypeVar

from evaluation_api.coverage.containers import KeyedCollection, OrderedSet
from evaluation_api.coverage.models import (
    ApiCoverage,
    FlowCoverage,
    HttpCallRecord,
    MethodDetail,
    SqlEntry,
    coverage_label_key,
    http_collection,
    method_collection,
    sql_collection,
)
from evaluation_api.coverage.normalizers import (
    as_list,
    normalize_api_coverage,
    normalize_flow_coverage,
    normalize_http_call,
    normalize_method_detail,
    normalize_sql_entry,
)

T = TypeVar("T")


def _merge_into(
    collection: KeyedCollection[T],
    normalize: Callable[[Any], Optional[T]],
    existing: Any,
    additions: Any,
) -> list[T]:
    for raw in chain(as_list(existing), as_list(additions)):
        record = normalize(raw)
        if record is not None:
            collection.add(record)
    return collection.values()


def merge_string_lists(existing: Any = None, additions: Any = None) -> list[str]:
    """Ordered union of two string lists, skipping null and empty items."""
    merged = OrderedSet(
        str(item) for item in chain(as_list(existing), as_list(additions)) if item not in (None, "")
    )
    return merged.to_list()


def merge_method_details(existing: Any = None, additions: Any = None) -> list[MethodDetail]:
    return _merge_into(method_collection(), normalize_method_detail, existing, additions)


def merge_http_calls(existing: Any = None, additions: Any = None) -> list[HttpCallRecord]:
    return _merge_into(http_collection(), normalize_http_call, existing, additions)


def merge_sql_entries(existing: Any = None, additions: Any = None) -> list[SqlEntry]:
    return _merge_into(sql_collection(), normalize_sql_entry, existing, additions)


def merge_flow_coverage(existing: Any = None, additions: Any = None) -> list[FlowCoverage]:
    """Merge flow helpers by lowercased label, nesting the method/HTTP/SQL merges."""
    collection: KeyedCollection[FlowCoverage] = KeyedCollection(coverage_label_key, FlowCoverage.merge)
    return _merge_into(collection, normalize_flow_coverage, existing, additions)


def merge_api_coverage(existing: Any = None, additions: Any = None) -> list[ApiCoverage]:
    """Merge API helpers by lowercased label; endpoint is first-wins, exports are unioned."""
    collection: KeyedCollection[ApiCoverage] = KeyedCollection(coverage_label_key, ApiCoverage.merge)
    return _merge_into(collection, normalize_api_coverage, existing, additions)
