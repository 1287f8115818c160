"""
Normalization of loosely-shaped coverage records.

Each ``normalize_*`` function accepts whatever the caller supplied (a JSON
object using any of the accepted aliases, or an already-normalized record)
and returns a fresh record, or ``None`` when the input lacks its identifying
field. Rejected inputs are dropped silently by the mergers.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Optional

from evaluation_api.core.constants import (
    DEFAULT_API_LABEL,
    DEFAULT_FLOW_LABEL,
    DEFAULT_HTTP_METHOD,
    DYNAMIC_URL,
)
from evaluation_api.coverage.containers import KeyedCollection, OrderedSet
from evaluation_api.coverage.models import (
    ApiCoverage,
    FlowCoverage,
    HttpCallRecord,
    MethodDetail,
    SqlEntry,
    http_collection,
    method_collection,
    sql_collection,
)


def as_list(value: Any) -> list[Any]:
    """Return ``value`` as a list when it is a sequence of records, else an empty list."""
    if isinstance(value, (list, tuple, OrderedSet, KeyedCollection)):
        return list(value)
    return []


def first_present(source: Mapping[str, Any], *names: str) -> Any:
    """Value of the first alias in ``names`` that holds a truthy value."""
    for name in names:
        value = source.get(name)
        if value:
            return value
    return None


def to_text(value: Any) -> str:
    if not value:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value if item not in (None, ""))
    return str(value)


def _payload_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


def _sql_origin(raw: Mapping[str, Any]) -> Any:
    # A list, even an empty one, ends the alias search
    for name in ("origin", "flowLabel", "apiLabel"):
        value = raw.get(name)
        if value or isinstance(value, (list, tuple)):
            return value
    return None


def _line_number(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


# =============================================================================
# Fact records
# =============================================================================


def normalize_method_detail(raw: Any) -> Optional[MethodDetail]:
    """
    Canonicalize a helper-method fact.

    Aliases, in priority order: ``methodName``/``name``,
    ``summaryText``/``summary``, ``expectedResultText``/``expectedResult``,
    ``params``/``parameters``. Returns None when no method name is present.
    """
    if isinstance(raw, MethodDetail):
        return raw.copy()
    if not isinstance(raw, Mapping):
        return None

    method_name = to_text(first_present(raw, "methodName", "name"))
    if not method_name:
        return None

    return MethodDetail(
        method_name=method_name,
        class_name=to_text(raw.get("className")),
        object_name=to_text(raw.get("objectName")),
        summary_text=to_text(first_present(raw, "summaryText", "summary")),
        expected_result_text=to_text(first_present(raw, "expectedResultText", "expectedResult")),
        params=to_text(first_present(raw, "params", "parameters")),
        snippet=to_text(raw.get("snippet")),
        is_async=bool(raw.get("isAsync")),
        is_static=bool(raw.get("isStatic")),
        line=_line_number(raw.get("line")),
    )


def normalize_http_call(raw: Any) -> Optional[HttpCallRecord]:
    """
    Canonicalize an outbound HTTP call.

    ``method``/``httpMethod`` (uppercased, default ``REQUEST``),
    ``url``/``endpoint`` (default ``(dynamic URL)``), sources from
    ``sources[]``, ``source`` and ``sourceLabel``, payloads from
    ``payload``/``body``/``requestBody`` and ``payloads[]``.
    """
    if isinstance(raw, HttpCallRecord):
        return raw.copy()
    if not isinstance(raw, Mapping):
        return None

    method = to_text(first_present(raw, "method", "httpMethod")) or DEFAULT_HTTP_METHOD
    url = to_text(first_present(raw, "url", "endpoint")) or DYNAMIC_URL

    sources = OrderedSet(str(item) for item in as_list(raw.get("sources")) if item)
    for name in ("source", "sourceLabel"):
        if raw.get(name):
            sources.add(str(raw[name]))

    payloads = OrderedSet()
    payload = first_present(raw, "payload", "body", "requestBody")
    if payload:
        payloads.add(_payload_text(payload))
    payloads.update(_payload_text(item) for item in as_list(raw.get("payloads")) if item)

    return HttpCallRecord(method=method.upper(), url=url, sources=sources, payloads=payloads)


def normalize_sql_entry(raw: Any) -> Optional[SqlEntry]:
    """
    Canonicalize a SQL fact from a bare query string or an object with ``query``.

    Origin labels come from ``origin``/``flowLabel``/``apiLabel`` and may be a
    single value or a list. Returns None when the trimmed query is empty.
    """
    if isinstance(raw, SqlEntry):
        return raw.copy()
    if isinstance(raw, str):
        query, origin = raw, None
    elif isinstance(raw, Mapping):
        query, origin = raw.get("query"), _sql_origin(raw)
    else:
        return None

    if not isinstance(query, str) or not query.strip():
        return None

    entry = SqlEntry(query=query.strip())
    if isinstance(origin, (list, tuple)):
        entry.origins.update(str(item) for item in origin if item)
    elif origin:
        entry.origins.add(str(origin))
    return entry


# =============================================================================
# Helper containers
# =============================================================================


def _fill_container(coverage: FlowCoverage, raw: Mapping[str, Any], methods: Any) -> None:
    coverage.summary = to_text(raw.get("summary"))
    coverage.function_names.update(
        str(name) for name in as_list(raw.get("functionNames")) if name not in (None, "")
    )
    coverage.methods = method_collection(
        [detail for detail in map(normalize_method_detail, as_list(methods)) if detail]
    )
    coverage.http_calls = http_collection(
        [call for call in map(normalize_http_call, as_list(raw.get("httpCalls"))) if call]
    )
    coverage.sql_queries = sql_collection(
        [entry for entry in map(normalize_sql_entry, as_list(raw.get("sqlQueries"))) if entry]
    )


def normalize_flow_coverage(raw: Any) -> Optional[FlowCoverage]:
    """Canonicalize a flow helper; label from ``label``/``name``/``path``."""
    if isinstance(raw, FlowCoverage) and not isinstance(raw, ApiCoverage):
        flow = FlowCoverage(label=raw.label, summary=raw.summary)
        flow.merge(raw)
        return flow
    if not isinstance(raw, Mapping):
        return None

    flow = FlowCoverage(label=to_text(first_present(raw, "label", "name", "path")) or DEFAULT_FLOW_LABEL)
    _fill_container(flow, raw, raw.get("methods") or raw.get("invokedMethods"))
    return flow


def normalize_api_coverage(raw: Any) -> Optional[ApiCoverage]:
    """Canonicalize an API helper; adds ``endpoint`` and ``exports``."""
    if isinstance(raw, ApiCoverage):
        api = ApiCoverage(label=raw.label, summary=raw.summary, endpoint=raw.endpoint)
        api.merge(raw)
        return api
    if not isinstance(raw, Mapping):
        return None

    api = ApiCoverage(label=to_text(first_present(raw, "label", "name", "path")) or DEFAULT_API_LABEL)
    _fill_container(api, raw, raw.get("methods"))
    api.endpoint = to_text(raw.get("endpoint"))
    api.exports.update(str(item) for item in as_list(raw.get("exports")) if item not in (None, ""))
    return api
