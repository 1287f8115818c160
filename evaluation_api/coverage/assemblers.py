"""
Display-ready coverage entries.

Turns merged coverage records into the JSON shapes the renderer shows,
including the one-line summaries with bounded samples.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Iterable, Sequence

from evaluation_api.core.constants import (
    API_EXPORT_SAMPLE,
    API_HTTP_SAMPLE,
    API_METHOD_SAMPLE,
    API_SUMMARY_FALLBACK,
    DEFAULT_API_LABEL,
    DEFAULT_FLOW_LABEL,
    DEFAULT_STEP_SOURCE,
    DYNAMIC_URL,
    ELLIPSIS,
    FLOW_FUNCTION_SAMPLE,
    FLOW_HTTP_SAMPLE,
    FLOW_SUMMARY_FALLBACK,
    HEADLINE_MAX_LENGTH,
    SUMMARY_SEPARATOR,
)
from evaluation_api.coverage.models import ApiCoverage, FlowCoverage, HttpCallRecord, SqlEntry

WHITESPACE_PATTERN = re.compile(r"\s+")
FIRST_SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]?")


def plural(count: int, noun: str) -> str:
    """``1 step`` / ``2 steps``."""
    return f"{count} {noun}{'' if count == 1 else 's'}"


def _name_sample(names: Sequence[str], limit: int) -> str:
    sample = ", ".join(names[:limit])
    return f"{sample}{ELLIPSIS}" if len(names) > limit else sample


def _http_sample(calls: Sequence[HttpCallRecord], limit: int) -> str:
    sample = "; ".join(f"{call.method.upper()} {call.url or DYNAMIC_URL}" for call in calls[:limit])
    if len(calls) > limit:
        sample += f" (+{len(calls) - limit} more)"
    return sample


def _valid_facts(coverage: FlowCoverage) -> tuple[list, list, list]:
    methods = [detail for detail in coverage.methods if detail.method_name]
    http_calls = [call for call in coverage.http_calls if call.method and call.url]
    sql_queries = [entry for entry in coverage.sql_queries if entry.query]
    return methods, http_calls, sql_queries


def build_flow_coverage_entries(flows: Iterable[FlowCoverage]) -> list[dict[str, Any]]:
    entries = []
    for flow in flows:
        function_names = [name for name in flow.function_names if name]
        methods, http_calls, sql_queries = _valid_facts(flow)

        clauses = []
        if function_names:
            clauses.append(f"Functions: {_name_sample(function_names, FLOW_FUNCTION_SAMPLE)}")
        if methods:
            clauses.append(f"Spec invokes {plural(len(methods), 'helper method')}.")
        if http_calls:
            clauses.append(f"Outbound HTTP: {_http_sample(http_calls, FLOW_HTTP_SAMPLE)}")
        if sql_queries:
            clauses.append(f"Database touchpoints: {len(sql_queries)}")

        entries.append(
            {
                "label": flow.label or DEFAULT_FLOW_LABEL,
                "summary": SUMMARY_SEPARATOR.join(clauses) or FLOW_SUMMARY_FALLBACK,
                "functionNames": function_names,
                "invokedMethods": [detail.to_dict() for detail in methods],
                "httpCalls": [call.to_dict() for call in http_calls],
                "sqlQueries": [entry.to_dict() for entry in sql_queries],
            }
        )
    return entries


def build_api_coverage_entries(apis: Iterable[ApiCoverage]) -> list[dict[str, Any]]:
    entries = []
    for api in apis:
        methods, http_calls, sql_queries = _valid_facts(api)
        exports = [name for name in api.exports if name]

        clauses = []
        if api.endpoint:
            clauses.append(f"Primary endpoint: {api.endpoint}")
        if methods:
            method_names = [detail.method_name for detail in methods]
            clauses.append(f"Helper methods: {_name_sample(method_names, API_METHOD_SAMPLE)}")
        if http_calls:
            clauses.append(f"HTTP coverage: {_http_sample(http_calls, API_HTTP_SAMPLE)}")
        if sql_queries:
            clauses.append(f"Database queries: {len(sql_queries)}")
        if exports:
            clauses.append(f"Exports: {_name_sample(exports, API_EXPORT_SAMPLE)}")

        entries.append(
            {
                "label": api.label or DEFAULT_API_LABEL,
                "endpoint": api.endpoint or "",
                "summary": SUMMARY_SEPARATOR.join(clauses) or API_SUMMARY_FALLBACK,
                "methods": [detail.to_dict() for detail in methods],
                "httpCalls": [call.to_dict() for call in http_calls],
                "sqlQueries": [entry.to_dict() for entry in sql_queries],
                "exports": exports,
            }
        )
    return entries


def build_http_coverage_entries(calls: Iterable[HttpCallRecord]) -> list[dict[str, Any]]:
    return [
        {
            "method": (call.method or "").upper(),
            "url": call.url or DYNAMIC_URL,
            "sources": [source for source in call.sources if source],
            "payloads": [payload for payload in call.payloads if payload],
        }
        for call in calls
    ]


def build_sql_coverage_entries(entries: Iterable[SqlEntry]) -> list[dict[str, Any]]:
    """SQL entries with a 1-based ``index``; ``origin`` is omitted when unknown."""
    return [{"index": index, **entry.to_dict()} for index, entry in enumerate(entries, start=1)]


def normalize_step_headline(step: Any, index: int) -> str:
    """
    First sentence of the step action, whitespace collapsed.

    Longer than 140 characters is cut to 137 plus an ellipsis; an empty
    action becomes ``Step <index + 1>``.
    """
    action = step.get("action") if isinstance(step, Mapping) else None
    text = WHITESPACE_PATTERN.sub(" ", str(action or "")).strip()
    if not text:
        return f"Step {index + 1}"

    match = FIRST_SENTENCE_PATTERN.search(text)
    snippet = match.group(0) if match else text
    if len(snippet) > HEADLINE_MAX_LENGTH:
        return f"{snippet[:HEADLINE_MAX_LENGTH - 3]}{ELLIPSIS}"
    return snippet


def build_spec_step_coverage(steps: Sequence[Any]) -> list[dict[str, Any]]:
    entries = []
    for position, step in enumerate(steps):
        data = step if isinstance(step, Mapping) else {}
        context = data.get("context")
        resource_type = context.get("resourceType") if isinstance(context, Mapping) else None
        entries.append(
            {
                "index": data.get("index") or position + 1,
                "headline": normalize_step_headline(data, position),
                "action": data.get("action") or "",
                "expectedResult": data.get("expectedResult") or "",
                "source": resource_type or DEFAULT_STEP_SOURCE,
            }
        )
    return entries
