"""
Coverage data model.

Records are built fresh for every request. Set-valued fields are kept as
``OrderedSet`` and only turned into lists by ``to_dict`` at the presentation
boundary; output keys are camelCase because the Electron renderer reads them
as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from evaluation_api.core.constants import (
    DEFAULT_API_LABEL,
    DEFAULT_FLOW_LABEL,
    DEFAULT_HTTP_METHOD,
    DYNAMIC_URL,
)
from evaluation_api.coverage.containers import KeyedCollection, OrderedSet


# =============================================================================
# Identity keys
# =============================================================================


def method_detail_key(detail: MethodDetail) -> tuple[str, str, str]:
    """(method name, object name, line) with names lowercased and a missing line as ''."""
    line = "" if detail.line is None else str(detail.line)
    return (detail.method_name.lower(), detail.object_name.lower(), line)


def http_call_key(call: HttpCallRecord) -> str:
    return f"{call.method}:{call.url}"


def sql_entry_key(entry: SqlEntry) -> str:
    return entry.query


def label_key(label: str) -> str:
    return label.lower()


def coverage_label_key(coverage: FlowCoverage) -> str:
    return label_key(coverage.label)


# =============================================================================
# Fact records
# =============================================================================


@dataclass
class MethodDetail:
    """A single helper method invoked by a flow or API helper."""

    method_name: str
    class_name: str = ""
    object_name: str = ""
    summary_text: str = ""
    expected_result_text: str = ""
    params: str = ""
    snippet: str = ""
    is_async: bool = False
    is_static: bool = False
    line: Optional[int] = None

    def merge(self, other: MethodDetail) -> None:
        """Fill empty scalars from ``other`` and OR the flags together."""
        self.summary_text = self.summary_text or other.summary_text
        self.expected_result_text = self.expected_result_text or other.expected_result_text
        self.params = self.params or other.params
        self.snippet = self.snippet or other.snippet
        self.class_name = self.class_name or other.class_name
        self.is_async = self.is_async or other.is_async
        self.is_static = self.is_static or other.is_static

    def copy(self) -> MethodDetail:
        return MethodDetail(**self.__dict__)

    def to_dict(self) -> dict[str, Any]:
        return {
            "methodName": self.method_name,
            "className": self.class_name,
            "objectName": self.object_name,
            "summaryText": self.summary_text,
            "expectedResultText": self.expected_result_text,
            "params": self.params,
            "snippet": self.snippet,
            "isAsync": self.is_async,
            "isStatic": self.is_static,
            "line": self.line,
        }


@dataclass
class HttpCallRecord:
    """One outbound HTTP call shape and everything observed about it."""

    method: str = DEFAULT_HTTP_METHOD
    url: str = DYNAMIC_URL
    sources: OrderedSet = field(default_factory=OrderedSet)
    payloads: OrderedSet = field(default_factory=OrderedSet)

    def merge(self, other: HttpCallRecord) -> None:
        self.sources.update(other.sources)
        self.payloads.update(other.payloads)

    def copy(self) -> HttpCallRecord:
        return HttpCallRecord(
            method=self.method,
            url=self.url,
            sources=self.sources.copy(),
            payloads=self.payloads.copy(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "url": self.url,
            "sources": self.sources.to_list(),
            "payloads": self.payloads.to_list(),
        }


@dataclass
class SqlEntry:
    """One SQL statement and the helpers it was attributed to."""

    query: str
    origins: OrderedSet = field(default_factory=OrderedSet)

    @property
    def origin(self) -> Optional[str]:
        return ", ".join(self.origins) if self.origins else None

    def merge(self, other: SqlEntry) -> None:
        self.origins.update(other.origins)

    def copy(self) -> SqlEntry:
        return SqlEntry(query=self.query, origins=self.origins.copy())

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"query": self.query}
        if self.origin is not None:
            data["origin"] = self.origin
        return data


def method_collection(records: Optional[list[MethodDetail]] = None) -> KeyedCollection[MethodDetail]:
    return KeyedCollection(method_detail_key, MethodDetail.merge, records)


def http_collection(records: Optional[list[HttpCallRecord]] = None) -> KeyedCollection[HttpCallRecord]:
    return KeyedCollection(http_call_key, HttpCallRecord.merge, records)


def sql_collection(records: Optional[list[SqlEntry]] = None) -> KeyedCollection[SqlEntry]:
    return KeyedCollection(sql_entry_key, SqlEntry.merge, records)


# =============================================================================
# Helper containers
# =============================================================================


@dataclass
class FlowCoverage:
    """A named reusable flow helper and the facts attributed to it."""

    label: str = DEFAULT_FLOW_LABEL
    summary: str = ""
    function_names: OrderedSet = field(default_factory=OrderedSet)
    methods: KeyedCollection[MethodDetail] = field(default_factory=method_collection)
    http_calls: KeyedCollection[HttpCallRecord] = field(default_factory=http_collection)
    sql_queries: KeyedCollection[SqlEntry] = field(default_factory=sql_collection)

    def merge(self, other: FlowCoverage) -> None:
        self.summary = self.summary or other.summary
        self.function_names.update(other.function_names)
        for detail in other.methods:
            self.methods.add(detail.copy())
        for call in other.http_calls:
            self.http_calls.add(call.copy())
        for entry in other.sql_queries:
            self.sql_queries.add(entry.copy())


@dataclass
class ApiCoverage(FlowCoverage):
    """A named API integration helper; adds an endpoint and exported names."""

    label: str = DEFAULT_API_LABEL
    endpoint: str = ""
    exports: OrderedSet = field(default_factory=OrderedSet)

    def merge(self, other: FlowCoverage) -> None:
        super().merge(other)
        if isinstance(other, ApiCoverage):
            self.endpoint = self.endpoint or other.endpoint
            self.exports.update(other.exports)


@dataclass
class DerivedCoverage:
    """Coverage synthesized from the step list alone."""

    flows: list[FlowCoverage] = field(default_factory=list)
    apis: list[ApiCoverage] = field(default_factory=list)
    http_calls: list[HttpCallRecord] = field(default_factory=list)
    sql_queries: list[SqlEntry] = field(default_factory=list)
