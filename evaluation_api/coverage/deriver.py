"""
Coverage derived from the step list alone.

Each step may carry a ``context`` object whose ``resourceType`` says what the
step describes (a flow helper, an API helper, an HTTP call, SQL, ...).
``derive_coverage_from_steps`` folds those facts into a
``CoverageAccumulator`` that lives for exactly one call.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from evaluation_api.core.constants import (
    DEFAULT_API_LABEL,
    DEFAULT_FLOW_LABEL,
    SQL_SUMMARY_BULLET,
    ResourceType,
)
from evaluation_api.coverage.containers import KeyedCollection
from evaluation_api.coverage.models import (
    ApiCoverage,
    DerivedCoverage,
    FlowCoverage,
    HttpCallRecord,
    SqlEntry,
    coverage_label_key,
    http_collection,
    label_key,
    sql_collection,
)
from evaluation_api.coverage.normalizers import (
    as_list,
    first_present,
    normalize_http_call,
    normalize_method_detail,
    normalize_sql_entry,
)


def parse_sql_summary(text: str) -> list[tuple[str, str]]:
    """
    Parse ``• <origin>: <query>`` bullet lines into (origin, query) pairs.

    Only the first colon separates origin from query. Lines without the
    bullet, without a colon, or with an empty query are skipped.
    """
    pairs: list[tuple[str, str]] = []
    for line in text.split("\n"):
        trimmed = line.strip()
        if not trimmed.startswith(SQL_SUMMARY_BULLET):
            continue
        origin, separator, query = trimmed[len(SQL_SUMMARY_BULLET):].partition(":")
        query = query.strip()
        if separator and query:
            pairs.append((origin.strip(), query))
    return pairs


@dataclass
class CoverageAccumulator:
    """Registries filled while walking one request's steps."""

    flows: KeyedCollection[FlowCoverage] = field(
        default_factory=lambda: KeyedCollection(coverage_label_key, FlowCoverage.merge)
    )
    apis: KeyedCollection[ApiCoverage] = field(
        default_factory=lambda: KeyedCollection(coverage_label_key, ApiCoverage.merge)
    )
    http_calls: KeyedCollection[HttpCallRecord] = field(default_factory=http_collection)
    sql_queries: KeyedCollection[SqlEntry] = field(default_factory=sql_collection)

    def ensure_flow(self, label: Optional[str]) -> FlowCoverage:
        label = label or DEFAULT_FLOW_LABEL
        flow = self.flows.get(label_key(label))
        if flow is None:
            flow = self.flows.add(FlowCoverage(label=label))
        return flow

    def ensure_api(self, label: Optional[str]) -> ApiCoverage:
        label = label or DEFAULT_API_LABEL
        api = self.apis.get(label_key(label))
        if api is None:
            api = self.apis.add(ApiCoverage(label=label))
        return api

    def register_http(
        self,
        method: Any,
        url: Any,
        source: Any = None,
        payload: Any = None,
    ) -> None:
        call = normalize_http_call({"method": method, "url": url, "source": source, "payload": payload})
        if call is not None:
            self.http_calls.add(call)

    def register_sql(self, query: Any, origin: Any = None) -> None:
        entry = normalize_sql_entry({"query": query, "origin": origin})
        if entry is not None:
            self.sql_queries.add(entry)

    def result(self) -> DerivedCoverage:
        return DerivedCoverage(
            flows=self.flows.values(),
            apis=self.apis.values(),
            http_calls=self.http_calls.values(),
            sql_queries=self.sql_queries.values(),
        )


@dataclass
class StepContext:
    """The parts of one step the deriver looks at."""

    action: Any
    context: Mapping[str, Any]
    details: Mapping[str, Any]
    label: Optional[str]

    @classmethod
    def from_step(cls, step: Any) -> StepContext:
        step = step if isinstance(step, Mapping) else {}
        context = step.get("context")
        context = context if isinstance(context, Mapping) else {}
        details = context.get("details")
        details = details if isinstance(details, Mapping) else {}
        label = context.get("resourcePath") or first_present(details, "flowLabel", "apiLabel", "helperLabel")
        return cls(
            action=step.get("action"),
            context=context,
            details=details,
            label=label if isinstance(label, str) else None,
        )

    @property
    def resource_type(self) -> str:
        return str(self.context.get("resourceType") or "").lower()

    @property
    def first_action_line(self) -> Optional[str]:
        return self.action.split("\n")[0] if isinstance(self.action, str) else None

    def value(self, name: str) -> Any:
        """``details.<name>`` falling back to ``context.<name>``."""
        return self.details.get(name) or self.context.get(name)

    @property
    def payload(self) -> Any:
        return self.details.get("payload") or self.details.get("body")


# =============================================================================
# Per-discriminator handlers
# =============================================================================


def _register_method(container: FlowCoverage, step: StepContext) -> None:
    detail = normalize_method_detail(step.details)
    if detail is not None:
        container.methods.add(detail)
    if not container.summary and step.first_action_line is not None:
        container.summary = step.first_action_line


def _register_container_http(acc: CoverageAccumulator, container: FlowCoverage, step: StepContext) -> None:
    method, url = step.value("method"), step.value("url")
    container.http_calls.add(normalize_http_call({"method": method, "url": url}))
    acc.register_http(method, url, container.label, step.payload)


def _register_container_sql(acc: CoverageAccumulator, container: FlowCoverage, query: Any) -> None:
    entry = normalize_sql_entry({"query": query, "origin": container.label})
    if entry is None:
        return
    container.sql_queries.add(entry)
    acc.register_sql(query, container.label)


def _apply_flow_method(acc: CoverageAccumulator, step: StepContext) -> None:
    _register_method(acc.ensure_flow(step.label), step)


def _apply_api_method(acc: CoverageAccumulator, step: StepContext) -> None:
    _register_method(acc.ensure_api(step.label), step)


def _apply_flow(acc: CoverageAccumulator, step: StepContext) -> None:
    flow = acc.ensure_flow(step.label)
    if not flow.summary and isinstance(step.action, str):
        flow.summary = step.action


def _apply_api(acc: CoverageAccumulator, step: StepContext) -> None:
    api = acc.ensure_api(step.label)
    if not api.summary and isinstance(step.action, str):
        api.summary = step.action
    endpoint = step.context.get("endpoint")
    if endpoint and not api.endpoint:
        api.endpoint = str(endpoint)

    api.exports.update(str(item) for item in as_list(step.details.get("exports")) if item)

    for call in as_list(step.details.get("httpCalls")):
        if not isinstance(call, Mapping):
            continue
        api.http_calls.add(normalize_http_call({"method": call.get("method"), "url": call.get("url")}))
        acc.register_http(call.get("method"), call.get("url"), api.label)

    for sample in as_list(step.details.get("sqlSamples")):
        query = sample.get("query") if isinstance(sample, Mapping) else sample
        _register_container_sql(acc, api, query)


def _apply_flow_http(acc: CoverageAccumulator, step: StepContext) -> None:
    _register_container_http(acc, acc.ensure_flow(step.label), step)


def _apply_api_http(acc: CoverageAccumulator, step: StepContext) -> None:
    _register_container_http(acc, acc.ensure_api(step.label), step)


def _apply_flow_sql(acc: CoverageAccumulator, step: StepContext) -> None:
    flow = acc.ensure_flow(step.label)
    _register_container_sql(acc, flow, step.details.get("query") or step.action)


def _apply_api_sql(acc: CoverageAccumulator, step: StepContext) -> None:
    api = acc.ensure_api(step.label)
    _register_container_sql(acc, api, step.details.get("query") or step.action)


def _apply_http_call(acc: CoverageAccumulator, step: StepContext) -> None:
    source = step.context.get("sourceLabel") or step.details.get("sourceLabel")
    acc.register_http(step.value("method"), step.value("url"), source, step.payload)


def _apply_sql_summary(acc: CoverageAccumulator, step: StepContext) -> None:
    if not isinstance(step.action, str):
        return
    for origin, query in parse_sql_summary(step.action):
        acc.register_sql(query, origin)


StepHandler = Callable[[CoverageAccumulator, StepContext], None]

STEP_HANDLERS: dict[str, StepHandler] = {
    ResourceType.FLOW_METHOD.value: _apply_flow_method,
    ResourceType.API_METHOD.value: _apply_api_method,
    ResourceType.FLOW.value: _apply_flow,
    ResourceType.API.value: _apply_api,
    ResourceType.FLOW_HTTP.value: _apply_flow_http,
    ResourceType.API_HTTP.value: _apply_api_http,
    ResourceType.FLOW_SQL.value: _apply_flow_sql,
    ResourceType.API_SQL.value: _apply_api_sql,
    ResourceType.HTTP_CALL.value: _apply_http_call,
    ResourceType.SQL_SUMMARY.value: _apply_sql_summary,
}


def derive_coverage_from_steps(steps: Iterable[Any]) -> DerivedCoverage:
    """
    Synthesize flow, API, HTTP and SQL coverage from step metadata.

    Steps without a known ``context.resourceType`` contribute nothing. The
    returned collections are already deduplicated by identity key.
    """
    acc = CoverageAccumulator()
    for raw_step in steps:
        step = StepContext.from_step(raw_step)
        handler = STEP_HANDLERS.get(step.resource_type)
        if handler is not None:
            handler(acc, step)
    return acc.result()
