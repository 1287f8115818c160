"""
Comprehensive coverage plan for one test case.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from evaluation_api.core.logging import get_logger
from evaluation_api.coverage.assemblers import (
    build_api_coverage_entries,
    build_flow_coverage_entries,
    build_http_coverage_entries,
    build_spec_step_coverage,
    build_sql_coverage_entries,
    plural,
)
from evaluation_api.coverage.deriver import derive_coverage_from_steps
from evaluation_api.coverage.mergers import (
    merge_api_coverage,
    merge_flow_coverage,
    merge_http_calls,
    merge_sql_entries,
)
from evaluation_api.coverage.normalizers import as_list

logger = get_logger(__name__)


def build_plan_summary(title: Any, step_count: int, flow_count: int, api_count: int) -> str:
    return (
        f'Validate "{title}" end to end, exercising {plural(step_count, "spec step")} '
        f'plus {plural(flow_count, "flow helper")} and {plural(api_count, "API integration")}.'
    )


def build_comprehensive_plan(test_case: Mapping[str, Any]) -> dict[str, Any]:
    """
    Derive, merge and render the coverage plan of a test case.

    Facts supplied in ``supportingContext`` are merged before facts derived
    from the steps, so caller-supplied values win scalar conflicts.

    Args:
        test_case: The ``testCase`` object of an evaluation request

    Returns:
        JSON-serializable plan with counts, highlights, spec steps, flows,
        APIs, HTTP calls and SQL queries
    """
    steps = as_list(test_case.get("steps"))
    supporting = test_case.get("supportingContext")
    supporting = supporting if isinstance(supporting, Mapping) else {}

    derived = derive_coverage_from_steps(steps)
    flows = build_flow_coverage_entries(merge_flow_coverage(supporting.get("flows"), derived.flows))
    apis = build_api_coverage_entries(merge_api_coverage(supporting.get("apis"), derived.apis))
    http_calls = build_http_coverage_entries(merge_http_calls(supporting.get("httpCalls"), derived.http_calls))
    sql_queries = build_sql_coverage_entries(merge_sql_entries(supporting.get("sqlQueries"), derived.sql_queries))

    functional_highlights = [f"Flow: {flow['label']}" for flow in flows]
    functional_highlights.extend(f"API: {api['label']}" for api in apis)

    logger.debug(
        "Coverage plan assembled",
        steps=len(steps),
        flows=len(flows),
        apis=len(apis),
        http_calls=len(http_calls),
        sql_queries=len(sql_queries),
    )

    title = test_case.get("title")
    return {
        "title": title,
        "summary": build_plan_summary(title, len(steps), len(flows), len(apis)),
        "coverage": {
            "specSteps": len(steps),
            "flows": len(flows),
            "apis": len(apis),
            "httpCalls": len(http_calls),
            "sqlQueries": len(sql_queries),
        },
        "functionalHighlights": functional_highlights,
        "spec": {"steps": build_spec_step_coverage(steps)},
        "flows": flows,
        "apis": apis,
        "httpCalls": http_calls,
        "sqlQueries": sql_queries,
    }
