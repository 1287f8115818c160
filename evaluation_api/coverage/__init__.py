"""
Coverage aggregation and deduplication engine.
"""

from evaluation_api.coverage.deriver import derive_coverage_from_steps, parse_sql_summary
from evaluation_api.coverage.mergers import (
    merge_api_coverage,
    merge_flow_coverage,
    merge_http_calls,
    merge_method_details,
    merge_sql_entries,
    merge_string_lists,
)
from evaluation_api.coverage.models import (
    ApiCoverage,
    DerivedCoverage,
    FlowCoverage,
    HttpCallRecord,
    MethodDetail,
    SqlEntry,
)
from evaluation_api.coverage.normalizers import (
    normalize_http_call,
    normalize_method_detail,
    normalize_sql_entry,
)
from evaluation_api.coverage.plan_builder import build_comprehensive_plan

__all__ = [
    "ApiCoverage",
    "DerivedCoverage",
    "FlowCoverage",
    "HttpCallRecord",
    "MethodDetail",
    "SqlEntry",
    "build_comprehensive_plan",
    "derive_coverage_from_steps",
    "merge_api_coverage",
    "merge_flow_coverage",
    "merge_http_calls",
    "merge_method_details",
    "merge_sql_entries",
    "merge_string_lists",
    "normalize_http_call",
    "normalize_method_detail",
    "normalize_sql_entry",
    "parse_sql_summary",
]
