"""
Evaluation request domain model.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EvaluationRequest(BaseModel):
    """
    Body of ``POST /api/evaluate``.

    Fields are untyped at the schema level: a missing or unusable value
    surfaces as the service's own 400 error instead of a schema rejection.
    ``testCase`` stays a plain mapping because the coverage engine accepts
    many loosely-shaped aliases inside it.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    provider_id: Any = Field(
        default=None, alias="providerId", description="AI provider selected in the app"
    )
    credentials: Any = Field(
        default=None, description="Provider credentials, e.g. {'apiKey': '...'}"
    )
    test_case: Any = Field(
        default=None,
        alias="testCase",
        description="Test case with title, steps and optional supportingContext",
    )
