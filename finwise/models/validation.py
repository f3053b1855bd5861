"""Validation result models shared by the validator and the UI."""

from typing import Optional

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """One problem with one submitted form field."""

    field: str = Field(..., description="Form field the issue is about, e.g. 'amount'")
    issue_type: str = Field(
        ...,
        description="Machine-readable kind: 'missing', 'not_a_number', 'not_positive', 'invalid_format', ..."
    )
    message: str = Field(..., description="Message shown next to the field")
    severity: str = Field(default="error", pattern="^(error|warning|info)$")
    suggested_fix: Optional[str] = None
