"""Pydantic models for payload API responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class PayloadIdentifierResponse(BaseModel):
    """A resolved payload ID."""

    payload_id: str
    kind: str = Field(..., description="campaign/observer/body_media/runkeeper/healthvault/ginger_io/mind_my_meds/entra")
    root_id: str
    sub_id: str | None = None
    details: dict[str, Any] = Field(default_factory=dict, description="Provider-specific identifier fields")


class ReadPlanResponse(BaseModel):
    """The read request that would be executed for a payload ID."""

    payload_id: str
    kind: str
    provider: str | None = Field(None, description="None when the provider generates no sub-request")
    sub_request: dict[str, Any] | None = None


class ErrorDetail(BaseModel):
    code: str
    kind: str
    message: str
    field: str | None = None


class ErrorResponse(BaseModel):
    error: ErrorDetail
