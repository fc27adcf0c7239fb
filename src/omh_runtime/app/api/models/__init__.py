"""Pydantic models for API responses."""

from omh_runtime.app.api.models.payloads import (
    ErrorDetail,
    ErrorResponse,
    PayloadIdentifierResponse,
    ReadPlanResponse,
)

__all__ = [
    "PayloadIdentifierResponse",
    "ReadPlanResponse",
    "ErrorDetail",
    "ErrorResponse",
]
