"""API routers for OMH payload endpoints."""

from omh_runtime.app.api.routers.payloads import router as payloads_router

__all__ = ["payloads_router"]
