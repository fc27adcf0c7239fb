from __future__ import annotations

from fastapi import FastAPI

from omh_runtime.app.api.routers import payloads_router
from omh_runtime.observability.logging import configure_logging

configure_logging()

app = FastAPI(title="OMH Runtime")
app.include_router(payloads_router, prefix="/v1", tags=["payloads"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
