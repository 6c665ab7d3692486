"""FastAPI application exposing process metrics and keyed counter reports."""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from keyed_metrics.config import get_settings
from keyed_metrics.counters.keys import KEY_TYPES
from keyed_metrics.counters.report import REPORTER
from keyed_metrics.counters.routes import router as counters_router
from keyed_metrics.lib.logger import configure_logging
from keyed_metrics.lib.metrics import METRICS

settings = get_settings()

configure_logging()
app = FastAPI(title=settings.service_name, version="0.1.0")

app.state.metrics = METRICS
app.state.reporter = REPORTER
app.state.key_types = KEY_TYPES

app.include_router(counters_router, prefix="/metrics/counters", tags=["counters"])


@app.get("/health", tags=["system"], summary="Health check")
async def health_check() -> JSONResponse:
    """Return liveness response for uptime monitoring."""
    payload = {"ok": True, "data": {"status": "healthy"}}
    return JSONResponse(content=payload)


@app.get("/metrics", tags=["system"], summary="Metrics endpoint")
async def metrics_endpoint() -> JSONResponse:
    snapshot = METRICS.snapshot()
    return JSONResponse({"ok": True, "data": snapshot})
