"""Routes exposing tracked keyed counters and replaying serialized reports."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from keyed_metrics.counters.keys import KEY_TYPES, KeyTypeRegistry
from keyed_metrics.counters.report import CounterReporter, decode_report
from keyed_metrics.errors import MalformedData

router = APIRouter()


async def get_reporter(request: Request) -> CounterReporter:
    reporter: CounterReporter | None = getattr(request.app.state, "reporter", None)
    if reporter is None:
        raise RuntimeError("Counter reporter not configured on application state")
    return reporter


async def get_key_types(request: Request) -> KeyTypeRegistry:
    registry: KeyTypeRegistry | None = getattr(request.app.state, "key_types", None)
    return registry if registry is not None else KEY_TYPES


@router.get("")
async def list_counters(reporter: CounterReporter = Depends(get_reporter)) -> JSONResponse:
    return JSONResponse({"ok": True, "data": reporter.to_json()})


@router.post("/replay")
async def replay_report(
    payload: dict[str, Any] = Body(...),
    registry: KeyTypeRegistry = Depends(get_key_types),
) -> JSONResponse:
    """Decode a posted report and echo the recovered values per key."""

    try:
        results = decode_report(payload, registry)
    except MalformedData as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    data: dict[str, Any] = {}
    for name, (key_type, result) in results.items():
        data[name] = {
            "unit": result.unit.display_name,
            "type": key_type.type_tag(),
            "values": {key_type.display_name(key): value for key, value in result.items()},
        }
    return JSONResponse({"ok": True, "data": data})
