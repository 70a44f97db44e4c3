"""
FastAPI front end for triggering scans from lab tooling.
Runs each scan synchronously and returns the run summary.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ValidationError

from core.config import settings
from core.models import ScanConfig, ScanSummary
from core.sink import ensure_parent_dir
from pipeline.orchestrator import Orchestrator

log = logging.getLogger(__name__)

app = FastAPI(title="portgrab API", version="1.0")
ensure_parent_dir(settings.log_path)
orch = Orchestrator()


class ScanPayload(BaseModel):
    target: str
    start_port: int
    end_port: int
    workers: Optional[int] = None


@app.post("/api/scan", response_model=ScanSummary)
def api_scan(payload: ScanPayload):
    params = payload.model_dump(exclude_none=True)
    try:
        config = ScanConfig(**params)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="; ".join(err["msg"] for err in exc.errors())) from exc
    try:
        return orch.scan(config)
    except Exception as exc:  # noqa: BLE001
        log.exception("scan failed")
        raise HTTPException(status_code=500, detail="scan failed") from exc


@app.get("/api/health")
def api_health():
    timings = orch.timings
    return {
        "log_path": str(orch.sink.path) if orch.sink.path else None,
        "sink_failures": orch.sink.failures,
        "default_workers": settings.default_workers,
        "connect_timeout_s": timings.connect_timeout_s,
        "grace_s": timings.grace_s,
        "http_wait_s": timings.http_wait_s,
        "http_ports": sorted(timings.http_ports),
    }
