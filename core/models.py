"""
Shared data models: scan configuration in, per-port outcomes and the
run summary out.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.config import settings

NO_BANNER = "<no-banner>"
MAX_PORT = 65535


def _now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class ScanConfig(BaseModel):
    """Read-only run configuration built once by the driver."""

    model_config = ConfigDict(frozen=True)

    target: str
    start_port: int
    end_port: int
    workers: int = Field(default_factory=lambda: settings.default_workers)

    @field_validator("target")
    @classmethod
    def validate_target(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("target must not be empty")
        return v

    @field_validator("start_port")
    @classmethod
    def clamp_start(cls, v: int) -> int:
        return max(1, v)

    @field_validator("workers")
    @classmethod
    def clamp_workers(cls, v: int) -> int:
        return max(1, v)

    @model_validator(mode="after")
    def check_range(self) -> "ScanConfig":
        if self.end_port < self.start_port:
            raise ValueError("endPort must be >= startPort")
        if self.end_port > MAX_PORT:
            raise ValueError(f"endPort must be <= {MAX_PORT}")
        return self

    @property
    def port_count(self) -> int:
        return self.end_port - self.start_port + 1


class ScanOutcome(BaseModel):
    target: str
    port: int
    open: bool
    banner: Optional[str] = None
    timestamp: dt.datetime = Field(default_factory=_now)

    def line(self) -> str:
        return f"OPEN - {self.target}:{self.port} - banner: {self.banner or NO_BANNER}"


class ScanSummary(BaseModel):
    target: str
    start_port: int
    end_port: int
    workers: int
    ports_scanned: int
    open_ports: List[int] = Field(default_factory=list)
    sink_failures: int = 0
    duration_ms: int = 0
    log_path: Optional[str] = None
