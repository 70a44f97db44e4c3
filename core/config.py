"""
Pydantic-based configuration for the scanner.

Every knob can be overridden through PORTGRAB_* environment variables
(or a local .env file) so lab runs can tune timing without touching code.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False, env_file=".env", env_prefix="PORTGRAB_")

    # Concurrency
    default_workers: int = Field(50, description="worker count when none is given")

    # Timeouts (seconds)
    connect_timeout_s: float = Field(0.8, description="TCP handshake deadline")
    grace_s: float = Field(0.010, description="wait for an unsolicited banner")
    http_wait_s: float = Field(0.020, description="wait for the HTTP fallback response")

    # Banner capture
    banner_read_bytes: int = Field(1024, description="first read size, doubled for HTTP")
    http_ports: List[int] = Field(default_factory=lambda: [80, 8080, 8000])

    # Output
    log_path: str = Field("out/scan-results.log")
    echo_stdout: bool = Field(True)

    @field_validator("default_workers", "banner_read_bytes")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @field_validator("connect_timeout_s", "grace_s", "http_wait_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @field_validator("http_ports")
    @classmethod
    def validate_http_ports(cls, v: List[int]) -> List[int]:
        for port in v:
            if not 1 <= port <= 65535:
                raise ValueError(f"invalid http port {port}")
        return v


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
