"""Configuration schema — Pydantic models for config.yaml."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DataNodeConfig(BaseModel):
    base_url: str = "http://localhost:3008"
    timeout_s: float = 10.0


class RefreshConfig(BaseModel):
    interval_s: int = Field(default=300, gt=0)
    candle_window_hours: int = Field(default=24, gt=0)


class ApiConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 9999


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class AppConfig(BaseModel):
    datanode: DataNodeConfig = Field(default_factory=DataNodeConfig)
    refresh: RefreshConfig = Field(default_factory=RefreshConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
