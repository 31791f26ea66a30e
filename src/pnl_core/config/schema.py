"""Configuration schema: Pydantic models for config.yaml."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class DataApiConfig(BaseModel):
    base_url: str = "https://data-api.polymarket.com"
    page_size: int = Field(default=500, gt=0, le=500)
    max_offset: int = 10000
    timeout_s: float = 15.0


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class PnLConfig(BaseModel):
    method: Literal["fifo"] = "fifo"
    # Closed positions held for less than this are left out of the avg holding time
    min_holding_seconds: float = 60
    label_max_len: int = Field(default=20, ge=4)
    top_tags: int = 3
    cache_ttl_s: float = 60.0


class AppConfig(BaseModel):
    data_api: DataApiConfig = Field(default_factory=DataApiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    pnl: PnLConfig = Field(default_factory=PnLConfig)
