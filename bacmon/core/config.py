#!/usr/bin/env python3
"""
bacmon Server Configuration Management

Lookup order for the YAML file:
1. Explicit path (``-c/--config``)
2. BACMON_CONFIG environment variable
3. ./config.yaml
Missing files fall back to defaults (local SQLite database).
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger("bacmon.server")

DEFAULT_CONFIG_PATH = "config.yaml"


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    # sqlite:///path/to.db, postgresql://..., postgresql+pool://...
    database_url: str = "sqlite:///./bacmon.db"
    db_timeout: float = Field(30.0, gt=0)     # busy/pool wait timeout in seconds
    max_connections: int = Field(8, ge=1)     # pooled backends only
    # HTTPS is enabled when both are set
    ssl_certfile: Optional[str] = None
    ssl_keyfile: Optional[str] = None


def load_config_from(path: Optional[str] = None) -> ServerConfig:
    """Load server configuration from YAML file."""
    path = path or os.environ.get("BACMON_CONFIG") or DEFAULT_CONFIG_PATH
    config_file = Path(path)
    if not config_file.exists():
        logger.info(f"config file not found: {config_file}, using defaults")
        return ServerConfig()

    with open(config_file, "r") as f:
        data = yaml.safe_load(f) or {}
    logger.info(f"loaded configuration from: {config_file}")
    return ServerConfig(**data)
