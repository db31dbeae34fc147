"""Process-wide configuration for SiteAgent orchestration."""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from siteagent.schemas import Site

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SITEAGENT_CONFIG"

DEFAULT_MANIFEST_PATH = "/agent.json"

# Matches httpx's own default so an unconfigured run behaves like a bare client
DEFAULT_TIMEOUT = 5.0  # seconds

DEFAULT_SITES: dict[str, str] = {
    "creator": "https://creator-demo-rlqt.vercel.app",
    "publisher": "https://publish-demo-xi.vercel.app",
    "scheduler": "https://schedule-demo-gold.vercel.app",
}


class ConfigError(Exception):
    """Raised when a configuration file cannot be loaded."""

    pass


class ConcurrencyMode(str, Enum):
    """Concurrency modes for discovery and dispatch."""

    PARALLEL = "parallel"
    SEQUENTIAL = "sequential"


class OrchestratorConfig(BaseModel):
    """Immutable orchestrator configuration.

    Site order is significant: discovery runs and merges in this order.
    """

    model_config = ConfigDict(frozen=True)

    sites: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_SITES))
    manifest_path: str = Field(default=DEFAULT_MANIFEST_PATH, pattern=r"^/")
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    concurrency: ConcurrencyMode = ConcurrencyMode.SEQUENTIAL
    max_workers: int = Field(default=4, ge=1, le=64)

    def site_list(self) -> list[Site]:
        """Return configured sites in declaration order."""
        return [
            Site(name=name, base_url=base_url.rstrip("/"))
            for name, base_url in self.sites.items()
        ]


def load_config(path: Path | str | None = None) -> OrchestratorConfig:
    """Load configuration from a JSON file.

    Args:
        path: Config file path. Falls back to $SITEAGENT_CONFIG, then defaults.

    Returns:
        OrchestratorConfig instance

    Raises:
        ConfigError: If the file is missing, not JSON, or fails validation
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return OrchestratorConfig()

    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {config_path}: {e}") from e

    try:
        config = OrchestratorConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {config_path}: {e}") from e

    logger.info(f"Loaded config from {config_path} ({len(config.sites)} sites)")
    return config


# Global config instance
_config_instance: OrchestratorConfig | None = None


def get_config(path: Path | str | None = None) -> OrchestratorConfig:
    """Get or load the global configuration.

    Args:
        path: Optional path to a config file, used on first load only

    Returns:
        OrchestratorConfig instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config(path)
    return _config_instance


def reset_config() -> None:
    """Forget the global configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
