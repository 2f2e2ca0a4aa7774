"""PermixConfig dataclass and loader for container settings."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".permix.json"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _safe_level(value: str, default: str) -> str:
    level = value.strip().upper()
    return level if level in _LEVELS else default


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


@dataclass
class PermixConfig:
    diagnostic_level: str = "ERROR"
    strict_snapshots: bool = True

    @property
    def diagnostic_levelno(self) -> int:
        return logging.getLevelName(self.diagnostic_level)  # type: ignore[no-any-return]

    @classmethod
    def from_env(cls) -> PermixConfig:
        config = cls()
        if env_level := os.environ.get("PERMIX_DIAGNOSTIC_LEVEL"):
            config.diagnostic_level = _safe_level(env_level, config.diagnostic_level)
        if env_strict := os.environ.get("PERMIX_STRICT_SNAPSHOTS"):
            config.strict_snapshots = _parse_bool(env_strict)
        return config

    @classmethod
    def from_file(cls, path: Path) -> PermixConfig:
        """Load the "permix" section of a JSON file. Env vars take precedence."""
        config = cls()

        if path.exists():
            try:
                text = path.read_text()
                data = json.loads(text) if text.strip() else {}
                section = data.get("permix", {}) if isinstance(data, dict) else {}
                if isinstance(section, dict):
                    _apply(config, section)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Failed to load permix config from {path}: {e}")

        env = cls.from_env()
        if os.environ.get("PERMIX_DIAGNOSTIC_LEVEL"):
            config.diagnostic_level = env.diagnostic_level
        if os.environ.get("PERMIX_STRICT_SNAPSHOTS"):
            config.strict_snapshots = env.strict_snapshots
        return config


def _apply(cfg: PermixConfig, data: dict[str, object]) -> None:
    level = data.get("diagnostic_level")
    if isinstance(level, str):
        cfg.diagnostic_level = _safe_level(level, cfg.diagnostic_level)
    if "strict_snapshots" in data and isinstance(data["strict_snapshots"], bool):
        cfg.strict_snapshots = data["strict_snapshots"]


def load_permix_config(path: Path | None = None) -> PermixConfig:
    if path is None:
        path = Path.cwd() / CONFIG_FILENAME
    return PermixConfig.from_file(path)
