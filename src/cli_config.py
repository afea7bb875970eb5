"""Configuration for the upstream lock overlay.

The overlay never reads the process environment itself; a resolved
OverlayConfig is passed into the engine. Precedence is CLI arguments, then
environment variables, then the ``upstream_lock`` section of a YAML config
file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

_FALSE_VALUES = ("", "0", "false", "no", "off")


@dataclass(frozen=True)
class OverlayConfig:
    """Where the upstream lock file comes from and how it may be retrieved."""
    lock_file: Optional[str] = None
    allow_http: bool = False

    @property
    def enabled(self) -> bool:
        """True when a lock source is configured."""
        return bool(self.lock_file and self.lock_file.strip())

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OverlayConfig":
        """Read COMPOSER_UPSTREAM_LOCK_FILE and COMPOSER_UPSTREAM_LOCK_ALLOW_HTTP."""
        environ = os.environ if environ is None else environ
        lock_file = (environ.get(Constants.ENV_LOCK_FILE) or "").strip() or None
        return cls(lock_file=lock_file, allow_http=_truthy(environ.get(Constants.ENV_ALLOW_HTTP)))


def _truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() not in _FALSE_VALUES


def load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load the ``upstream_lock`` section from a YAML (or JSON) config file.

    A missing file or malformed content is logged and treated as empty.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return {}

    if not isinstance(data, dict):
        return {}
    section = data.get(Constants.CONFIG_SECTION, data)
    return section if isinstance(section, dict) else {}


def resolve_config(args: Any = None, environ: Optional[Mapping[str, str]] = None) -> OverlayConfig:
    """Merge CLI arguments, environment and config file into an OverlayConfig."""
    file_cfg = load_config_file(getattr(args, "CONFIG", None))
    env_cfg = OverlayConfig.from_env(environ)

    lock_file = (
        getattr(args, "LOCK_FILE", None)
        or env_cfg.lock_file
        or (str(file_cfg.get("lock_file") or "").strip() or None)
    )

    allow_http = (
        bool(getattr(args, "ALLOW_HTTP", False))
        or env_cfg.allow_http
        or _truthy(file_cfg.get("allow_http"))
    )

    return OverlayConfig(lock_file=lock_file, allow_http=allow_http)
