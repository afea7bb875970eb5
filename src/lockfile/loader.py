"""Loading of upstream lock files from disk or over HTTP.

The lock file uses the composer.lock layout: a JSON object whose
``packages`` and ``packages-dev`` arrays hold one entry per locked package.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from constants import Constants
from errors import LockSourceError
from common.http_client import safe_get
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from .authority import LockAuthority
from .models import Package

logger = logging.getLogger(__name__)


def is_remote_source(source: str) -> bool:
    """True when the lock source is an http(s) URL."""
    return source.lower().startswith(("http://", "https://"))


def _read_local(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError as e:
        raise LockSourceError(f"Upstream lock file not found: {path}") from e
    except UnicodeDecodeError as e:
        raise LockSourceError(f"Upstream lock file could not be decoded: {path}: {e}") from e
    except IOError as e:
        raise LockSourceError(f"Upstream lock file could not be read: {path}: {e}") from e


def _read_remote(url: str) -> str:
    res = safe_get(url, context="upstream lock")
    if res.status_code != 200:
        raise LockSourceError(
            f"Upstream lock file download failed with HTTP {res.status_code}: {safe_url(url)}"
        )
    return res.text


def parse_lock_data(data: Dict[str, Any]) -> List[Package]:
    """Extract locked packages from a decoded lock file.

    Entries without a name are skipped with a warning.
    """
    packages: List[Package] = []
    for section in Constants.LOCK_PACKAGE_SECTIONS:
        entries = data.get(section) or []
        if not isinstance(entries, list):
            logger.warning("Ignoring malformed '%s' section in upstream lock file", section)
            continue
        for entry in entries:
            if not isinstance(entry, dict):
                logger.warning("Ignoring malformed entry in '%s' section", section)
                continue
            try:
                packages.append(Package.from_dict(entry))
            except ValueError:
                logger.warning("Ignoring package without a name in '%s' section", section)
    return packages


def load_lock_authority(source: str, allow_http: bool = False) -> LockAuthority:
    """Read the lock file at ``source`` and build a LockAuthority from it.

    Args:
        source: Local path or http(s) URL of the lock file.
        allow_http: Whether retrieval over the network is permitted.

    Raises:
        LockSourceError: if the source cannot be read, is not permitted, or
            does not contain a JSON object.
    """
    with Timer() as t:
        if is_remote_source(source):
            if not allow_http:
                raise LockSourceError(
                    f"Upstream lock file '{safe_url(source)}' is a URL but network retrieval is "
                    f"disabled. Set {Constants.ENV_ALLOW_HTTP} to allow it."
                )
            text = _read_remote(source)
        else:
            text = _read_local(source)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise LockSourceError(f"Upstream lock file is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise LockSourceError("Upstream lock file must contain a JSON object")

        authority = LockAuthority(parse_lock_data(data))

    logger.info("Loaded %d packages from upstream lock file.", len(authority))
    if is_debug_enabled(logger):
        logger.debug(
            "Upstream lock loaded",
            extra=extra_context(
                event="lock_loaded",
                component="lockfile",
                action="load",
                target=safe_url(source),
                count=len(authority),
                duration_ms=t.duration_ms()
            )
        )
    return authority
