"""Runtime configuration.

Settings come from environment variables.  A ``.env`` file at the project
root is loaded first; variables already present in the environment win.

    POS_DATA_DIR     directory holding store.json   (default: <root>/data)
    POS_UTC_OFFSET   operator's fixed UTC offset     (default: +00:00)
    POS_SALE_PREFIX  prefix of sale numbers          (default: KFE-)
    POS_LOG_LEVEL    logging level name              (default: WARNING)
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

from pos.domain.service.sale_numbering import DEFAULT_PREFIX

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]

_OFFSET_PATTERN = re.compile(r"([+-])(\d{2}):?(\d{2})")


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    utc_offset: timedelta = timedelta(0)
    sale_prefix: str = DEFAULT_PREFIX
    log_level: int = logging.WARNING

    @property
    def store_path(self) -> Path:
        return self.data_dir / "store.json"


def parse_utc_offset(raw: str) -> timedelta:
    """Parse ``+HH:MM`` / ``-HHMM`` (or ``Z``) into a timedelta."""
    raw = raw.strip()
    if raw.upper() in ("Z", "UTC"):
        return timedelta(0)
    match = _OFFSET_PATTERN.fullmatch(raw)
    if match is None:
        raise ValueError(f"POS_UTC_OFFSET must look like +HH:MM or -HH:MM, got {raw!r}")
    sign, hours, minutes = match.group(1), int(match.group(2)), int(match.group(3))
    if hours > 23 or minutes > 59:
        raise ValueError(f"POS_UTC_OFFSET out of range: {raw!r}")
    offset = timedelta(hours=hours, minutes=minutes)
    return -offset if sign == "-" else offset


def parse_log_level(raw: str) -> int:
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"POS_LOG_LEVEL is not a logging level: {raw!r}")
    return level


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from *environ* (default: ``.env`` + ``os.environ``)."""
    if environ is None:
        load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")
        environ = os.environ

    data_dir = Path(environ.get("POS_DATA_DIR") or _PROJECT_ROOT / "data").expanduser()

    prefix = environ.get("POS_SALE_PREFIX", DEFAULT_PREFIX)
    if not prefix.strip():
        raise ValueError("POS_SALE_PREFIX cannot be blank")

    return Settings(
        data_dir=data_dir,
        utc_offset=parse_utc_offset(environ.get("POS_UTC_OFFSET", "+00:00")),
        sale_prefix=prefix,
        log_level=parse_log_level(environ.get("POS_LOG_LEVEL", "WARNING")),
    )
