"""Runtime settings from the environment; loads .env locally via python-dotenv."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

from pallet_optimizer.cache import DEFAULT_CACHE_SIZE
from pallet_optimizer.packing.placement import DEFAULT_SCAN_DIVISOR

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

ENV_PREFIX = "PALLET_OPTIMIZER_"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX + name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{ENV_PREFIX + name} must be at least 1, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    cache_size: int = DEFAULT_CACHE_SIZE
    scan_divisor: int = DEFAULT_SCAN_DIVISOR
    default_pallet: str = "STANDARD"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        # Does not override variables already set
        load_dotenv()
        return cls(
            cache_size=_env_int("CACHE_SIZE", DEFAULT_CACHE_SIZE),
            scan_divisor=_env_int("SCAN_DIVISOR", DEFAULT_SCAN_DIVISOR),
            default_pallet=os.getenv(ENV_PREFIX + "DEFAULT_PALLET", "STANDARD"),
            log_level=os.getenv(ENV_PREFIX + "LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the package logger."""
    logger = logging.getLogger("pallet_optimizer")
    logger.setLevel(level.upper())
    if not any(getattr(h, "_pallet_optimizer", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._pallet_optimizer = True
        logger.addHandler(handler)
