"""
artha_config -- single public entrypoint for the statutory rate table.

Responsibility:
    Provides the ONLY way engines and services obtain the rate table at
    runtime, through ``get_tax_rate_config()``.  Resolution order:

    1. an explicit ``path`` argument;
    2. the ``ARTHA_TAX_RATES`` environment variable;
    3. the packaged ``defaults/tax_rates.yaml``.

Failure modes:
    - ``ConfigurationError`` -- file missing, malformed, or failing schema
      validation.

Audit relevance:
    Every resolution emits an ``ARTHA_CONFIG_TRACE`` log entry naming the
    file that governed the calculation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from artha_config.loader import load_tax_rate_config, parse_tax_rate_config
from artha_config.schema import (
    DEFAULT_PPH21_BRACKETS,
    DEFAULT_TAX_RATE_CONFIG,
    TaxBracket,
    TaxRateConfig,
)
from artha_kernel.logging_config import get_logger

logger = get_logger("config")

ENV_VAR = "ARTHA_TAX_RATES"

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "tax_rates.yaml"


def get_tax_rate_config(path: Path | str | None = None) -> TaxRateConfig:
    """Return the active rate table (cached per resolved file)."""
    if path is None:
        path = os.environ.get(ENV_VAR) or _DEFAULT_CONFIG_PATH
    resolved = Path(path).resolve()
    config = _load_cached(resolved)
    logger.debug(
        "ARTHA_CONFIG_TRACE",
        extra={
            "trace_type": "ARTHA_CONFIG_TRACE",
            "path": str(resolved),
            "currency": config.currency,
        },
    )
    return config


@lru_cache(maxsize=8)
def _load_cached(path: Path) -> TaxRateConfig:
    return load_tax_rate_config(path)


def clear_config_cache() -> None:
    """Drop cached rate tables. FOR TESTING ONLY."""
    _load_cached.cache_clear()


__all__ = [
    "DEFAULT_PPH21_BRACKETS",
    "DEFAULT_TAX_RATE_CONFIG",
    "ENV_VAR",
    "TaxBracket",
    "TaxRateConfig",
    "clear_config_cache",
    "get_tax_rate_config",
    "load_tax_rate_config",
    "parse_tax_rate_config",
]
