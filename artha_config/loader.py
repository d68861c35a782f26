"""
Configuration Loader (``artha_config.loader``).

Responsibility
--------------
Loads a YAML rate-table file and parses it into a typed
``artha_config.schema.TaxRateConfig``.  Keys may be written in snake_case
(``pph23_rate_with_npwp``) or in the camelCase used by the web client
(``pph23RateWithNPWP``).

Failure modes
-------------
* Missing YAML file  -> ``ConfigurationError``.
* Malformed YAML  -> ``ConfigurationError`` chained from ``yaml.YAMLError``.
* Unknown keys or non-numeric rates  -> ``ConfigurationError``.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from artha_config.schema import TaxBracket, TaxRateConfig
from artha_kernel.exceptions import ConfigurationError
from artha_kernel.logging_config import get_logger

logger = get_logger("config.loader")

_KEY_ALIASES: dict[str, str] = {
    "pph21BaseRate": "pph21_base_rate",
    "pph21Surcharge": "pph21_surcharge",
    "pph21DeemedProfitRatio": "pph21_deemed_profit_ratio",
    "pph21Brackets": "pph21_brackets",
    "pph23RateWithNPWP": "pph23_rate_with_npwp",
    "pph23RateWithoutNPWP": "pph23_rate_without_npwp",
}

_DECIMAL_KEYS = (
    "pph21_surcharge",
    "pph21_deemed_profit_ratio",
    "pph23_rate_with_npwp",
    "pph23_rate_without_npwp",
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        ConfigurationError: if the file is missing, unreadable, or not a mapping.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise ConfigurationError(str(path), "file not found") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(str(path), f"invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


def parse_decimal(value: Any, key: str, source: str) -> Decimal:
    """Parse a YAML scalar into a Decimal (floats go through str)."""
    if isinstance(value, bool):
        raise ConfigurationError(source, f"{key} must be a number, got {value!r}")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ConfigurationError(source, f"{key} must be a number, got {value!r}") from e


def parse_bracket(data: dict[str, Any], source: str) -> TaxBracket:
    """Parse a TaxBracket from ``{lower, upper, rate}``; ``upper`` may be null."""
    try:
        upper = data.get("upper")
        return TaxBracket(
            lower=parse_decimal(data["lower"], "lower", source),
            upper=None if upper is None else parse_decimal(upper, "upper", source),
            rate=parse_decimal(data["rate"], "rate", source),
        )
    except KeyError as e:
        raise ConfigurationError(source, f"bracket is missing {e.args[0]!r}") from e


def parse_tax_rate_config(data: dict[str, Any], source: str = "<dict>") -> TaxRateConfig:
    """
    Parse a ``TaxRateConfig`` from a dict.

    Keys not present keep their defaults.  Rates are percentages.
    """
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        name = _KEY_ALIASES.get(key, key)
        if name in normalized:
            raise ConfigurationError(source, f"duplicate key {key!r}")
        normalized[name] = value

    known = set(_DECIMAL_KEYS) | {"pph21_base_rate", "pph21_brackets", "currency"}
    unknown = sorted(set(normalized) - known)
    if unknown:
        raise ConfigurationError(source, f"unknown keys: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    for key in _DECIMAL_KEYS:
        if key in normalized:
            kwargs[key] = parse_decimal(normalized[key], key, source)

    if normalized.get("pph21_base_rate") is not None:
        kwargs["pph21_base_rate"] = parse_decimal(
            normalized["pph21_base_rate"], "pph21_base_rate", source
        )

    if "pph21_brackets" in normalized:
        raw = normalized["pph21_brackets"] or []
        if not isinstance(raw, list):
            raise ConfigurationError(source, "pph21_brackets must be a list")
        kwargs["pph21_brackets"] = tuple(parse_bracket(b, source) for b in raw)

    if "currency" in normalized:
        kwargs["currency"] = str(normalized["currency"]).upper()

    return TaxRateConfig(**kwargs)


def load_tax_rate_config(path: Path) -> TaxRateConfig:
    """Load and parse a rate-table YAML file."""
    data = load_yaml_file(path)
    config = parse_tax_rate_config(data, source=str(path))
    logger.info(
        "tax_rate_config_loaded",
        extra={
            "path": str(path),
            "pph21_mode": "flat" if config.pph21_base_rate is not None else "progressive",
            "bracket_count": len(config.pph21_brackets),
            "currency": config.currency,
        },
    )
    return config
