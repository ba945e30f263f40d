"""Configuration loader: reads a YAML file, interpolates env vars, validates"""
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .constants import FIXED_ORACLE_PRICE, MAX_LLTV
from .errors import InvalidLltvError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OracleConfig:
    # loan units per collateral unit, scaled by PRICE_PRECISION
    price: int = FIXED_ORACLE_PRICE


@dataclass(frozen=True)
class MarketConfig:
    loan_token_mint: str = "USDC"
    collateral_token_mint: str = "SOL"
    lltv: int = 80_000_000


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    oracle: OracleConfig = field(default_factory=OracleConfig)
    market: MarketConfig = field(default_factory=MarketConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values"""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


def _build_oracle(raw: Dict[str, Any]) -> OracleConfig:
    price = int(raw.get("price", FIXED_ORACLE_PRICE))
    if price <= 0:
        raise ValueError(f"Oracle price must be positive, got {price}")
    return OracleConfig(price=price)


def _build_market(raw: Dict[str, Any]) -> MarketConfig:
    lltv = int(raw.get("lltv", MarketConfig.lltv))
    if not 0 < lltv <= MAX_LLTV:
        raise InvalidLltvError(f"Invalid LLTV {lltv} in config")
    return MarketConfig(
        loan_token_mint=str(raw.get("loan_token_mint", MarketConfig.loan_token_mint)),
        collateral_token_mint=str(raw.get("collateral_token_mint", MarketConfig.collateral_token_mint)),
        lltv=lltv,
    )


def _build_logging(raw: Dict[str, Any]) -> LoggingConfig:
    return LoggingConfig(level=str(raw.get("level", "INFO")).upper())


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load config from `path`, or LENDING_MODEL_CONFIG, or defaults if neither exists"""
    path = path or os.environ.get("LENDING_MODEL_CONFIG")
    if path is None or not Path(path).exists():
        if path is not None:
            logger.warning("Config file %s not found, using defaults", path)
        return AppConfig()

    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    raw = _interpolate_env(raw)

    config = AppConfig(
        oracle=_build_oracle(raw.get("oracle") or {}),
        market=_build_market(raw.get("market") or {}),
        logging=_build_logging(raw.get("logging") or {}),
    )
    logger.debug("Loaded config from %s: %s", path, config)
    return config
