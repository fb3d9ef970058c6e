"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from eth_utils import is_hex_address

logger = logging.getLogger(__name__)

PRICE_CALL_SHAPES = ("combined", "split")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChainConfig:
    rpc_endpoints: tuple[str, ...] = ()
    rpc_timeout: int = 30


@dataclass(frozen=True)
class OracleConfig:
    address: str = ""
    price_call: str = "combined"
    symbols: tuple[str, ...] = ()


@dataclass(frozen=True)
class ClientConfig:
    concurrent: bool = True
    max_concurrency: int = 8
    symbol_timeout: float = 0.0


@dataclass(frozen=True)
class AppConfig:
    chain: ChainConfig = field(default_factory=ChainConfig)
    oracle: OracleConfig = field(default_factory=OracleConfig)
    client: ClientConfig = field(default_factory=ClientConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_chain(raw: dict[str, Any]) -> ChainConfig:
    # Unset ${PROVIDER_URL} interpolates to "", which is not an endpoint.
    endpoints = [e for e in raw.get("rpc_endpoints", []) if e]
    return ChainConfig(
        rpc_endpoints=tuple(endpoints),
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
    )


def _build_oracle(raw: dict[str, Any]) -> OracleConfig:
    return OracleConfig(
        address=str(raw.get("address", "")),
        price_call=str(raw.get("price_call", "combined")).lower(),
        symbols=tuple(str(s).upper() for s in raw.get("symbols", [])),
    )


def _build_client(raw: dict[str, Any]) -> ClientConfig:
    return ClientConfig(
        concurrent=bool(raw.get("concurrent", True)),
        max_concurrency=int(raw.get("max_concurrency", 8)),
        symbol_timeout=float(raw.get("symbol_timeout", 0.0)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        chain=_build_chain(raw.get("chain") or {}),
        oracle=_build_oracle(raw.get("oracle") or {}),
        client=_build_client(raw.get("client") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.chain.rpc_endpoints:
        raise ValueError("At least one RPC endpoint must be configured")
    if cfg.chain.rpc_timeout <= 0:
        raise ValueError("rpc_timeout must be positive")

    if not is_hex_address(cfg.oracle.address):
        raise ValueError(f"Invalid oracle address: '{cfg.oracle.address}'")
    if cfg.oracle.price_call not in PRICE_CALL_SHAPES:
        raise ValueError(
            f"Unknown price_call '{cfg.oracle.price_call}' "
            f"(expected one of {', '.join(PRICE_CALL_SHAPES)})"
        )

    if cfg.client.max_concurrency < 1:
        raise ValueError("max_concurrency must be at least 1")
    if cfg.client.symbol_timeout < 0:
        raise ValueError("symbol_timeout must not be negative")
