"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from dataclasses import dataclass
from pathlib import Path

import pytest
from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector

from pricefeed.config import AppConfig, ChainConfig, ClientConfig, OracleConfig
from pricefeed.errors import ContractError

ORACLE_ADDRESS = "0x081e9bF998826311ac9Db9C0AAaADE5eeE903DEd"


# ---------------------------------------------------------------------------
# Oracle state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Feed:
    description: str
    decimals: int
    price: int
    updated_at: int
    price_in_usd: int = 0


SAMPLE_FEEDS: dict[str, Feed] = {
    "ETH": Feed("ETH / USD", 8, 450000000000, 1700000000, 450000),
    "BTC": Feed("BTC / USD", 8, 6000000000000, 1700000100, 6000000),
    "USDC": Feed("USDC / USD", 8, 100000000, 1700000200, 100),
    "DAI": Feed("DAI / USD", 8, 99800000, 1700000300, 99),
}


class FakeOracle:
    """In-memory OracleReader. Unknown symbols revert like the contract does."""

    def __init__(
        self,
        feeds: dict[str, Feed] | None = None,
        failures: dict[str, Exception] | None = None,
    ) -> None:
        self.feeds = dict(SAMPLE_FEEDS if feeds is None else feeds)
        self.failures = dict(failures or {})
        self.calls: list[tuple[str, str]] = []

    def _feed(self, method: str, symbol: str) -> Feed:
        self.calls.append((method, symbol))
        if symbol in self.failures:
            raise self.failures[symbol]
        if symbol not in self.feeds:
            raise ContractError("Call reverted: Price feed not found")
        return self.feeds[symbol]

    async def get_description(self, symbol: str) -> str:
        return self._feed("description", symbol).description

    async def get_decimals(self, symbol: str) -> int:
        return self._feed("decimals", symbol).decimals

    async def get_latest_price_and_timestamp(self, symbol: str) -> tuple[int, int]:
        feed = self._feed("price", symbol)
        return feed.price, feed.updated_at

    async def get_price_in_usd(self, symbol: str) -> int:
        return self._feed("usd", symbol).price_in_usd


_RETURN_TYPES = {
    "getDescription(string)": (["string"], lambda f: [f.description]),
    "getDecimals(string)": (["uint8"], lambda f: [f.decimals]),
    "getLatestPriceAndTimestamp(string)": (
        ["int256", "uint256"],
        lambda f: [f.price, f.updated_at],
    ),
    "getLatestPrice(string)": (["int256"], lambda f: [f.price]),
    "getLatestTimestamp(string)": (["uint256"], lambda f: [f.updated_at]),
    "getPriceInUSD(string)": (["int256"], lambda f: [f.price_in_usd]),
}


class FakeChainClient:
    """ChainClient answering eth_call with ABI-encoded data from ``feeds``."""

    def __init__(self, feeds: dict[str, Feed] | None = None) -> None:
        self.feeds = dict(SAMPLE_FEEDS if feeds is None else feeds)
        self.selectors = {
            function_signature_to_4byte_selector(sig): sig for sig in _RETURN_TYPES
        }
        self.calls: list[tuple[str, str, str]] = []

    async def eth_call(self, to: str, data: bytes) -> bytes:
        signature = self.selectors[data[:4]]
        (symbol,) = decode(["string"], data[4:])
        self.calls.append((to, signature, symbol))
        if symbol not in self.feeds:
            raise ContractError("Call reverted: Price feed not found")
        types, values = _RETURN_TYPES[signature]
        return encode(types, values(self.feeds[symbol]))


@pytest.fixture()
def fake_oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture()
def fake_chain_client() -> FakeChainClient:
    return FakeChainClient()


@pytest.fixture()
def make_oracle() -> type[FakeOracle]:
    return FakeOracle


@pytest.fixture()
def make_chain_client() -> type[FakeChainClient]:
    return FakeChainClient


@pytest.fixture()
def make_feed() -> type[Feed]:
    return Feed


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_chain_config() -> ChainConfig:
    return ChainConfig(
        rpc_endpoints=("https://rpc1.example.com", "https://rpc2.example.com"),
        rpc_timeout=10,
    )


@pytest.fixture()
def sample_oracle_config() -> OracleConfig:
    return OracleConfig(
        address=ORACLE_ADDRESS,
        price_call="combined",
        symbols=("ETH", "BTC", "USDC", "DAI"),
    )


@pytest.fixture()
def sample_app_config(
    sample_chain_config: ChainConfig, sample_oracle_config: OracleConfig
) -> AppConfig:
    return AppConfig(
        chain=sample_chain_config,
        oracle=sample_oracle_config,
        client=ClientConfig(concurrent=True, max_concurrency=4),
    )


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent(f"""\
    chain:
      rpc_endpoints: ["https://rpc.example.com"]
      rpc_timeout: 10
    oracle:
      address: "{ORACLE_ADDRESS}"
      price_call: combined
      symbols: [eth, BTC, USDC]
    client:
      concurrent: true
      max_concurrency: 4
      symbol_timeout: 5
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
