"""Symbol-keyed oracle contract reader (MultiPriceConsumer read interface)."""
from __future__ import annotations

import logging
from typing import Any, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector

from ..config import OracleConfig
from ..errors import ContractError
from ..interfaces.chain import ChainClient

logger = logging.getLogger(__name__)

GET_DESCRIPTION = "getDescription(string)"
GET_DECIMALS = "getDecimals(string)"
GET_LATEST_PRICE_AND_TIMESTAMP = "getLatestPriceAndTimestamp(string)"
GET_LATEST_PRICE = "getLatestPrice(string)"
GET_LATEST_TIMESTAMP = "getLatestTimestamp(string)"
GET_PRICE_IN_USD = "getPriceInUSD(string)"


def encode_call(signature: str, symbol: str) -> bytes:
    """Build calldata for a ``fn(string)`` oracle method."""
    return function_signature_to_4byte_selector(signature) + encode(["string"], [symbol])


def decode_result(signature: str, types: Sequence[str], data: bytes) -> tuple[Any, ...]:
    """Decode return data, mapping empty or malformed payloads to ContractError."""
    if not data:
        # Calls to an address without code (or to a missing selector) succeed
        # with empty output.
        raise ContractError(f"{signature} returned no data")
    try:
        return tuple(decode(list(types), data))
    except (DecodingError, ValueError) as e:
        raise ContractError(f"{signature} returned malformed data: {e}") from e


class MultiPriceOracle:
    """Read per-symbol feeds from a MultiPriceConsumer-style contract."""

    def __init__(self, chain_client: ChainClient, config: OracleConfig) -> None:
        self._client = chain_client
        self._address = config.address
        self._price_call = config.price_call

    @property
    def address(self) -> str:
        return self._address

    async def _call(
        self, signature: str, symbol: str, types: Sequence[str]
    ) -> tuple[Any, ...]:
        data = await self._client.eth_call(self._address, encode_call(signature, symbol))
        values = decode_result(signature, types, data)
        logger.debug("%s(%s) -> %s", signature.split("(")[0], symbol, values)
        return values

    async def get_description(self, symbol: str) -> str:
        (description,) = await self._call(GET_DESCRIPTION, symbol, ["string"])
        return description

    async def get_decimals(self, symbol: str) -> int:
        (decimals,) = await self._call(GET_DECIMALS, symbol, ["uint8"])
        return int(decimals)

    async def get_latest_price_and_timestamp(self, symbol: str) -> tuple[int, int]:
        """Return ``(raw_price, updated_at)`` using the configured call shape."""
        if self._price_call == "split":
            (price,) = await self._call(GET_LATEST_PRICE, symbol, ["int256"])
            (updated_at,) = await self._call(GET_LATEST_TIMESTAMP, symbol, ["uint256"])
        else:
            price, updated_at = await self._call(
                GET_LATEST_PRICE_AND_TIMESTAMP, symbol, ["int256", "uint256"]
            )
        return int(price), int(updated_at)

    async def get_price_in_usd(self, symbol: str) -> int:
        (price,) = await self._call(GET_PRICE_IN_USD, symbol, ["int256"])
        return int(price)
