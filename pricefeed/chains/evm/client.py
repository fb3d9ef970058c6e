"""EVM JSON-RPC client with fallback support."""
from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Any

import aiohttp
import certifi
from eth_utils import decode_hex, encode_hex, is_hex

from ...config import ChainConfig
from ...errors import ContractError, TransportError

logger = logging.getLogger(__name__)

# EIP-1474 / geth code for "execution reverted".
REVERT_ERROR_CODE = 3


def _is_revert(error: Any) -> bool:
    if not isinstance(error, dict):
        return False
    message = str(error.get("message", "")).lower()
    return error.get("code") == REVERT_ERROR_CODE or "revert" in message


class _RpcError(Exception):
    """Node answered with a non-revert JSON-RPC error."""


class EvmClient:
    """EVM RPC client with automatic endpoint fallback."""

    def __init__(self, config: ChainConfig) -> None:
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.current_rpc_index = 0

    async def rpc_call(self, method: str, params: list[Any]) -> Any:
        """Make RPC call with fallback to alternative endpoints.

        Reverts are deterministic, so they raise :class:`ContractError` at
        once instead of being retried on another node.
        """
        if not self.endpoints:
            raise TransportError("No RPC endpoints configured")

        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.post(
                        rpc_url,
                        json=payload,
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        result = await response.json()
                        error = result.get("error")
                        if error is not None:
                            if _is_revert(error):
                                raise ContractError(
                                    f"Call reverted: {error.get('message', error)}"
                                )
                            raise _RpcError(f"RPC Error: {error}")

                        if rpc_index != self.current_rpc_index:
                            logger.info("Switched to RPC endpoint: %s", rpc_url)
                            self.current_rpc_index = rpc_index

                        return result.get("result")
            except ContractError:
                raise
            except asyncio.TimeoutError:
                last_error = TimeoutError(f"timed out after {self.timeout}s")
                logger.warning("RPC endpoint %s timed out", rpc_url)
            except (aiohttp.ClientError, ValueError, AttributeError, _RpcError, OSError) as e:
                last_error = e
                logger.warning("RPC endpoint %s failed: %s", rpc_url, e)

            if attempt < len(self.endpoints) - 1:
                logger.info("Trying next endpoint...")

        raise TransportError(f"All RPC endpoints failed. Last error: {last_error}")

    async def eth_call(self, to: str, data: bytes) -> bytes:
        """Execute a read-only contract call against the latest block."""
        result = await self.rpc_call(
            "eth_call", [{"to": to, "data": encode_hex(data)}, "latest"]
        )
        if not isinstance(result, str) or not is_hex(result):
            raise ContractError(f"Malformed eth_call result: {result!r}")
        try:
            return decode_hex(result)
        except ValueError as e:
            raise ContractError(f"Malformed eth_call result: {result!r}") from e
