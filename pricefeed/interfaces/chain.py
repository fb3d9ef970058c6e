"""Chain client protocol — blockchain RPC abstraction."""
from typing import Protocol


class ChainClient(Protocol):
    """Abstract interface for read-only contract calls."""

    async def eth_call(self, to: str, data: bytes) -> bytes: ...
