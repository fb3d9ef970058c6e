"""Price oracle protocol — read interface of a symbol-keyed oracle contract."""
from typing import Protocol


class OracleReader(Protocol):
    """Abstract interface for reading one symbol's feed from an oracle."""

    async def get_description(self, symbol: str) -> str: ...

    async def get_decimals(self, symbol: str) -> int: ...

    async def get_latest_price_and_timestamp(self, symbol: str) -> tuple[int, int]: ...

    async def get_price_in_usd(self, symbol: str) -> int: ...
