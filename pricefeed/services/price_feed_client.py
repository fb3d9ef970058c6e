"""Multi-symbol price feed client — batch reads with per-symbol isolation."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence, TypeVar

from ..config import ClientConfig
from ..errors import PriceFeedError, TransportError
from ..interfaces.price_oracle import OracleReader
from ..models import FetchError, NormalizedQuote, QueryOutcome, RawQuote, UsdOutcome, UsdPrice
from ..normalize import format_price, format_usd_cents, to_iso8601

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PriceFeedClient:
    """Query price, decimals, description and update time for many symbols.

    Every symbol is read independently; a failure for one symbol becomes a
    :class:`FetchError` in its own slot and never disturbs the others. The
    returned list always has one entry per input symbol, in input order.
    """

    def __init__(self, oracle: OracleReader, config: ClientConfig | None = None) -> None:
        config = config or ClientConfig()
        self._oracle = oracle
        self._concurrent = config.concurrent
        self._max_concurrency = config.max_concurrency
        self._symbol_timeout = config.symbol_timeout or None

    async def fetch_raw(self, symbol: str) -> RawQuote:
        """Read one symbol's feed without normalizing it."""
        description = await self._oracle.get_description(symbol)
        decimals = await self._oracle.get_decimals(symbol)
        raw_price, updated_at = await self._oracle.get_latest_price_and_timestamp(symbol)
        return RawQuote(
            symbol=symbol,
            description=description,
            decimals=decimals,
            raw_price=raw_price,
            updated_at=updated_at,
        )

    async def _quote(self, symbol: str) -> NormalizedQuote:
        raw = await self.fetch_raw(symbol)
        return NormalizedQuote(
            symbol=symbol,
            description=raw.description,
            normalized_price=format_price(raw.raw_price, raw.decimals),
            updated_at_iso=to_iso8601(raw.updated_at),
            raw_price=raw.raw_price,
            decimals=raw.decimals,
        )

    async def _usd_price(self, symbol: str) -> UsdPrice:
        price_in_usd = await self._oracle.get_price_in_usd(symbol)
        return UsdPrice(
            symbol=symbol,
            price_in_usd=price_in_usd,
            formatted=format_usd_cents(price_in_usd),
        )

    async def _isolated(
        self,
        symbol: str,
        fetch: Callable[[str], Awaitable[T]],
        semaphore: asyncio.Semaphore | None,
    ) -> T | FetchError:
        """Run ``fetch(symbol)`` and turn any failure into a FetchError."""
        try:
            if semaphore is None:
                return await self._with_timeout(fetch(symbol))
            async with semaphore:
                return await self._with_timeout(fetch(symbol))
        except PriceFeedError as e:
            logger.warning("Error fetching %s (%s): %s", symbol, e.kind, e)
            return FetchError(symbol=symbol, message=str(e), kind=e.kind)
        except asyncio.TimeoutError:
            if self._symbol_timeout is None:
                err = TransportError("timed out")
            else:
                err = TransportError(f"timed out after {self._symbol_timeout}s")
            logger.warning("Error fetching %s (%s): %s", symbol, err.kind, err)
            return FetchError(symbol=symbol, message=str(err), kind=err.kind)
        except Exception as e:
            logger.exception("Unexpected error fetching %s", symbol)
            return FetchError(symbol=symbol, message=str(e) or type(e).__name__)

    async def _with_timeout(self, coro: Awaitable[T]) -> T:
        if self._symbol_timeout is None:
            return await coro
        return await asyncio.wait_for(coro, timeout=self._symbol_timeout)

    async def _gather(
        self, symbols: Sequence[str], fetch: Callable[[str], Awaitable[T]]
    ) -> list[T | FetchError]:
        symbols = list(symbols)
        if not symbols:
            raise ValueError("At least one symbol is required")

        if not self._concurrent:
            return [await self._isolated(s, fetch, None) for s in symbols]

        semaphore = asyncio.Semaphore(self._max_concurrency)
        # gather() returns results positionally, whatever the completion order.
        return list(
            await asyncio.gather(*(self._isolated(s, fetch, semaphore) for s in symbols))
        )

    async def fetch_all(self, symbols: Sequence[str]) -> list[QueryOutcome]:
        """Fetch and normalize quotes for ``symbols``, preserving input order."""
        outcomes = await self._gather(symbols, self._quote)
        failed = sum(1 for o in outcomes if not o.ok)
        logger.info(
            "Fetched %d/%d price feeds (%d failed)",
            len(outcomes) - failed,
            len(outcomes),
            failed,
        )
        return outcomes

    async def fetch_usd_prices(self, symbols: Sequence[str]) -> list[UsdOutcome]:
        """Fetch ``getPriceInUSD`` values (implicit 10**2 scale) for ``symbols``."""
        return await self._gather(symbols, self._usd_price)
