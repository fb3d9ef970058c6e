"""Fixed-point price scaling and timestamp conversion."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, localcontext

from .errors import FormatError

DISPLAY_PLACES = 2
USD_SCALE_DECIMALS = 2

# Oracle decimals are a uint8 on-chain.
MAX_DECIMALS = 255


def _require_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise FormatError(f"{name} must be an integer, got {type(value).__name__}")
    return value


def scale_price(raw_price: int, decimals: int, places: int = DISPLAY_PLACES) -> Decimal:
    """Return ``raw_price / 10**decimals`` rounded half-up to ``places``.

    Works on the exact integer value; no float is involved at any step, so an
    int256 raw price keeps every digit until the final rounding.
    """
    raw_price = _require_int("price", raw_price)
    decimals = _require_int("decimals", decimals)
    if not 0 <= decimals <= MAX_DECIMALS:
        raise FormatError(f"decimals out of range: {decimals}")
    if places < 0:
        raise FormatError(f"display places out of range: {places}")

    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # Enough precision for every integer digit plus the fraction.
        ctx.prec = len(str(abs(raw_price))) + decimals + places + 2
        value = Decimal(raw_price).scaleb(-decimals)
        return value.quantize(quantum, rounding=ROUND_HALF_UP)


def format_price(raw_price: int, decimals: int, places: int = DISPLAY_PLACES) -> str:
    """Format a raw oracle price as a fixed-point string, e.g. ``"12.35"``."""
    return f"{scale_price(raw_price, decimals, places):f}"


def format_usd_cents(price_in_usd: int) -> str:
    """Format a ``getPriceInUSD`` value, which carries an implicit 10**2 scale."""
    return format_price(price_in_usd, USD_SCALE_DECIMALS, DISPLAY_PLACES)


def to_iso8601(updated_at: int) -> str:
    """Convert Unix seconds to an ISO-8601 UTC string like ``2023-11-14T22:13:20Z``."""
    updated_at = _require_int("timestamp", updated_at)
    try:
        dt = datetime.fromtimestamp(updated_at, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise FormatError(f"timestamp out of range: {updated_at}") from e
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")
