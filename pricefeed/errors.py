"""Error kinds raised while reading and formatting oracle quotes."""


class PriceFeedError(Exception):
    """Base class for per-symbol price feed failures."""

    kind = "unknown"


class TransportError(PriceFeedError):
    """The remote call failed: network error, node unavailable or timeout."""

    kind = "transport"


class ContractError(PriceFeedError):
    """The call reverted or returned malformed data."""

    kind = "contract"


class FormatError(PriceFeedError):
    """A value cannot be represented in the display format."""

    kind = "format"
