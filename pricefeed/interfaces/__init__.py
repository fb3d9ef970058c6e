"""Protocol interfaces for the price feed client."""
from .chain import ChainClient
from .price_oracle import OracleReader

__all__ = ["ChainClient", "OracleReader"]
