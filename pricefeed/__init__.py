"""Multi-symbol on-chain price oracle client."""
