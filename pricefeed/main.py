#!/usr/bin/env python3
"""
Oracle price feed client
Entry point for ``python -m pricefeed.main``
"""
from .cli import main

if __name__ == "__main__":
    main()
