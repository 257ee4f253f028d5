"""
Dutch Auction Engine

A descending-price auction over discrete steps, integrating:
- Linear price decay pinned at a reserve price
- One-shot winner lock
- Atomic settlement in a native asset or an allowance-based token
- Optional collectible delivery to the winner
"""

__version__ = "0.1.0"
