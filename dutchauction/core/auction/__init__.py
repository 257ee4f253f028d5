"""
Dutch Auction Module.

This module provides the descending-price auction:
- Price schedule and decay
- Bid validation and winner lock
- Atomic settlement
- Variant factories (basic, collectible, token bids)
"""

from dutchauction.core.auction.params import AuctionParams

from dutchauction.core.auction.pricing import (
    current_price,
    elapsed_steps,
    is_expired,
    price_schedule,
)

from dutchauction.core.auction.dutch_auction import (
    DutchAuction,
    AuctionState,
    SettlementReceipt,
)

from dutchauction.core.auction.variants import (
    create_basic_auction,
    create_collectible_auction,
    create_token_bid_auction,
)

__all__ = [
    # Params
    "AuctionParams",
    # Pricing
    "current_price",
    "elapsed_steps",
    "is_expired",
    "price_schedule",
    # Auction
    "DutchAuction",
    "AuctionState",
    "SettlementReceipt",
    # Variants
    "create_basic_auction",
    "create_collectible_auction",
    "create_token_bid_auction",
]
