"""
Variants - Deploying the three auction configurations on a chain.

- basic: native payment only
- collectible: native payment + collectible delivered to the winner
- token bids: fungible-token payment (allowance based) + collectible

Each factory mines the deployment block and uses it as the start step,
so prices read at later blocks have decayed by the blocks mined since.
Native payments settle on `chain.ledger`.
"""

from typing import Optional

from dutchauction.core.assets.registry import CollectibleRegistry
from dutchauction.core.assets.token import FungibleToken
from dutchauction.core.auction.dutch_auction import DutchAuction
from dutchauction.core.auction.params import AuctionParams
from dutchauction.core.chain import Chain
from dutchauction.core.errors import InvalidAuctionParams
from dutchauction.core.settlement.collectible import CollectibleLeg
from dutchauction.core.settlement.payment import NativePaymentLeg, PaymentLeg, TokenPaymentLeg


def _deploy(
    chain: Chain,
    seller: bytes,
    params: AuctionParams,
    payment_leg: PaymentLeg,
    collectible_leg: Optional[CollectibleLeg] = None,
) -> DutchAuction:
    # Checked before mining so a rejected deployment leaves the chain untouched
    if not isinstance(params, AuctionParams):
        raise InvalidAuctionParams(
            f"invalid auction parameters: expected AuctionParams, got {type(params).__name__}"
        )

    address = chain.deploy_address(seller)
    return DutchAuction(
        seller=seller,
        params=params,
        start_step=chain.block_number,
        payment_leg=payment_leg,
        collectible_leg=collectible_leg,
        address=address,
    )


def create_basic_auction(chain: Chain, seller: bytes, params: AuctionParams) -> DutchAuction:
    """Auction settled in the chain's native asset."""
    return _deploy(chain, seller, params, NativePaymentLeg(chain.ledger))


def create_collectible_auction(
    chain: Chain,
    registry: CollectibleRegistry,
    collectible_id: int,
    seller: bytes,
    params: AuctionParams,
) -> DutchAuction:
    """
    Native-payment auction that also delivers a collectible.

    Raises:
        InvalidAuctionParams: `params` is not an AuctionParams
        NotCollectibleOwner: seller does not own `collectible_id`
    """
    return _deploy(
        chain,
        seller,
        params,
        NativePaymentLeg(chain.ledger),
        CollectibleLeg(registry, collectible_id),
    )


def create_token_bid_auction(
    chain: Chain,
    token: FungibleToken,
    registry: CollectibleRegistry,
    collectible_id: int,
    seller: bytes,
    params: AuctionParams,
) -> DutchAuction:
    """
    Collectible auction paid in `token`.

    Bidders must approve the auction's address for at least their bid
    before bidding.

    Raises:
        InvalidAuctionParams: `params` is not an AuctionParams
        NotCollectibleOwner: seller does not own `collectible_id`
    """
    return _deploy(
        chain,
        seller,
        params,
        TokenPaymentLeg(token),
        CollectibleLeg(registry, collectible_id),
    )


__all__ = [
    "create_basic_auction",
    "create_collectible_auction",
    "create_token_bid_auction",
]
