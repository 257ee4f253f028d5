"""
Integration tests: the three auction variants deployed on a local chain.

Every transaction mines a block, so a bid sent after mine(5) executes at
elapsed step 6. Scenarios use reserve=500, duration=10, decrement=50.
"""

import pytest

from dutchauction.core.assets import CollectibleRegistry, FungibleToken
from dutchauction.core.auction import (
    AuctionParams,
    AuctionState,
    create_basic_auction,
    create_collectible_auction,
    create_token_bid_auction,
)
from dutchauction.core.chain import Chain
from dutchauction.core.errors import (
    AlreadyWon,
    Expired,
    InsufficientBid,
    InvalidAuctionParams,
    NotCollectibleOwner,
    PaymentTransferFailed,
)
from dutchauction.crypto import ZERO_ADDRESS, generate_keypair


NUM_BLOCKS_AUCTION_OPEN = 10
RESERVE_PRICE = 500
OFFER_PRICE_DECREMENT = 50
INITIAL_PRICE = RESERVE_PRICE + NUM_BLOCKS_AUCTION_OPEN * OFFER_PRICE_DECREMENT
HIGH_BID = INITIAL_PRICE - OFFER_PRICE_DECREMENT * 4
TOKEN_URI = "https://example.com/dragon/0.json"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def accounts():
    """owner, account1, account2"""
    return tuple(generate_keypair().address for _ in range(3))


@pytest.fixture
def params():
    return AuctionParams.create(
        reserve_price=RESERVE_PRICE,
        duration_steps=NUM_BLOCKS_AUCTION_OPEN,
        price_decrement=OFFER_PRICE_DECREMENT,
    )


@pytest.fixture
def chain(accounts):
    _, account1, account2 = accounts
    chain = Chain()
    chain.ledger.create_genesis([(account1, 10_000), (account2, 10_000)])
    return chain


@pytest.fixture
def registry(accounts):
    owner = accounts[0]
    registry = CollectibleRegistry("Ridiculous Dragons", "RDG", owner=owner)
    registry.mint(owner, owner, TOKEN_URI)
    return registry


@pytest.fixture
def token(accounts):
    owner, account1, _ = accounts
    token = FungibleToken("Bnb Token", "BNB", owner=owner)
    token.mint(owner, account1, 1000)
    return token


# =============================================================================
# Basic Variant
# =============================================================================


class TestBasicDutchAuction:
    """Native payment, no collectible."""

    @pytest.fixture
    def auction(self, chain, accounts, params):
        return create_basic_auction(chain, accounts[0], params)

    def test_owner_and_no_winner(self, auction, accounts):
        assert auction.seller == accounts[0]
        assert auction.winner is None

    def test_initial_price(self, auction, chain):
        assert auction.current_price(chain.block_number) == INITIAL_PRICE

    def test_unvalidated_params_rejected(self, chain, accounts):
        """Raw values must go through AuctionParams.create first."""
        raw = {"reserve_price": RESERVE_PRICE, "duration_steps": 0, "price_decrement": 50}
        with pytest.raises(InvalidAuctionParams, match="expected AuctionParams"):
            create_basic_auction(chain, accounts[0], raw)
        assert chain.block_number == 0

    def test_price_after_five_blocks(self, auction, chain):
        chain.mine(5)
        assert auction.current_price(chain.block_number) == INITIAL_PRICE - 5 * OFFER_PRICE_DECREMENT

    def test_reject_low_bids(self, auction, chain, accounts):
        chain.mine(1)
        low_bid = INITIAL_PRICE - OFFER_PRICE_DECREMENT * 3

        with pytest.raises(InsufficientBid):
            chain.transact(auction.bid, accounts[1], low_bid)
        with pytest.raises(InsufficientBid):
            chain.transact(auction.bid, accounts[1], 50)

    def test_winning_bid(self, auction, chain, accounts):
        chain.mine(5)
        chain.transact(auction.bid, accounts[1], HIGH_BID)
        assert auction.winner == accounts[1]

    def test_reject_after_winner(self, auction, chain, accounts):
        chain.mine(5)
        chain.transact(auction.bid, accounts[1], HIGH_BID)

        with pytest.raises(AlreadyWon):
            chain.transact(auction.bid, accounts[2], HIGH_BID)

    def test_reject_after_expiry(self, auction, chain, accounts):
        chain.mine(NUM_BLOCKS_AUCTION_OPEN + 1)
        with pytest.raises(Expired):
            chain.transact(auction.bid, accounts[2], HIGH_BID)

    def test_reserve_after_window(self, auction, chain):
        chain.mine(NUM_BLOCKS_AUCTION_OPEN)
        assert auction.current_price(chain.block_number) == RESERVE_PRICE
        chain.mine(5)
        assert auction.current_price(chain.block_number) == RESERVE_PRICE

    def test_balances_change(self, auction, chain, accounts):
        owner, account1, _ = accounts
        chain.mine(5)
        chain.transact(auction.bid, account1, HIGH_BID)

        assert chain.ledger.get_balance(account1) == 10_000 - HIGH_BID
        assert chain.ledger.get_balance(owner) == HIGH_BID


# =============================================================================
# Collectible Variant
# =============================================================================


class TestCollectibleDutchAuction:
    """Native payment plus collectible delivery."""

    @pytest.fixture
    def auction(self, chain, registry, accounts, params):
        owner = accounts[0]
        auction = create_collectible_auction(chain, registry, 0, owner, params)
        chain.transact(lambda now_step: registry.approve(owner, auction.address, 0))
        return auction

    def test_not_owner_cannot_deploy(self, chain, registry, accounts, params):
        owner, account1, _ = accounts
        collectible_id = registry.mint(owner, account1, "Test URI")
        assert registry.transfers[-1].sender == ZERO_ADDRESS

        with pytest.raises(NotCollectibleOwner):
            create_collectible_auction(chain, registry, collectible_id, owner, params)

    def test_winner_gets_collectible(self, auction, chain, registry, accounts):
        owner, account1, _ = accounts
        chain.mine(5)
        chain.transact(auction.bid, account1, HIGH_BID)

        assert registry.owner_of(0) == account1
        assert chain.ledger.get_balance(owner) == HIGH_BID

    def test_owner_keeps_collectible_on_expiry(self, auction, chain, registry, accounts):
        chain.mine(NUM_BLOCKS_AUCTION_OPEN + 1)
        with pytest.raises(Expired):
            chain.transact(auction.bid, accounts[2], HIGH_BID)
        assert registry.owner_of(0) == accounts[0]


# =============================================================================
# Token-Bid Variant
# =============================================================================


class TestTokenBidDutchAuction:
    """Token payment plus collectible delivery."""

    @pytest.fixture
    def auction(self, chain, token, registry, accounts, params):
        owner = accounts[0]
        auction = create_token_bid_auction(chain, token, registry, 0, owner, params)
        chain.transact(lambda now_step: registry.approve(owner, auction.address, 0))
        return auction

    def test_initial_price(self, auction):
        assert auction.initial_price == INITIAL_PRICE

    def test_not_owner_cannot_deploy(self, chain, token, registry, accounts, params):
        owner, account1, _ = accounts
        collectible_id = registry.mint(owner, account1, "Test URI")

        with pytest.raises(NotCollectibleOwner):
            create_token_bid_auction(chain, token, registry, collectible_id, owner, params)

    def test_requires_allowance(self, auction, chain, token, accounts):
        account1 = accounts[1]
        chain.mine(5)

        with pytest.raises(PaymentTransferFailed):
            chain.transact(auction.bid, account1, HIGH_BID)

        token.approve(account1, auction.address, HIGH_BID - 10)
        with pytest.raises(PaymentTransferFailed):
            chain.transact(auction.bid, account1, HIGH_BID)

        assert auction.state_at(chain.block_number) == AuctionState.OPEN

    def test_full_settlement(self, auction, chain, token, registry, accounts):
        owner, account1, account2 = accounts
        chain.mine(5)
        owner_before = token.balance_of(owner)
        bidder_before = token.balance_of(account1)

        token.approve(account1, auction.address, HIGH_BID)
        chain.transact(auction.bid, account1, HIGH_BID)

        assert auction.winner == account1
        assert token.balance_of(owner) == owner_before + HIGH_BID
        assert token.balance_of(account1) == bidder_before - HIGH_BID
        assert registry.owner_of(0) == account1
        last = registry.transfers[-1]
        assert (last.sender, last.recipient, last.collectible_id) == (owner, account1, 0)

        with pytest.raises(AlreadyWon):
            chain.transact(auction.bid, account2, HIGH_BID)

    def test_owner_keeps_collectible_on_expiry(self, auction, chain, registry, accounts):
        chain.mine(NUM_BLOCKS_AUCTION_OPEN + 1)
        with pytest.raises(Expired):
            chain.transact(auction.bid, accounts[2], HIGH_BID)
        assert registry.owner_of(0) == accounts[0]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
