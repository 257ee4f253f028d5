"""
Dutch Auction - Descending-price auction with atomic settlement.

This module implements the single-lot Dutch auction shared by every
variant:
1. Price decays linearly from the initial price to the reserve price
   over a fixed number of steps, then stays pinned at reserve
2. The first bid at or above the current price wins
3. The winning bid settles atomically: payment to the seller, then (if
   configured) the collectible to the winner

State Machine:
-------------
    OPEN --bid >= price--> WON
    OPEN --elapsed > duration--> EXPIRED

WON and EXPIRED accept no bids. EXPIRED is derived from the step number,
so an auction nobody bid on reads EXPIRED without being touched.

Bid checks run in a fixed order: winner present (AlreadyWon), then window
elapsed (Expired), then price (InsufficientBid). Settlement failures
(PaymentTransferFailed, CollectibleTransferFailed) restore the auction
and every collaborator the bid touched to their exact pre-bid state.
Bids on one instance are serialized, so concurrent callers see at most
one winner.
"""

import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional

from dutchauction.core.auction import pricing
from dutchauction.core.auction.params import AuctionParams
from dutchauction.core.errors import (
    AlreadyWon,
    CollectibleTransferFailed,
    Expired,
    InsufficientBid,
    InvalidInput,
    PaymentTransferFailed,
)
from dutchauction.core.settlement.capability import TransferCapability
from dutchauction.core.settlement.collectible import CollectibleLeg
from dutchauction.core.settlement.payment import PaymentLeg
from dutchauction.core.state.journal import Journaled, atomic
from dutchauction.crypto import contract_address, sha256, short_hex
from dutchauction.utils.logger import get_logger
from dutchauction.utils.validation import validate_address, validate_bid_input, validate_step

logger = get_logger("auction")


# =============================================================================
# Enums
# =============================================================================


class AuctionState(IntEnum):
    """Bidding state of an auction at a given step."""
    OPEN = 0      # No winner, window still open
    WON = 1       # Winner locked, settled
    EXPIRED = 2   # No winner, window elapsed


# =============================================================================
# Data Structures
# =============================================================================


@dataclass(frozen=True)
class SettlementReceipt:
    """
    Record of a completed settlement.

    `amount` is what the winner paid; `price` is what the schedule asked
    for at that step (amount >= price).
    """
    receipt_id: bytes
    auction: bytes
    seller: bytes
    winner: bytes
    amount: int
    price: int
    step: int
    collectible_id: Optional[int] = None


# =============================================================================
# Dutch Auction
# =============================================================================


class DutchAuction:
    """
    A single Dutch auction instance.

    Attributes:
        address: Identity collaborators authorize (allowances, approvals)
        winner: Winning bidder, None until a bid settles
        receipt: SettlementReceipt of the winning bid, None until then
    """

    def __init__(
        self,
        seller: bytes,
        params: AuctionParams,
        start_step: int,
        payment_leg: PaymentLeg,
        collectible_leg: Optional[CollectibleLeg] = None,
        address: Optional[bytes] = None,
    ):
        """
        Create the auction.

        Args:
            seller: Receives payment; must own the collectible if one is set
            params: Price schedule
            start_step: Step number at creation
            payment_leg: How the bid amount reaches the seller
            collectible_leg: Optional collectible delivered to the winner
            address: Auction identity; derived from seller and start step
                if omitted

        Raises:
            InvalidInput: malformed seller, start step or address
            NotCollectibleOwner: seller does not own the collectible
        """
        for valid, err in (
            validate_address(seller, "seller"),
            validate_step(start_step, "start_step"),
        ):
            if not valid:
                raise InvalidInput(err)

        if address is None:
            address = contract_address(seller, start_step)
        valid, err = validate_address(address)
        if not valid:
            raise InvalidInput(err)

        if collectible_leg is not None:
            collectible_leg.verify_owner(seller)

        self._seller = bytes(seller)
        self._params = params
        self._start_step = start_step
        self._address = bytes(address)
        self.payment_leg = payment_leg
        self.collectible_leg = collectible_leg

        self.winner: Optional[bytes] = None
        self.receipt: Optional[SettlementReceipt] = None
        self._lock = threading.Lock()

        logger.info(
            f"Auction {short_hex(self._address)} created by {short_hex(self._seller)}: "
            f"{params.initial_price} -> {params.reserve_price} over {params.duration_steps} steps "
            f"from step {start_step}"
        )

    # =========================================================================
    # Immutable configuration
    # =========================================================================

    @property
    def seller(self) -> bytes:
        return self._seller

    @property
    def params(self) -> AuctionParams:
        return self._params

    @property
    def start_step(self) -> int:
        return self._start_step

    @property
    def address(self) -> bytes:
        return self._address

    @property
    def reserve_price(self) -> int:
        return self._params.reserve_price

    @property
    def duration_steps(self) -> int:
        return self._params.duration_steps

    @property
    def price_decrement(self) -> int:
        return self._params.price_decrement

    @property
    def initial_price(self) -> int:
        return self._params.initial_price

    @property
    def collectible_id(self) -> Optional[int]:
        if self.collectible_leg is None:
            return None
        return self.collectible_leg.collectible_id

    # =========================================================================
    # Queries
    # =========================================================================

    def current_price(self, now_step: int) -> int:
        """Price at `now_step`; reserve once the window has run out."""
        price = pricing.current_price(self._params, self._start_step, now_step)
        logger.debug(f"Price of {short_hex(self._address)} at step {now_step}: {price}")
        return price

    def state_at(self, now_step: int) -> AuctionState:
        if self.winner is not None:
            return AuctionState.WON
        if pricing.is_expired(self._params, self._start_step, now_step):
            return AuctionState.EXPIRED
        return AuctionState.OPEN

    def is_open(self, now_step: int) -> bool:
        return self.state_at(now_step) == AuctionState.OPEN

    # =========================================================================
    # Bidding
    # =========================================================================

    def bid(self, bidder: bytes, amount: int, now_step: int) -> SettlementReceipt:
        """
        Submit a bid of `amount` at `now_step`.

        For native-payment auctions `amount` is the value attached to the
        bid; all of it goes to the seller.

        Returns:
            SettlementReceipt of the now-settled auction

        Raises:
            InvalidInput: malformed arguments
            AlreadyWon: a winner is already locked
            Expired: window elapsed with no winner
            InsufficientBid: amount below current price
            PaymentTransferFailed: payment leg could not move the funds
            CollectibleTransferFailed: collectible could not be delivered
        """
        valid, err = validate_bid_input(bidder, amount, now_step)
        if not valid:
            raise InvalidInput(err)

        # Held from the winner check through commit or rollback
        with self._lock:
            if self.winner is not None:
                logger.debug(f"Bid from {short_hex(bidder)} rejected: already won")
                raise AlreadyWon()

            if pricing.is_expired(self._params, self._start_step, now_step):
                logger.debug(f"Bid from {short_hex(bidder)} rejected: expired at step {now_step}")
                raise Expired()

            price = self.current_price(now_step)
            if amount < price:
                logger.debug(f"Bid from {short_hex(bidder)} rejected: {amount} < {price}")
                raise InsufficientBid(amount, price)

            try:
                with atomic(self, *self._participants()):
                    self.winner = bytes(bidder)
                    self._settle(self.winner, amount)
                    self.receipt = self._make_receipt(amount, price, now_step)
            except (PaymentTransferFailed, CollectibleTransferFailed) as exc:
                logger.warning(f"Settlement of {short_hex(self._address)} rolled back: {exc}")
                raise

            receipt = self.receipt

        logger.info(
            f"Auction {short_hex(self._address)} won by {short_hex(bidder)} "
            f"for {amount} at step {now_step} (price {price})"
        )
        return receipt

    def _settle(self, winner: bytes, amount: int) -> None:
        """Payment first: a failed payment must never leave the collectible moved."""
        capability = TransferCapability(operator=self._address)

        self.payment_leg.pay(winner, self._seller, amount, capability)

        if self.collectible_leg is not None:
            self.collectible_leg.deliver(self._seller, winner, capability)

    def _participants(self) -> List[Journaled]:
        participants = list(self.payment_leg.participants())
        if self.collectible_leg is not None:
            participants.extend(self.collectible_leg.participants())
        return participants

    def _make_receipt(self, amount: int, price: int, now_step: int) -> SettlementReceipt:
        receipt_id = sha256(
            self._address
            + self.winner
            + amount.to_bytes(32, "big")
            + now_step.to_bytes(8, "big")
        )
        return SettlementReceipt(
            receipt_id=receipt_id,
            auction=self._address,
            seller=self._seller,
            winner=self.winner,
            amount=amount,
            price=price,
            step=now_step,
            collectible_id=self.collectible_id,
        )

    # =========================================================================
    # Journaling
    # =========================================================================

    def snapshot(self) -> tuple:
        return self.winner, self.receipt

    def restore(self, snapshot: tuple) -> None:
        self.winner, self.receipt = snapshot

    # =========================================================================
    # Utility
    # =========================================================================

    def __repr__(self) -> str:
        winner = short_hex(self.winner) if self.winner else None
        return f"DutchAuction(address={short_hex(self._address)}, winner={winner})"

    def stats(self, now_step: int) -> dict:
        """Snapshot of the auction as seen at `now_step`."""
        return {
            "address": self._address.hex(),
            "seller": self._seller.hex(),
            "state": self.state_at(now_step).name,
            "initial_price": self.initial_price,
            "reserve_price": self.reserve_price,
            "current_price": self.current_price(now_step),
            "start_step": self._start_step,
            "duration_steps": self.duration_steps,
            "winner": self.winner.hex() if self.winner else None,
            "collectible_id": self.collectible_id,
        }


__all__ = [
    "AuctionState",
    "SettlementReceipt",
    "DutchAuction",
]
