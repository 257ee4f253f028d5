"""
Payment legs - Moving the bid amount from bidder to seller.

Two variants:
- NativePaymentLeg: the amount is attached to the bid; it is moved from
  the bidder's native balance straight to the seller.
- TokenPaymentLeg: the auction pulls the amount with the token's
  transfer_from, spending the allowance the bidder granted it.

Either way funds go directly to the seller, never through the auction.
"""

from typing import List, Protocol

from dutchauction.core.assets.token import FungibleToken
from dutchauction.core.errors import LedgerError, PaymentTransferFailed
from dutchauction.core.settlement.capability import TransferCapability
from dutchauction.core.state.journal import Journaled
from dutchauction.core.state.ledger import Ledger
from dutchauction.crypto import short_hex
from dutchauction.utils.logger import get_logger

logger = get_logger("settlement")


class PaymentLeg(Protocol):
    """Moves `amount` from bidder to seller or raises PaymentTransferFailed."""

    def pay(self, bidder: bytes, seller: bytes, amount: int, capability: TransferCapability) -> None:
        ...

    def participants(self) -> List[Journaled]:
        ...


class NativePaymentLeg:
    """Settle in the native asset attached to the bid."""

    def __init__(self, ledger: Ledger):
        self.ledger = ledger

    def pay(self, bidder: bytes, seller: bytes, amount: int, capability: TransferCapability) -> None:
        try:
            self.ledger.transfer(bidder, seller, amount)
        except LedgerError as exc:
            raise PaymentTransferFailed(f"native payment failed: {exc}") from exc

        logger.debug(f"Native payment {amount} {short_hex(bidder)} -> {short_hex(seller)}")

    def participants(self) -> List[Journaled]:
        return [self.ledger]

    def __repr__(self) -> str:
        return "NativePaymentLeg()"


class TokenPaymentLeg:
    """Settle by pulling an approved fungible-token amount."""

    def __init__(self, token: FungibleToken):
        self.token = token

    def pay(self, bidder: bytes, seller: bytes, amount: int, capability: TransferCapability) -> None:
        moved = self.token.transfer_from(capability.operator, bidder, seller, amount)
        if not moved:
            raise PaymentTransferFailed(
                f"insufficient balance or spending authorization for {amount} {self.token.symbol}"
            )

        logger.debug(f"Token payment {amount} {self.token.symbol} {short_hex(bidder)} -> {short_hex(seller)}")

    def participants(self) -> List[Journaled]:
        return [self.token]

    def __repr__(self) -> str:
        return f"TokenPaymentLeg({self.token.symbol})"


__all__ = ["PaymentLeg", "NativePaymentLeg", "TokenPaymentLeg"]
