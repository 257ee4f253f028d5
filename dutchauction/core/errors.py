"""
Errors - Failure kinds reported by the auction and its collaborators.

Every auction failure is a distinct AuctionError subclass so callers can
tell a late bid from an underpriced one without parsing messages. None of
them are retried internally.
"""


class AuctionError(Exception):
    """Base class for auction failures."""

    default_message = "auction error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)


class AlreadyWon(AuctionError):
    """Bid submitted after a winner was locked."""

    default_message = "auction already has an accepted winner"


class Expired(AuctionError):
    """Bid submitted after the duration elapsed with no winner."""

    default_message = "auction window has elapsed with no winner"


class InsufficientBid(AuctionError):
    """Bid amount strictly below the current decayed price."""

    default_message = "bid amount below current price"

    def __init__(self, amount: int, price: int):
        super().__init__(f"{self.default_message}: offered {amount}, price is {price}")
        self.amount = amount
        self.price = price


class PaymentTransferFailed(AuctionError):
    """Payment leg could not move the funds."""

    default_message = "insufficient balance or spending authorization"


class CollectibleTransferFailed(AuctionError):
    """Collectible leg could not move the asset."""

    default_message = "collectible transfer to the winner was not authorized"


class NotCollectibleOwner(AuctionError):
    """Construction-time ownership precondition violated."""

    default_message = "the referenced collectible does not belong to the declared seller"


class InvalidAuctionParams(AuctionError, ValueError):
    """Construction parameters out of range."""

    default_message = "invalid auction parameters"


class InvalidInput(AuctionError, ValueError):
    """Malformed bid arguments (wrong-size address, negative amount...)."""

    default_message = "invalid input"


# =============================================================================
# Collaborator errors
# =============================================================================


class LedgerError(Exception):
    """Native ledger rejected an operation."""


class InsufficientFunds(LedgerError):
    """Sender balance below the transfer amount."""


class TokenError(Exception):
    """Fungible token rejected an operation."""


class RegistryError(Exception):
    """Collectible registry rejected an operation."""


__all__ = [
    "AuctionError",
    "AlreadyWon",
    "Expired",
    "InsufficientBid",
    "PaymentTransferFailed",
    "CollectibleTransferFailed",
    "NotCollectibleOwner",
    "InvalidAuctionParams",
    "InvalidInput",
    "LedgerError",
    "InsufficientFunds",
    "TokenError",
    "RegistryError",
]
