"""
Settlement legs.

Payment moves the bid amount from bidder to seller; the optional
collectible leg moves the auctioned collectible from seller to winner.
"""

from dutchauction.core.settlement.capability import TransferCapability
from dutchauction.core.settlement.payment import (
    PaymentLeg,
    NativePaymentLeg,
    TokenPaymentLeg,
)
from dutchauction.core.settlement.collectible import CollectibleLeg

__all__ = [
    "TransferCapability",
    "PaymentLeg",
    "NativePaymentLeg",
    "TokenPaymentLeg",
    "CollectibleLeg",
]
