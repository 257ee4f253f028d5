"""
Collectible leg - Delivering the auctioned collectible to the winner.

The seller keeps the collectible for the whole auction. At settlement the
registry moves it from seller to winner, authorized by the approval the
seller granted to the auction's address.
"""

from typing import List

from dutchauction.core.assets.registry import CollectibleRegistry
from dutchauction.core.errors import CollectibleTransferFailed, NotCollectibleOwner, RegistryError
from dutchauction.core.settlement.capability import TransferCapability
from dutchauction.core.state.journal import Journaled
from dutchauction.crypto import short_hex
from dutchauction.utils.logger import get_logger

logger = get_logger("settlement")


class CollectibleLeg:
    """Moves one collectible from seller to winner."""

    def __init__(self, registry: CollectibleRegistry, collectible_id: int):
        self.registry = registry
        self.collectible_id = collectible_id

    def verify_owner(self, seller: bytes) -> None:
        """
        Check `seller` currently owns the collectible.

        Raises:
            NotCollectibleOwner: someone else owns it, or the id is unknown
        """
        try:
            owner = self.registry.owner_of(self.collectible_id)
        except RegistryError as exc:
            raise NotCollectibleOwner() from exc

        if owner != seller:
            raise NotCollectibleOwner()

    def deliver(self, seller: bytes, winner: bytes, capability: TransferCapability) -> None:
        """
        Transfer the collectible from seller to winner.

        Raises:
            CollectibleTransferFailed: approval revoked, ownership changed,
                or any other registry rejection
        """
        try:
            if not self.registry.is_approved_or_owner(capability.operator, self.collectible_id):
                raise CollectibleTransferFailed(
                    f"{short_hex(capability.operator)} is not approved for "
                    f"{self.registry.symbol} #{self.collectible_id}"
                )
            self.registry.transfer_from(capability.operator, seller, winner, self.collectible_id)
        except RegistryError as exc:
            raise CollectibleTransferFailed(f"collectible transfer failed: {exc}") from exc

        logger.debug(
            f"Delivered {self.registry.symbol} #{self.collectible_id} "
            f"{short_hex(seller)} -> {short_hex(winner)}"
        )

    def participants(self) -> List[Journaled]:
        return [self.registry]

    def __repr__(self) -> str:
        return f"CollectibleLeg({self.registry.symbol} #{self.collectible_id})"


__all__ = ["CollectibleLeg"]
