"""
Collectible Registry - Ownership of uniquely identified assets.

The registry tracks who owns each collectible and who may move it. Moving
a collectible requires the operator to be its owner, the single account
approved for that id, or an operator the owner approved for all of their
collectibles. The auction never owns the collectible: the seller approves
the auction's address and the registry moves the asset straight from
seller to winner at settlement.
"""

from dataclasses import dataclass
from typing import Dict, List, Set, Tuple

from dutchauction.core.errors import RegistryError
from dutchauction.crypto import ZERO_ADDRESS, short_hex
from dutchauction.utils.logger import get_logger
from dutchauction.utils.validation import validate_address

logger = get_logger("registry")


@dataclass(frozen=True)
class CollectibleTransfer:
    """Transfer event (sender is ZERO_ADDRESS for mints)."""
    sender: bytes
    recipient: bytes
    collectible_id: int


class CollectibleRegistry:
    """
    Registry of non-fungible collectibles.

    Ids are assigned sequentially from 0 by mint().
    """

    def __init__(self, name: str, symbol: str, owner: bytes):
        valid, err = validate_address(owner, "owner")
        if not valid:
            raise RegistryError(err)

        self.name = name
        self.symbol = symbol
        self.owner = owner

        self.owners: Dict[int, bytes] = {}
        self.uris: Dict[int, str] = {}
        self.approvals: Dict[int, bytes] = {}
        self.operators: Set[Tuple[bytes, bytes]] = set()  # (owner, operator)
        self.transfers: List[CollectibleTransfer] = []
        self.next_id = 0

    # =========================================================================
    # Minting
    # =========================================================================

    def mint(self, caller: bytes, to: bytes, uri: str = "") -> int:
        """
        Mint a new collectible to `to`. Registry owner only.

        Returns:
            The new collectible id
        """
        if caller != self.owner:
            raise RegistryError("Ownable: caller is not the owner")
        valid, err = validate_address(to, "to")
        if not valid or to == ZERO_ADDRESS:
            raise RegistryError(err or "mint to the zero address")

        collectible_id = self.next_id
        self.next_id += 1
        self.owners[collectible_id] = to
        self.uris[collectible_id] = uri
        self.transfers.append(CollectibleTransfer(ZERO_ADDRESS, to, collectible_id))

        logger.debug(f"{self.symbol}: minted #{collectible_id} to {short_hex(to)}")
        return collectible_id

    # =========================================================================
    # Queries
    # =========================================================================

    def owner_of(self, collectible_id: int) -> bytes:
        owner = self.owners.get(collectible_id)
        if owner is None:
            raise RegistryError(f"{self.symbol}: invalid collectible id {collectible_id}")
        return owner

    def token_uri(self, collectible_id: int) -> str:
        self.owner_of(collectible_id)
        return self.uris[collectible_id]

    def balance_of(self, account: bytes) -> int:
        return sum(1 for owner in self.owners.values() if owner == account)

    def get_approved(self, collectible_id: int) -> bytes:
        self.owner_of(collectible_id)
        return self.approvals.get(collectible_id, ZERO_ADDRESS)

    def is_approved_for_all(self, owner: bytes, operator: bytes) -> bool:
        return (owner, operator) in self.operators

    def is_approved_or_owner(self, operator: bytes, collectible_id: int) -> bool:
        """Whether `operator` may move `collectible_id` right now."""
        owner = self.owner_of(collectible_id)
        return (
            operator == owner
            or self.approvals.get(collectible_id) == operator
            or self.is_approved_for_all(owner, operator)
        )

    # =========================================================================
    # Authorization
    # =========================================================================

    def approve(self, caller: bytes, approved: bytes, collectible_id: int) -> None:
        """Approve one account to move `collectible_id` (ZERO_ADDRESS clears)."""
        owner = self.owner_of(collectible_id)
        if approved == owner:
            raise RegistryError("approval to current owner")
        if caller != owner and not self.is_approved_for_all(owner, caller):
            raise RegistryError("approve caller is not token owner or approved for all")

        if approved == ZERO_ADDRESS:
            self.approvals.pop(collectible_id, None)
        else:
            self.approvals[collectible_id] = approved
        logger.debug(f"{self.symbol}: #{collectible_id} approved for {short_hex(approved)}")

    def set_approval_for_all(self, owner: bytes, operator: bytes, approved: bool) -> None:
        if owner == operator:
            raise RegistryError("approve to caller")
        if approved:
            self.operators.add((owner, operator))
        else:
            self.operators.discard((owner, operator))

    # =========================================================================
    # Transfers
    # =========================================================================

    def transfer_from(self, operator: bytes, sender: bytes, to: bytes, collectible_id: int) -> None:
        """
        Move `collectible_id` from `sender` to `to` on behalf of `operator`.

        Raises:
            RegistryError: unknown id, operator not authorized, sender not
                the current owner, or bad recipient
        """
        if not self.is_approved_or_owner(operator, collectible_id):
            raise RegistryError("caller is not token owner or approved")
        if self.owners[collectible_id] != sender:
            raise RegistryError("transfer from incorrect owner")
        valid, err = validate_address(to, "to")
        if not valid or to == ZERO_ADDRESS:
            raise RegistryError(err or "transfer to the zero address")

        self.approvals.pop(collectible_id, None)
        self.owners[collectible_id] = to
        self.transfers.append(CollectibleTransfer(sender, to, collectible_id))

        logger.debug(f"{self.symbol}: #{collectible_id} from {short_hex(sender)} to {short_hex(to)}")

    # =========================================================================
    # Journaling
    # =========================================================================

    def snapshot(self) -> tuple:
        return (
            dict(self.owners),
            dict(self.uris),
            dict(self.approvals),
            set(self.operators),
            len(self.transfers),
            self.next_id,
        )

    def restore(self, snapshot: tuple) -> None:
        owners, uris, approvals, operators, transfer_count, next_id = snapshot
        self.owners = dict(owners)
        self.uris = dict(uris)
        self.approvals = dict(approvals)
        self.operators = set(operators)
        del self.transfers[transfer_count:]
        self.next_id = next_id

    def __repr__(self) -> str:
        return f"CollectibleRegistry({self.symbol}, minted={self.next_id})"
