"""
Ledger - Native asset balances.

Conceptual Background:
---------------------
The Ledger holds the balance of the chain's native asset for every
address. It is what the basic and collectible auctions settle in: the
value a bidder attaches to a bid is debited from the bidder and credited
to the seller in one step.

Transfer Processing:
-------------------
1. Validate amount (non-negative integer)
2. Check balance: sender balance >= amount
3. Apply: debit sender, credit recipient

Snapshot:
--------
Block snapshots record height and total supply for inspection; only the
latest MAX_BLOCK_SNAPSHOTS are kept. Separate
from those, snapshot()/restore() capture the full balance map so a failed
settlement can be undone (see core.state.journal).
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from dutchauction.core.errors import InsufficientFunds, LedgerError
from dutchauction.crypto import bytes_to_hex, short_hex
from dutchauction.utils.logger import get_logger
from dutchauction.utils.validation import validate_address, validate_amount

logger = get_logger("ledger")

MAX_BLOCK_SNAPSHOTS = 1000  # Oldest block summaries are dropped past this


# =============================================================================
# Ledger State
# =============================================================================


@dataclass
class LedgerSnapshot:
    """
    Summary of ledger state at a specific block height.
    """
    block_height: int
    account_count: int
    total_supply: int


class Ledger:
    """
    Account-balance ledger for the native asset.

    Attributes:
        balances: Mapping of address to balance
        block_height: Height of the last recorded block
        snapshots: LedgerSnapshot per recorded block, newest MAX_BLOCK_SNAPSHOTS
    """

    def __init__(self):
        self.balances: Dict[bytes, int] = {}
        self.block_height = 0
        self.snapshots: List[LedgerSnapshot] = []
        self._genesis_done = False

    # =========================================================================
    # State Access
    # =========================================================================

    def get_balance(self, address: bytes) -> int:
        """Get balance for an address (0 if never funded)."""
        return self.balances.get(address, 0)

    @property
    def total_supply(self) -> int:
        return sum(self.balances.values())

    # =========================================================================
    # Transfers
    # =========================================================================

    def transfer(self, sender: bytes, recipient: bytes, amount: int) -> None:
        """
        Move `amount` native units from sender to recipient.

        Raises:
            LedgerError: malformed address or amount
            InsufficientFunds: sender balance below amount
        """
        for valid, err in (
            validate_address(sender, "sender"),
            validate_address(recipient, "recipient"),
            validate_amount(amount),
        ):
            if not valid:
                raise LedgerError(err)

        balance = self.get_balance(sender)
        if balance < amount:
            raise InsufficientFunds(
                f"Insufficient balance: {bytes_to_hex(sender)} has {balance}, needs {amount}"
            )

        self.balances[sender] = balance - amount
        self.balances[recipient] = self.get_balance(recipient) + amount

        logger.debug(f"Transferred {amount} from {short_hex(sender)} to {short_hex(recipient)}")

    # =========================================================================
    # Genesis
    # =========================================================================

    def create_genesis(self, initial_allocations: List[Tuple[bytes, int]]) -> None:
        """
        Create genesis state with initial native allocations.

        Args:
            initial_allocations: List of (address, value) tuples
        """
        if self._genesis_done:
            raise LedgerError("Genesis already created")

        for address, value in initial_allocations:
            for valid, err in (validate_address(address), validate_amount(value)):
                if not valid:
                    raise LedgerError(err)
            self.balances[address] = self.get_balance(address) + value

        self._genesis_done = True
        logger.info(
            f"Genesis created: {len(initial_allocations)} allocations, "
            f"{sum(v for _, v in initial_allocations)} total units"
        )

    # =========================================================================
    # Blocks
    # =========================================================================

    def record_block(self, block_height: int) -> LedgerSnapshot:
        """Record a summary snapshot for a newly mined block."""
        self.block_height = block_height
        snapshot = LedgerSnapshot(
            block_height=block_height,
            account_count=len(self.balances),
            total_supply=self.total_supply,
        )
        self.snapshots.append(snapshot)
        if len(self.snapshots) > MAX_BLOCK_SNAPSHOTS:
            del self.snapshots[:-MAX_BLOCK_SNAPSHOTS]
        return snapshot

    # =========================================================================
    # Journaling
    # =========================================================================

    def snapshot(self) -> Dict[bytes, int]:
        return dict(self.balances)

    def restore(self, snapshot: Dict[bytes, int]) -> None:
        self.balances = dict(snapshot)

    # =========================================================================
    # Utility
    # =========================================================================

    def __repr__(self) -> str:
        return f"Ledger(height={self.block_height}, accounts={len(self.balances)})"

    def stats(self) -> dict:
        """Get ledger statistics."""
        return {
            "block_height": self.block_height,
            "account_count": len(self.balances),
            "total_supply": self.total_supply,
        }
