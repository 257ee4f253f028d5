"""
Fungible Token - Allowance-based payment asset.

The token-bid auction never receives attached value. Instead the bidder
first approves the auction's address to spend on their behalf, and the
auction pulls the bid amount with transfer_from at settlement.

transfer_from reports failure by returning False rather than raising,
which is the interface the payment leg is written against.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from dutchauction.core.errors import TokenError
from dutchauction.crypto import ZERO_ADDRESS, short_hex
from dutchauction.utils.logger import get_logger
from dutchauction.utils.validation import validate_address, validate_amount

logger = get_logger("token")


@dataclass(frozen=True)
class TokenTransfer:
    """Transfer event (sender is ZERO_ADDRESS for mints)."""
    sender: bytes
    recipient: bytes
    amount: int


class FungibleToken:
    """
    Minimal fungible token with balances and spending allowances.

    Attributes:
        name: Display name
        symbol: Ticker
        owner: Account allowed to mint
        transfers: Ordered log of TokenTransfer events
    """

    def __init__(self, name: str, symbol: str, owner: bytes):
        valid, err = validate_address(owner, "owner")
        if not valid:
            raise TokenError(err)

        self.name = name
        self.symbol = symbol
        self.owner = owner
        self.balances: Dict[bytes, int] = {}
        self.allowances: Dict[Tuple[bytes, bytes], int] = {}
        self.transfers: List[TokenTransfer] = []

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def total_supply(self) -> int:
        return sum(self.balances.values())

    def balance_of(self, account: bytes) -> int:
        return self.balances.get(account, 0)

    def allowance(self, owner: bytes, spender: bytes) -> int:
        return self.allowances.get((owner, spender), 0)

    # =========================================================================
    # Mutations
    # =========================================================================

    def mint(self, caller: bytes, to: bytes, amount: int) -> None:
        """Create `amount` new units for `to`. Owner only."""
        if caller != self.owner:
            raise TokenError("Ownable: caller is not the owner")
        self._check(to, "to", amount)

        self.balances[to] = self.balance_of(to) + amount
        self.transfers.append(TokenTransfer(ZERO_ADDRESS, to, amount))
        logger.debug(f"{self.symbol}: minted {amount} to {short_hex(to)}")

    def approve(self, owner: bytes, spender: bytes, amount: int) -> None:
        """Set (not add to) the amount `spender` may pull from `owner`."""
        self._check(spender, "spender", amount)
        self.allowances[(owner, spender)] = amount
        logger.debug(f"{self.symbol}: {short_hex(owner)} approved {short_hex(spender)} for {amount}")

    def transfer(self, sender: bytes, to: bytes, amount: int) -> None:
        """Move the sender's own funds; raises on insufficient balance."""
        self._check(to, "to", amount)
        if self.balance_of(sender) < amount:
            raise TokenError(f"{self.symbol}: transfer amount exceeds balance")
        self._move(sender, to, amount)

    def transfer_from(self, spender: bytes, sender: bytes, to: bytes, amount: int) -> bool:
        """
        Pull `amount` from `sender` to `to` using spender's allowance.

        Returns:
            True if moved, False on insufficient allowance or balance
            (nothing changes in that case)
        """
        self._check(to, "to", amount)

        allowed = self.allowance(sender, spender)
        if allowed < amount:
            logger.debug(f"{self.symbol}: allowance {allowed} < {amount} for {short_hex(spender)}")
            return False
        if self.balance_of(sender) < amount:
            logger.debug(f"{self.symbol}: balance {self.balance_of(sender)} < {amount}")
            return False

        self.allowances[(sender, spender)] = allowed - amount
        self._move(sender, to, amount)
        return True

    # =========================================================================
    # Journaling
    # =========================================================================

    def snapshot(self) -> tuple:
        return dict(self.balances), dict(self.allowances), len(self.transfers)

    def restore(self, snapshot: tuple) -> None:
        balances, allowances, transfer_count = snapshot
        self.balances = dict(balances)
        self.allowances = dict(allowances)
        del self.transfers[transfer_count:]

    # =========================================================================
    # Internal
    # =========================================================================

    def _check(self, address: bytes, name: str, amount: int) -> None:
        for valid, err in (validate_address(address, name), validate_amount(amount)):
            if not valid:
                raise TokenError(err)

    def _move(self, sender: bytes, to: bytes, amount: int) -> None:
        self.balances[sender] = self.balance_of(sender) - amount
        self.balances[to] = self.balance_of(to) + amount
        self.transfers.append(TokenTransfer(sender, to, amount))
        logger.debug(f"{self.symbol}: {amount} from {short_hex(sender)} to {short_hex(to)}")

    def __repr__(self) -> str:
        return f"FungibleToken({self.symbol}, holders={len(self.balances)}, supply={self.total_supply})"
