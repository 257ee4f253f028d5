"""
Chain - Step source and deployment bookkeeping.

Models a development chain that mines one block per transaction. The
block number is the "step" auctions price against. Auctions only ever
read it; nothing in an auction advances it.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, Optional

from dutchauction.core.state.ledger import Ledger
from dutchauction.crypto import contract_address, short_hex
from dutchauction.utils.logger import get_logger

logger = get_logger("chain")


class Chain:
    """
    Monotonic block counter with per-account deployment nonces.

    Attributes:
        block_number: Latest mined block (0 at genesis)
        ledger: Native ledger, notified of every mined block
    """

    def __init__(self, ledger: Optional[Ledger] = None):
        self.block_number = 0
        self.ledger = ledger if ledger is not None else Ledger()
        self.nonces: Dict[bytes, int] = defaultdict(int)

    def mine(self, blocks: int = 1) -> int:
        """Advance by `blocks` blocks and return the new block number."""
        if blocks < 0:
            raise ValueError("Cannot mine a negative number of blocks")

        for _ in range(blocks):
            self.block_number += 1
            self.ledger.record_block(self.block_number)

        if blocks:
            logger.debug(f"Mined {blocks} block(s), now at {self.block_number}")
        return self.block_number

    def deploy_address(self, deployer: bytes) -> bytes:
        """
        Mine the deployment block and return the new instance's address.

        The deployed instance should take `block_number` (after this call)
        as its creation step.
        """
        self.mine()
        nonce = self.nonces[deployer]
        self.nonces[deployer] = nonce + 1
        address = contract_address(deployer, nonce)
        logger.debug(f"Deployment by {short_hex(deployer)} -> {short_hex(address)} at block {self.block_number}")
        return address

    def transact(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Execute `fn` as a transaction in a freshly mined block.

        `fn` receives the new block number as `now_step`. The block is
        mined even if `fn` raises.
        """
        self.mine()
        return fn(*args, now_step=self.block_number, **kwargs)

    def __repr__(self) -> str:
        return f"Chain(block_number={self.block_number})"
