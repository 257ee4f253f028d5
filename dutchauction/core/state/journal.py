"""
Journal - All-or-nothing execution over snapshot/restore participants.

Conceptual Background:
---------------------
A chain executes a transaction as a unit: if anything fails part way,
every write made during the call is discarded. Off-chain we get the same
property by snapshotting every object a call may touch, running the call,
and restoring the snapshots if it raises.

    with atomic(auction, ledger, registry):
        auction.winner = bidder
        ledger.transfer(bidder, seller, price)
        registry.transfer_from(...)   # raises -> all three restored

Participants only need snapshot() and restore(); what a snapshot contains
is their own business.
"""

from contextlib import contextmanager
from typing import Any, Iterator, List, Protocol, Tuple

from dutchauction.utils.logger import get_logger

logger = get_logger("journal")


class Journaled(Protocol):
    """Anything whose full mutable state can be captured and put back."""

    def snapshot(self) -> Any:
        ...

    def restore(self, snapshot: Any) -> None:
        ...


@contextmanager
def atomic(*participants: Journaled) -> Iterator[None]:
    """
    Run the enclosed block atomically across `participants`.

    Duplicates (the same object listed twice) are snapshotted once.
    On any exception each participant is restored, newest first, and the
    exception propagates unchanged.
    """
    unique: List[Journaled] = []
    for participant in participants:
        if not any(participant is seen for seen in unique):
            unique.append(participant)

    saved: List[Tuple[Journaled, Any]] = [(p, p.snapshot()) for p in unique]
    try:
        yield
    except BaseException:
        for participant, snapshot in reversed(saved):
            participant.restore(snapshot)
        logger.debug(f"Rolled back {len(saved)} participant(s)")
        raise


__all__ = ["Journaled", "atomic"]
