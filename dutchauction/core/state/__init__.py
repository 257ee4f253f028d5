"""Native ledger and atomic execution"""
from dutchauction.core.state.journal import Journaled, atomic
from dutchauction.core.state.ledger import Ledger, LedgerSnapshot

__all__ = [
    "Journaled",
    "atomic",
    "Ledger",
    "LedgerSnapshot",
]
