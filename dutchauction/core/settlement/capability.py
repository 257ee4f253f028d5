"""
Transfer capability - the identity settlement acts as.

Collaborators never look up "who is calling" from ambient state; the
auction hands its own address to each leg explicitly, and the token and
registry check their allowances and approvals against that address.
"""

from dataclasses import dataclass

from dutchauction.crypto import short_hex


@dataclass(frozen=True)
class TransferCapability:
    operator: bytes

    def __repr__(self) -> str:
        return f"TransferCapability({short_hex(self.operator)})"
