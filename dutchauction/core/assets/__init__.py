"""Payment token and collectible registry collaborators"""
from dutchauction.core.assets.token import FungibleToken, TokenTransfer
from dutchauction.core.assets.registry import CollectibleRegistry, CollectibleTransfer

__all__ = [
    "FungibleToken",
    "TokenTransfer",
    "CollectibleRegistry",
    "CollectibleTransfer",
]
