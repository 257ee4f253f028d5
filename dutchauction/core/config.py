"""
Configuration for the Dutch auction engine.

Defines default auction parameters and logging options. Values can be
overridden from a dotenv file and from the process environment, using
keys prefixed with DUTCH_AUCTION_ (e.g. DUTCH_AUCTION_RESERVE_PRICE=500).
Environment variables win over the file.
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

from dutchauction.core.auction.params import AuctionParams

ENV_PREFIX = "DUTCH_AUCTION_"


@dataclass
class AuctionConfig:
    """Engine-wide configuration"""

    # Default price schedule
    reserve_price: int = 500           # Floor price
    duration_steps: int = 10           # Blocks the auction stays open
    price_decrement: int = 50          # Price drop per block

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    log_to_file: bool = False

    def to_params(self) -> AuctionParams:
        """Validated price schedule from these defaults."""
        return AuctionParams.create(
            reserve_price=self.reserve_price,
            duration_steps=self.duration_steps,
            price_decrement=self.price_decrement,
        )

    @property
    def level(self) -> int:
        """Numeric logging level."""
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        return level


# Global config instance (can be overridden)
config = AuctionConfig()


def _coerce(name: str, raw: str, default):
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        try:
            return int(raw.strip())
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}") from None
    if isinstance(default, Path):
        return Path(raw.strip())
    return raw.strip()


def load_config(config_path: Optional[str] = None) -> AuctionConfig:
    """
    Load configuration from a dotenv file and the environment.

    Args:
        config_path: Optional path to a dotenv file

    Returns:
        AuctionConfig instance
    """
    values: Dict[str, Optional[str]] = {}
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        values.update(dotenv_values(path))
    values.update(os.environ)

    defaults = AuctionConfig()
    overrides = {}
    for f in fields(AuctionConfig):
        raw = values.get(ENV_PREFIX + f.name.upper())
        if raw is None:
            continue
        overrides[f.name] = _coerce(f.name, raw, getattr(defaults, f.name))

    return AuctionConfig(**overrides)
