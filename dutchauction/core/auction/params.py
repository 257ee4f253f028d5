"""
Auction parameters - the immutable price schedule of one auction.
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dutchauction.core.errors import InvalidAuctionParams


class AuctionParams(BaseModel):
    """
    Price schedule fixed at construction.

    Attributes:
        reserve_price: Floor price, reached after duration_steps
        duration_steps: Number of steps the auction stays open
        price_decrement: Price drop per elapsed step
    """

    model_config = ConfigDict(frozen=True, strict=True)

    reserve_price: int = Field(ge=0)
    duration_steps: int = Field(gt=0)
    price_decrement: int = Field(ge=0)

    @property
    def initial_price(self) -> int:
        """Price at zero elapsed steps."""
        return self.reserve_price + self.duration_steps * self.price_decrement

    @classmethod
    def create(cls, reserve_price: int, duration_steps: int, price_decrement: int) -> "AuctionParams":
        """Build params, raising InvalidAuctionParams instead of pydantic's error."""
        try:
            return cls(
                reserve_price=reserve_price,
                duration_steps=duration_steps,
                price_decrement=price_decrement,
            )
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise InvalidAuctionParams(f"invalid auction parameters: {problems}") from exc
