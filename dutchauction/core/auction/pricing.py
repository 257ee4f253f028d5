"""
Pricing - Linear price decay over discrete steps.

    initial = reserve + duration * decrement
    elapsed = clamp(now - start, 0, duration)
    price   = initial - elapsed * decrement

Because elapsed never exceeds duration, price never drops below reserve:
at elapsed == duration the subtraction lands exactly on reserve, and every
later step is pinned there. No floor is applied after the fact.
"""

from typing import List, Tuple

from dutchauction.core.auction.params import AuctionParams


def elapsed_steps(start_step: int, now_step: int) -> int:
    """Raw steps since start; 0 if `now_step` precedes the start."""
    if now_step <= start_step:
        return 0
    return now_step - start_step


def clamped_elapsed(params: AuctionParams, start_step: int, now_step: int) -> int:
    return min(elapsed_steps(start_step, now_step), params.duration_steps)


def current_price(params: AuctionParams, start_step: int, now_step: int) -> int:
    """Price at `now_step` for an auction created at `start_step`."""
    elapsed = clamped_elapsed(params, start_step, now_step)
    return params.initial_price - elapsed * params.price_decrement


def is_expired(params: AuctionParams, start_step: int, now_step: int) -> bool:
    """Past the last open step (the step where price reaches reserve is still open)."""
    return elapsed_steps(start_step, now_step) > params.duration_steps


def price_schedule(params: AuctionParams, extra_steps: int = 1) -> List[Tuple[int, int]]:
    """(elapsed, price) for every elapsed step through duration + extra_steps."""
    return [
        (elapsed, current_price(params, 0, elapsed))
        for elapsed in range(params.duration_steps + extra_steps + 1)
    ]


__all__ = [
    "elapsed_steps",
    "clamped_elapsed",
    "current_price",
    "is_expired",
    "price_schedule",
]
