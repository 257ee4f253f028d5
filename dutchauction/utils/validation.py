"""
Input Validation - Sanitization of values crossing the auction boundary.

Provides validation for all external inputs to prevent:
- Malformed identities (wrong-size addresses)
- Integer overflows past the uint256 range
- Booleans and floats masquerading as amounts
"""

from typing import Any, Optional, Tuple

from dutchauction.crypto import ADDRESS_SIZE

# =============================================================================
# Constants
# =============================================================================

# Field bounds
MIN_AMOUNT = 0
MAX_AMOUNT = 2**256 - 1
MIN_STEP = 0
MAX_STEP = 2**64 - 1


# =============================================================================
# Validation Functions
# =============================================================================


def validate_bytes(
    data: Any,
    name: str,
    expected_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate bytes input.

    Args:
        data: Data to validate
        name: Field name for error messages
        expected_length: Exact expected length
        max_length: Maximum allowed length

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (bytes, bytearray)):
        return False, f"{name} must be bytes, got {type(data).__name__}"

    if expected_length is not None and len(data) != expected_length:
        return False, f"{name} must be {expected_length} bytes, got {len(data)}"

    if max_length is not None and len(data) > max_length:
        return False, f"{name} exceeds max length {max_length}, got {len(data)}"

    return True, ""


def validate_address(address: Any, name: str = "address") -> Tuple[bool, str]:
    """Validate a 20-byte address."""
    return validate_bytes(address, name, expected_length=ADDRESS_SIZE)


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        (is_valid, error_message)
    """
    # bool is an int subclass; True is not an amount
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any, name: str = "amount") -> Tuple[bool, str]:
    """Validate an asset amount."""
    return validate_integer(amount, name, MIN_AMOUNT, MAX_AMOUNT)


def validate_step(step: Any, name: str = "step") -> Tuple[bool, str]:
    """Validate a step (block) number."""
    return validate_integer(step, name, MIN_STEP, MAX_STEP)


# =============================================================================
# Composite Validators
# =============================================================================


def validate_bid_input(bidder: Any, amount: Any, now_step: Any) -> Tuple[bool, str]:
    """Validate the raw arguments of a bid call."""
    for valid, err in (
        validate_address(bidder, "bidder"),
        validate_amount(amount),
        validate_step(now_step, "now_step"),
    ):
        if not valid:
            return False, err

    return True, ""


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_bytes",
    "validate_address",
    "validate_integer",
    "validate_amount",
    "validate_step",
    "validate_bid_input",
    "MIN_AMOUNT",
    "MAX_AMOUNT",
    "MIN_STEP",
    "MAX_STEP",
]
