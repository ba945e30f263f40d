"""Checked integer arithmetic at fixed widths

Python integers never overflow, so every operation that models a fixed-width
machine integer checks its result against the width bound explicitly.
Conversion, accrual and the health evaluator work in U128 and narrow back to
U64 with `to_u64` before anything is stored.
"""
from ..constants import U64_MAX, U128_MAX
from ..errors import DivisionByZeroError, MathOverflowError

U64 = U64_MAX
U128 = U128_MAX


def checked_add(a: int, b: int, limit: int = U128) -> int:
    """Add with overflow checking"""
    result = a + b
    if result > limit:
        raise MathOverflowError("Arithmetic overflow in addition")
    return result


def checked_sub(a: int, b: int) -> int:
    """Subtract with underflow checking"""
    if b > a:
        raise MathOverflowError("Arithmetic underflow in subtraction")
    return a - b


def checked_mul(a: int, b: int, limit: int = U128) -> int:
    """Multiply with overflow checking"""
    result = a * b
    if result > limit:
        raise MathOverflowError("Arithmetic overflow in multiplication")
    return result


def checked_div(a: int, b: int) -> int:
    """Floor division with zero checking"""
    if b == 0:
        raise DivisionByZeroError("Division by zero")
    return a // b


def checked_div_up(a: int, b: int, limit: int = U128) -> int:
    """Ceiling division computed as (a + b - 1) // b"""
    if b == 0:
        raise DivisionByZeroError("Division by zero")
    return checked_add(a, b - 1, limit) // b


def saturating_sub(a: int, b: int) -> int:
    """Subtract, flooring at zero"""
    return a - b if a > b else 0


def to_u64(value: int) -> int:
    """Narrow a wide intermediate back to u64"""
    if value < 0 or value > U64_MAX:
        raise MathOverflowError(f"Value {value} does not fit in u64")
    return value


def require_u64(name: str, value: int) -> int:
    """Validate that an external input is a non-negative u64"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0 or value > U64_MAX:
        raise MathOverflowError(f"{name}={value} is outside the u64 range")
    return value
