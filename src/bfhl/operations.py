"""Arithmetic handlers with strict input validation.

Every handler validates its raw JSON value before computing and raises
:class:`InvalidInputError` with a human-readable message on bad input.
"""

from functools import reduce
from math import isqrt
from typing import Any

from src.exceptions import InvalidInputError


DEFAULT_FIBONACCI_MAX = 1000
DEFAULT_MAX_ARRAY_LENGTH = 1000
DEFAULT_MAX_PRIME_VALUE = 1_000_000_000


def as_integer(value: Any) -> int | None:
    """Return ``value`` as an int when it is an integral JSON number.

    JSON has a single number type, so ``5.0`` counts as ``5``. Booleans are
    rejected even though ``bool`` subclasses ``int``.

    Args:
        value: Decoded JSON value.

    Returns:
        The integer, or None if the value is not an integral number.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def validate_integer_array(
    values: Any,
    max_length: int,
    *,
    allow_empty: bool = True,
    positive: bool = False,
) -> list[int]:
    """Validate a JSON array of integers.

    Args:
        values: Decoded JSON value.
        max_length: Maximum number of elements.
        allow_empty: Whether ``[]`` is acceptable.
        positive: Require every element to be greater than zero.

    Returns:
        The elements as ints.

    Raises:
        InvalidInputError: On any violation.
    """
    if not isinstance(values, list):
        raise InvalidInputError("Input must be an array")
    if not values and not allow_empty:
        raise InvalidInputError("Input must be a non-empty array")
    if len(values) > max_length:
        raise InvalidInputError(f"Array length must not exceed {max_length}")

    result = []
    for item in values:
        number = as_integer(item)
        if number is None:
            raise InvalidInputError("All array elements must be integers")
        if positive and number <= 0:
            raise InvalidInputError("All array elements must be positive integers")
        result.append(number)
    return result


def fibonacci(n: Any, max_n: int = DEFAULT_FIBONACCI_MAX) -> list[int]:
    """Return the first ``n`` Fibonacci numbers starting at 0."""
    count = as_integer(n)
    if count is None or count <= 0:
        raise InvalidInputError("Input must be a positive integer")
    if count > max_n:
        raise InvalidInputError(f"Input must not exceed {max_n}")

    series = [0, 1][:count]
    while len(series) < count:
        series.append(series[-1] + series[-2])
    return series


def is_prime(number: int) -> bool:
    """Trial division up to the integer square root."""
    if number < 2:
        return False
    if number < 4:
        return True
    if number % 2 == 0:
        return False
    for divisor in range(3, isqrt(number) + 1, 2):
        if number % divisor == 0:
            return False
    return True


def primes(
    values: Any,
    max_length: int = DEFAULT_MAX_ARRAY_LENGTH,
    max_value: int = DEFAULT_MAX_PRIME_VALUE,
) -> list[int]:
    """Return the prime elements of ``values`` in their original order."""
    numbers = validate_integer_array(values, max_length)
    for number in numbers:
        if abs(number) > max_value:
            raise InvalidInputError(f"Array elements must not exceed {max_value} in magnitude")
    return [number for number in numbers if is_prime(number)]


def gcd(a: int, b: int) -> int:
    """Euclid's algorithm."""
    while b:
        a, b = b, a % b
    return abs(a)


def hcf(values: Any, max_length: int = DEFAULT_MAX_ARRAY_LENGTH) -> int:
    """Highest common factor of a non-empty array of positive integers."""
    numbers = validate_integer_array(values, max_length, allow_empty=False, positive=True)
    return reduce(gcd, numbers)


def lcm(values: Any, max_length: int = DEFAULT_MAX_ARRAY_LENGTH) -> int:
    """Least common multiple of a non-empty array of positive integers."""
    numbers = validate_integer_array(values, max_length, allow_empty=False, positive=True)
    return reduce(lambda a, b: abs(a * b) // gcd(a, b), numbers)
