"""Service layer for the BFHL endpoint: shape validation and dispatch."""

from functools import partial
from typing import Any, Callable

import structlog
from anyio import fail_after
from anyio.to_thread import run_sync

from src.config import Settings
from src.exceptions import (
    ForbiddenKeyError,
    InvalidInputError,
    InvalidKeyCountError,
    InvalidShapeError,
    UnknownOperationError,
)

from . import operations
from .ai import AnswerProvider, answer_question


logger = structlog.get_logger("bfhl.service")

AI_KEY = "AI"
ALLOWED_KEYS = frozenset({"fibonacci", "prime", "lcm", "hcf", AI_KEY})
FORBIDDEN_KEYS = frozenset({"__proto__", "constructor", "prototype"})


def extract_operation(body: Any) -> tuple[str, Any]:
    """Validate the request body and return its single ``(key, value)`` pair.
    
    Args:
        body: Decoded JSON request body.
        
    Returns:
        The operation key and its raw value.
        
    Raises:
        InvalidShapeError: If the body is not a JSON object.
        InvalidKeyCountError: If the body does not have exactly one key.
        ForbiddenKeyError: If the key is prototype-pollution-sensitive.
        UnknownOperationError: If the key is not a supported operation.
    """
    if not isinstance(body, dict):
        raise InvalidShapeError()
    if len(body) != 1:
        raise InvalidKeyCountError(len(body))

    key, value = next(iter(body.items()))
    if key in FORBIDDEN_KEYS:
        raise ForbiddenKeyError(key)
    if key not in ALLOWED_KEYS:
        raise UnknownOperationError(key)
    return key, value


def math_handler(key: str, settings: Settings) -> Callable[[Any], Any]:
    """Return the arithmetic handler for ``key`` bound to configured limits."""
    handlers = {
        "fibonacci": partial(operations.fibonacci, max_n=settings.FIBONACCI_MAX),
        "prime": partial(
            operations.primes,
            max_length=settings.MAX_ARRAY_LENGTH,
            max_value=settings.MAX_PRIME_VALUE,
        ),
        "lcm": partial(operations.lcm, max_length=settings.MAX_ARRAY_LENGTH),
        "hcf": partial(operations.hcf, max_length=settings.MAX_ARRAY_LENGTH),
    }
    return handlers[key]


async def run_math(key: str, value: Any, settings: Settings) -> Any:
    """Run an arithmetic handler in a worker thread under the compute timeout."""
    handler = math_handler(key, settings)
    try:
        with fail_after(settings.COMPUTE_TIMEOUT_SECONDS):
            return await run_sync(handler, value)
    except TimeoutError:
        logger.warning("compute_timeout", operation=key, timeout_seconds=settings.COMPUTE_TIMEOUT_SECONDS)
        raise InvalidInputError("Computation timed out")


async def dispatch(body: Any, settings: Settings, provider: AnswerProvider) -> Any:
    """Route a request body to the matching operation and return its result.
    
    This is the main entry point for the BFHL endpoint. It:
    1. Validates the body shape and its single key
    2. Runs the arithmetic handler, or asks the AI provider
    
    Args:
        body: Decoded JSON request body.
        settings: Application settings carrying the input limits.
        provider: Answer provider used for the ``AI`` operation.
        
    Returns:
        The operation result, ready to be placed in a success envelope.
    """
    key, value = extract_operation(body)
    logger.info("operation_dispatch", operation=key)

    if key == AI_KEY:
        return await answer_question(value, provider, max_length=settings.MAX_QUESTION_LENGTH)
    return await run_math(key, value, settings)
