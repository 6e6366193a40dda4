"""BFHL module - operation dispatch, arithmetic handlers and AI delegate."""

from .router import router
from .schemas import ErrorEnvelope, HealthEnvelope, SuccessEnvelope
from .service import ALLOWED_KEYS, dispatch, extract_operation


__all__ = [
    "router",
    "ErrorEnvelope",
    "HealthEnvelope",
    "SuccessEnvelope",
    "ALLOWED_KEYS",
    "dispatch",
    "extract_operation",
]
