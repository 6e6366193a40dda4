"""FastAPI router for the BFHL endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.config import Settings, get_settings
from src.dependencies import get_answer_provider
from src.exceptions import InvalidJSONError

from .ai import AnswerProvider
from .schemas import ErrorEnvelope, SuccessEnvelope
from .service import dispatch


router = APIRouter(tags=["bfhl"])


@router.post(
    "/bfhl",
    response_model=SuccessEnvelope,
    responses={400: {"model": ErrorEnvelope}},
)
async def bfhl_endpoint(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    provider: Annotated[AnswerProvider, Depends(get_answer_provider)],
) -> SuccessEnvelope:
    """Run the single operation named by the request body's only key.
    
    The body is read raw rather than through a pydantic model so that
    shape errors (arrays, scalars, extra keys) surface as envelope messages.
    
    Args:
        request: Incoming request carrying the JSON body.
        settings: Application settings.
        provider: Answer provider for the ``AI`` operation.
        
    Returns:
        SuccessEnvelope with the operation result.
    """
    try:
        body = await request.json()
    except ValueError:
        raise InvalidJSONError()

    data = await dispatch(body, settings, provider)
    return SuccessEnvelope.build(settings.OFFICIAL_EMAIL, data)
