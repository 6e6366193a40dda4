"""Global dependencies for the application."""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from src.bfhl.ai import AnswerProvider, OpenRouterAnswerProvider
from src.config import Settings, get_settings


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """Dependency to get the global shared HTTP client.
    
    This client is initialized in main.py lifespan and shared across requests
    to enable connection pooling (keep-alive).
    
    Args:
        request: The FastAPI request object.
        
    Returns:
        The global httpx.AsyncClient instance.
    """
    return request.app.state.http_client


async def get_answer_provider(
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AnswerProvider:
    """Dependency that builds the AI answer provider from settings.
    
    Override this in tests to avoid outbound calls.
    """
    return OpenRouterAnswerProvider(
        client=client,
        api_key=settings.OPENROUTER_API_KEY,
        base_url=settings.OPENROUTER_BASE_URL,
        model=settings.AI_MODEL,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )
