"""AI delegate: asks an external language model for a one-word answer."""

import re
from typing import Any, Protocol

import httpx
import structlog

from src.exceptions import ConfigError, InvalidInputError, UpstreamError


logger = structlog.get_logger("bfhl.ai")

# Default timeout for upstream requests
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_QUESTION_LENGTH = 1000
PROMPT_PREFIX = "Answer in one word: "
FALLBACK_ANSWER = "unknown"

_NON_ALNUM_RE = re.compile(r"[^0-9A-Za-z]")


class AnswerProvider(Protocol):
    """Anything that can turn a prompt into raw answer text."""

    async def ask(self, prompt: str) -> str: ...


class OpenRouterAnswerProvider:
    """Answer provider backed by the OpenRouter chat completions API.
    
    Attributes:
        client: Shared HTTP client.
        api_key: Bearer credential; empty means not configured.
        base_url: API base URL, without the ``/chat/completions`` suffix.
        model: Model identifier sent with every request.
        timeout: Request timeout in seconds.
    """
    
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        model: str = "google/gemini-2.0-flash-001",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.client = client
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.base_url}/chat/completions"

    async def ask(self, prompt: str) -> str:
        """Send a single-message chat completion and return the reply text.
        
        Args:
            prompt: Full prompt to send as the user message.
            
        Returns:
            The content of the first choice.
            
        Raises:
            ConfigError: If no API key is configured.
            UpstreamError: If the request fails or the reply is unusable.
        """
        if not self.api_key:
            raise ConfigError("API key missing")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }

        try:
            response = await self.client.post(
                self.url,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException:
            logger.error("ai_upstream_timeout", timeout_seconds=self.timeout)
            raise UpstreamError(f"AI service timed out after {self.timeout}s")
        except httpx.RequestError as e:
            logger.error("ai_upstream_unavailable", reason=str(e))
            raise UpstreamError(f"AI service is unavailable: {e}")

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code >= 400:
            logger.error("ai_upstream_status", status_code=response.status_code)
            raise UpstreamError(
                _error_message(data) or f"AI service returned status {response.status_code}",
                status_code=response.status_code,
            )
        if data is None:
            raise UpstreamError("AI service returned invalid JSON")

        return _first_choice_content(data)


def _error_message(data: Any) -> str | None:
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        message = data["error"].get("message")
        if isinstance(message, str) and message:
            return message
    return None


def _first_choice_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise UpstreamError("AI service returned an unexpected response")
    if not isinstance(content, str):
        raise UpstreamError("AI service returned an unexpected response")
    return content


def validate_question(question: Any, max_length: int = DEFAULT_MAX_QUESTION_LENGTH) -> str:
    """Return the stripped question or raise InvalidInputError."""
    if not isinstance(question, str) or not question.strip():
        raise InvalidInputError("Input must be a non-empty string")
    question = question.strip()
    if len(question) > max_length:
        raise InvalidInputError(f"Question must not exceed {max_length} characters")
    return question


def build_prompt(question: str) -> str:
    return PROMPT_PREFIX + question


def normalize_answer(text: str) -> str:
    """Reduce a model reply to its first word, alphanumerics only.

    >>> normalize_answer("  Paris. is the capital")
    'Paris'
    >>> normalize_answer("!!!")
    'unknown'
    """
    words = text.split()
    if not words:
        return FALLBACK_ANSWER
    return _NON_ALNUM_RE.sub("", words[0]) or FALLBACK_ANSWER


async def answer_question(
    question: Any,
    provider: AnswerProvider,
    max_length: int = DEFAULT_MAX_QUESTION_LENGTH,
) -> str:
    """Validate ``question``, ask ``provider`` and normalize the reply."""
    prompt = build_prompt(validate_question(question, max_length))
    return normalize_answer(await provider.ask(prompt))
