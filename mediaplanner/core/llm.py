from openai import OpenAI, OpenAIError

from mediaplanner.config import settings
from mediaplanner.core.errors import ProviderError, ProviderConfigError
from mediaplanner.core.logging import get_logger
from mediaplanner.core.observability import LLM_CALLS

log = get_logger("llm")

def _client():
    if not settings.llm_api_key:
        raise ProviderConfigError("LLM_API_KEY is not set")
    return OpenAI(api_key=settings.llm_api_key, base_url=settings.llm_api_base)

def generate_text(prompt: str, *, system: str | None = None, model: str | None = None,
                  temperature: float | None = None, max_tokens: int | None = None) -> str:
    """
    Send one prompt to the configured provider and return its raw text.
    Raises ProviderError on transport/credential failure. No retries.
    """
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})

    client = _client()
    try:
        resp = client.chat.completions.create(
            model=model or settings.llm_model,
            messages=messages,
            temperature=settings.llm_temperature if temperature is None else temperature,
            max_tokens=max_tokens or settings.llm_max_tokens,
        )
    except OpenAIError as e:
        LLM_CALLS.labels(outcome="error").inc()
        log.error("llm_call_failed", extra={"error": type(e).__name__})
        raise ProviderError(f"LLM request failed: {e}") from e

    LLM_CALLS.labels(outcome="ok").inc()
    return (resp.choices[0].message.content or "").strip()
