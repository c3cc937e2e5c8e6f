"""Proveedor de resúmenes (OpenAI → modelo fallback → Ollama opcional)."""
import logging
from time import monotonic
from typing import Callable, Optional

from openai import BadRequestError, OpenAI

from app.core.config import settings
from app.core.exceptions import ProviderError
from app.infrastructure.ai.ollama_client import ollama_ask
from app.infrastructure.ai.openai_client import get_openai

SYSTEM_PROMPT = "You summarize user notes. Reply with the summary only, no preamble."

_log = logging.getLogger("notes.ai")


class Summarizer:
    """
    Estrategia:
      1) OpenAI (modelo primario)
      2) OpenAI (fallback, sólo si el primario rechaza la petición)
      3) Ollama local (si está habilitado y OpenAI no respondió)

    Todo el recorrido comparte un mismo deadline (`timeout`). Cualquier fallo
    final se reporta como ProviderError.
    """

    def __init__(
        self,
        client: Optional[OpenAI],
        *,
        primary_model: str,
        fallback_model: Optional[str] = None,
        prompt: str = "Summarize this note:",
        max_tokens: int = 200,
        temperature: float = 0.3,
        local_ask: Optional[Callable[..., str]] = None,
    ) -> None:
        self.client = client
        self.primary_model = primary_model
        self.fallback_model = fallback_model
        self.prompt = prompt
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.local_ask = local_ask

    def _user_prompt(self, text: str) -> str:
        return f"{self.prompt}\n\n{text}"

    def _openai(self, model: str, text: str, timeout: float) -> str:
        resp = self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": self._user_prompt(text)},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout=timeout,
        )
        try:
            out = (resp.choices[0].message.content or "").strip()
        except (AttributeError, IndexError, TypeError) as e:
            raise ProviderError(f"Malformed provider response: {e}") from e
        if not out:
            raise ProviderError("Empty summary from provider", {"model": model})
        return out

    def summarize(self, text: str, timeout: float = 10.0) -> str:
        deadline = monotonic() + timeout
        last_error: Exception | None = None

        def remaining() -> float:
            return deadline - monotonic()

        if self.client is not None:
            try:
                return self._openai(self.primary_model, text, remaining())
            except BadRequestError as e:
                last_error = e
                if self.fallback_model and self.fallback_model != self.primary_model and remaining() > 0:
                    try:
                        return self._openai(self.fallback_model, text, remaining())
                    except Exception as e2:
                        last_error = e2
            except Exception as e:
                last_error = e
            _log.warning("OpenAI summary failed: %s", last_error)

        if self.local_ask is not None and remaining() > 0:
            try:
                out = (self.local_ask(SYSTEM_PROMPT, self._user_prompt(text), temperature=self.temperature, timeout=remaining()) or "").strip()
                if out:
                    return out
                last_error = ProviderError("Empty summary from local model")
            except Exception as e:
                last_error = e
                _log.warning("Ollama summary failed: %s", e)

        if isinstance(last_error, ProviderError):
            raise last_error
        if last_error is None:
            raise ProviderError("No summarization provider available")
        raise ProviderError(f"Summarization failed: {last_error}") from last_error


def build_summarizer() -> Summarizer:
    """Construye el proveedor a partir de `settings` (composición en el arranque)."""
    return Summarizer(
        get_openai(),
        primary_model=settings.openai_model_primary,
        fallback_model=settings.openai_model_fallback,
        prompt=settings.summary_prompt,
        max_tokens=settings.summary_max_tokens,
        temperature=settings.summary_temperature,
        local_ask=ollama_ask if settings.ollama_enabled else None,
    )
