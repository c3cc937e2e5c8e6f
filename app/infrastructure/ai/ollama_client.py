"""Cliente HTTP mínimo para Ollama (fallback local de resúmenes)."""
import requests
from app.core.config import settings


def ollama_ask(system: str, user: str, *, temperature: float = 0.2, timeout: float | None = None) -> str:
    """
    Llama a /api/chat con un par system+user (sin streaming).
    Retorna el texto de la respuesta; lanza ValueError si la respuesta no trae mensaje.
    """
    r = requests.post(
        f"{settings.ollama_url.rstrip('/')}/api/chat",
        json={
            "model": settings.ollama_model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "stream": False,
            "options": {"temperature": temperature},
        },
        timeout=timeout or settings.summary_timeout_seconds,
    )
    r.raise_for_status()
    message = (r.json() or {}).get("message")
    if not isinstance(message, dict):
        raise ValueError("Ollama response without message")
    return (message.get("content") or "").strip()
