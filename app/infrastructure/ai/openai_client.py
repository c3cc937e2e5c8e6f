# app/infrastructure/ai/openai_client.py
from typing import Optional
from openai import OpenAI
from app.core.config import settings

_client: Optional[OpenAI] = None

def get_openai() -> Optional[OpenAI]:
    """
    Devuelve un cliente de OpenAI si hay API key en settings.
    Mantiene una instancia única en memoria; sin reintentos internos para
    respetar el timeout del resumen.
    """
    global _client
    if _client is not None:
        return _client

    if not settings.openai_api_key:
        return None

    _client = OpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.summary_timeout_seconds,
        max_retries=0,
    )
    return _client
