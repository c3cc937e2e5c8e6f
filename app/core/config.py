"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del proyecto.
- Agrupa ajustes por área: App, CORS, Mongo, OpenAI/Ollama, Pipeline de notas.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field
from pathlib import Path

# Resuelve el .env ubicado en la raíz del proyecto (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"

FALLBACK_SUMMARY = "Summary unavailable due to API error"


class Settings(BaseSettings):
    """Conjunto de variables de configuración con valores por defecto razonables.

    Nota: los valores pueden sobreescribirse vía variables de entorno (.env).
    """
    # App
    app_name: str = "Notes Summarizer API"
    api_prefix: str = ""
    log_level: str = "INFO"

    # CORS (front en localhost)
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    cors_allow_any: bool = False  # Permite todos los orígenes (usa con cuidado)

    # Mongo
    mongo_uri: str = Field(
        "mongodb://localhost:27017",
        validation_alias=AliasChoices("MONGO_URI", "MONGODB_URI"),
    )
    mongo_db: str = "notes_db"
    mongo_collection: str = "notes"
    mongo_server_selection_timeout_ms: int = 15000
    mongo_socket_timeout_ms: int = 10000
    mongo_tls: bool = False
    # TLS relax options (dev only)
    mongo_tls_insecure: bool = False
    mongo_tls_allow_invalid_hostnames: bool = False

    # OpenAI
    openai_api_key: str | None = None
    openai_model_primary: str = "gpt-4o-mini"
    openai_model_fallback: str = "gpt-3.5-turbo"

    # Ollama (fallback local opcional)
    ollama_enabled: bool = False
    ollama_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1:8b"

    # Resumen
    summary_prompt: str = "Summarize the following content in 4-5 sentences, providing key details and main ideas:"
    summary_max_tokens: int = 200
    summary_temperature: float = 0.3
    summary_timeout_seconds: float = Field(
        10.0,
        validation_alias=AliasChoices("NOTES_SUMMARY_TIMEOUT", "SUMMARY_TIMEOUT_SECONDS"),
    )
    summary_cache_ttl_seconds: int = 3600
    summary_fallback_text: str = FALLBACK_SUMMARY

    # Admisión / validación de notas
    notes_rate_limit: int = Field(
        50,
        validation_alias=AliasChoices("NOTES_RATE_LIMIT", "NOTES_RATE_POINTS"),
    )
    notes_rate_window_seconds: int = 60
    note_max_chars: int = 10_000
    # Sólo detrás de un proxy confiable: usar X-Forwarded-For / X-Real-IP como identidad
    trust_proxy_headers: bool = False

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",  # no fallar si hay variables no usadas
    )

    # --- Utilidades derivadas / helpers ---
    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin '/' final (excepto cuando es solo '/')
        - Si está vacío (o es '/'), devuelve ""
        """
        pref = (self.api_prefix or "").strip()
        if not pref or pref == "/":
            return ""
        if not pref.startswith('/'):
            pref = '/' + pref
        if pref.endswith('/'):
            pref = pref.rstrip('/')
        return pref

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def provider_configured(self) -> bool:
        """Hay al menos un proveedor de resúmenes utilizable."""
        return self.openai_configured or bool(self.ollama_enabled and self.ollama_url and self.ollama_model)


settings = Settings()
