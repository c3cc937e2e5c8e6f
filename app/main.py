"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers).

Ejecutar con: uvicorn app.main:app --reload
"""
from fastapi import FastAPI
from app.core.config import settings
from app.core.cache import SummaryCache
from app.core.exceptions import ConfigurationError, register_exception_handlers
from app.core.logging import setup_logging
from app.core.middleware import add_middlewares
from app.core.rate_limit import AdmissionController
from app.infrastructure.ai.summarizer import build_summarizer
from app.infrastructure.db.mongo import init_mongo, get_db, db_ready, close_mongo
from app.infrastructure.db.bootstrap import ensure_collections
from app.api.router import api_router
from app.repositories.note_repo import NoteRepository
from app.services.note_service import NoteService
import logging
import threading

_log = logging.getLogger("notes.startup")
_connect_lock = threading.Lock()

setup_logging(settings.log_level)
app = FastAPI(title=settings.app_name)

add_middlewares(app)
register_exception_handlers(app)


def _bootstrap_collections() -> None:
    # Garantiza colección/índices/validador mínimos
    try:
        ensure_collections(get_db())
    except Exception as e:
        # No impedir el arranque si fallan validadores/índices
        _log.warning("ensure_collections() falló: %s", e)


def _connected_db():
    """DB lista para el repositorio; reintenta la conexión si Mongo no estaba disponible."""
    if not db_ready():
        with _connect_lock:
            if not db_ready():
                init_mongo()
                if db_ready():
                    _log.info("Mongo conectado tras reintento")
                    _bootstrap_collections()
    return get_db()


def build_note_service() -> NoteService:
    """Raíz de composición: limitador y caché nuevos por proceso."""
    return NoteService(
        NoteRepository(collection=settings.mongo_collection, db_provider=_connected_db),
        build_summarizer(),
        AdmissionController(settings.notes_rate_limit, settings.notes_rate_window_seconds),
        SummaryCache(settings.summary_cache_ttl_seconds),
        max_chars=settings.note_max_chars,
        summary_timeout=settings.summary_timeout_seconds,
        fallback_summary=settings.summary_fallback_text,
    )


# Startup
@app.on_event("startup")
def on_startup():
    if not settings.provider_configured:
        raise ConfigurationError("OPENAI_API_KEY is not set (and Ollama fallback is disabled)")
    init_mongo()
    if db_ready():
        _bootstrap_collections()
    else:
        _log.warning("Mongo no listo; se reintentará en la próxima operación")
    app.state.note_service = build_note_service()
    _log.info("Servicio de notas listo")


@app.on_event("shutdown")
def on_shutdown():
    app.state.note_service = None
    close_mongo()


# Monta routers bajo el prefijo configurado
app.include_router(api_router, prefix=settings.api_prefix_normalized)
