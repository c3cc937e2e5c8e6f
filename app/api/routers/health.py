"""Health y debug (sin auth), salidas tipadas y estables."""
from fastapi import APIRouter, Request, status

from app.core.config import settings
from app.infrastructure.db.mongo import db_ready
from app.api.schemas.health import PingOut, HealthOut, DebugStatusOut


router = APIRouter(tags=["Health"])  # no prefix to keep paths stable


@router.get("/ping", response_model=PingOut, summary="Ping básico")
def ping() -> PingOut:
    return PingOut(message="pong")


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthOut, summary="Salud básica")
def health() -> HealthOut:
    return HealthOut(ok=True, db_ready=db_ready())


@router.get("/_debug/status", status_code=status.HTTP_200_OK, response_model=DebugStatusOut, summary="Estado de configuración")
def debug_status(request: Request) -> DebugStatusOut:
    # Nunca expone valores de credenciales, sólo si están presentes
    svc = getattr(request.app.state, "note_service", None)
    return DebugStatusOut(
        app_name=settings.app_name,
        api_prefix=settings.api_prefix_normalized,
        openai_configured=settings.openai_configured,
        ollama_enabled=settings.ollama_enabled,
        mongo_uri_set=bool(settings.mongo_uri),
        db_ready=db_ready(),
        summary_cache_entries=len(svc.cache) if svc is not None else 0,
    )
