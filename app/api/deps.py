"""
Dependencias reutilizables para routers (FastAPI Depends).

- Servicio de notas: construido en el arranque y guardado en `app.state`.
- Identidad del cliente para el control de admisión (IP de la conexión, o
  X-Forwarded-For si `trust_proxy_headers` está activo).
- Mantener esta capa delgada: sin lógica de negocio pesada.
"""
from fastapi import HTTPException, Request
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from app.core.config import settings
from app.services.note_service import NoteService


def get_note_service(request: Request) -> NoteService:
    svc = getattr(request.app.state, "note_service", None)
    if svc is None:
        raise HTTPException(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Note service not ready")
    return svc


def get_client_key(request: Request) -> str:
    """IP de la conexión. Con proxy confiable: primer IP de X-Forwarded-For, luego X-Real-IP."""
    if settings.trust_proxy_headers:
        fwd = request.headers.get("x-forwarded-for")
        if fwd:
            first = fwd.split(",")[0].strip()
            if first:
                return first
        real = (request.headers.get("x-real-ip") or "").strip()
        if real:
            return real
    return request.client.host if request.client else "unknown"
