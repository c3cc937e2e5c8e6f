"""
Domain errors and global exception handlers for consistent API errors.
"""
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import compile_path

_HTTP_METHODS = {"get", "post", "put", "patch", "delete", "head", "options", "trace"}


class NotesError(Exception):
    """Base de todos los errores del dominio de notas."""

    status_code: int = 500

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class InvalidInputError(NotesError):
    """Contenido vacío, demasiado largo o con forma inválida."""

    status_code = 400


class RateLimitedError(NotesError):
    """El cliente agotó su presupuesto de envíos en la ventana actual."""

    status_code = 429


class ProviderError(NotesError):
    """El proveedor de resúmenes falló (timeout, error de API, respuesta vacía)."""

    status_code = 500


class PersistenceError(NotesError):
    status_code = 500


class NotFoundError(NotesError):
    status_code = 404


class ConfigurationError(NotesError):
    """Configuración inválida o credenciales faltantes (fatal en el arranque)."""


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _path_table(app: FastAPI) -> list[tuple[Any, set[str]]]:
    """(regex, métodos) por cada path publicado en el esquema OpenAPI de la app.

    Se arma desde `app.openapi()` para no depender de cómo FastAPI anida los
    routers incluidos.
    """
    table = getattr(app.state, "allow_table", None)
    if table is None:
        table = []
        for path, item in (app.openapi().get("paths") or {}).items():
            regex, _, _ = compile_path(path)
            methods = {m.upper() for m in item if m.lower() in _HTTP_METHODS}
            table.append((regex, methods))
        app.state.allow_table = table
    return table


def _allowed_methods(request: Request) -> list[str]:
    """Métodos declarados por todas las rutas que coinciden con el path pedido."""
    path = request.url.path
    root = request.scope.get("root_path") or ""
    if root and path.startswith(root):
        path = path[len(root):] or "/"
    methods: set[str] = set()
    for regex, allowed in _path_table(request.app):
        if regex.match(path):
            methods.update(allowed)
    return sorted(methods)


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("notes.errors")

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        body: Dict[str, Any] = {"message": exc.detail or "HTTP error"}
        rid = _req_id(request)
        if rid:
            body["request_id"] = rid
        headers = dict(getattr(exc, "headers", None) or {})
        if exc.status_code == 405:
            allowed = _allowed_methods(request)
            if allowed:
                headers["Allow"] = ", ".join(allowed)
            body["message"] = f"Method {request.method} Not Allowed"
        return JSONResponse(status_code=exc.status_code, content=body, headers=headers or None)

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        body: Dict[str, Any] = {"message": "Validation error", "errors": exc.errors()}
        rid = _req_id(request)
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=422, content=jsonable_encoder(body))

    @app.exception_handler(NotesError)
    async def _notes_error_handler(request: Request, exc: NotesError):
        rid = _req_id(request)
        if exc.status_code >= 500:
            log.error("%s request_id=%s: %s", type(exc).__name__, rid, exc.message)
        body: Dict[str, Any] = {"message": exc.message}
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        rid = _req_id(request)
        log.exception("Unhandled error request_id=%s", rid)
        body: Dict[str, Any] = {"message": "Internal server error"}
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=500, content=body)
