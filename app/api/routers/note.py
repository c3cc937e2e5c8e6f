"""
Endpoints para `notes`: listar, crear (pipeline con resumen), leer, editar, borrar.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.deps import get_client_key, get_note_service
from app.api.schemas.note import NoteCreate, NoteOut, NoteUpdate
from app.core.exceptions import InvalidInputError, PersistenceError, RateLimitedError
from app.services.note_service import NoteService


router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get(
    "",
    response_model=List[NoteOut],
    summary="Listar notas",
    description="Lista notas (más recientes primero) con búsqueda y paginación opcionales.",
)
def list_notes(
    q: Optional[str] = Query(default=None, description="Texto a buscar en contenido o resumen"),
    tag: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    skip: int = Query(default=0, ge=0),
    svc: NoteService = Depends(get_note_service),
):
    # PersistenceError -> 500 vía handler global
    return svc.list_notes(q=q, tag=tag, limit=limit, skip=skip)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=NoteOut,
    summary="Crear nota",
    description="Valida, resume (con caché y fallback) y persiste una nota.",
)
def create_note(
    payload: NoteCreate,
    client_key: str = Depends(get_client_key),
    svc: NoteService = Depends(get_note_service),
):
    try:
        return svc.submit(client_key, payload.content, payload.tags)
    except RateLimitedError as e:
        retry = e.context.get("retry_after")
        headers = {"Retry-After": str(retry)} if retry else None
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=e.message, headers=headers)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get("/{note_id}", response_model=NoteOut, summary="Obtener nota")
def get_note(note_id: str, svc: NoteService = Depends(get_note_service)):
    return svc.get_note(note_id)


@router.put(
    "/{note_id}",
    response_model=NoteOut,
    summary="Editar nota",
    description="Reemplaza contenido y/o etiquetas. No regenera el resumen.",
)
def update_note(note_id: str, payload: NoteUpdate, svc: NoteService = Depends(get_note_service)):
    try:
        return svc.update_note(note_id, content=payload.content, tags=payload.tags)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except PersistenceError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Failed to update note")


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Borrar nota",
)
def delete_note(note_id: str, svc: NoteService = Depends(get_note_service)):
    try:
        svc.delete_note(note_id)
    except PersistenceError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Failed to delete note")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
