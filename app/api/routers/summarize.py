"""Resumen directo de un texto (sin persistir ni cachear)."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_note_service
from app.api.schemas.summarize import SummarizeIn, SummarizeOut
from app.core.exceptions import ProviderError
from app.services.note_service import NoteService


router = APIRouter(tags=["Summarize"])
_log = logging.getLogger("notes.ai")


@router.post("/summarize", response_model=SummarizeOut, summary="Resumir texto")
def summarize(payload: SummarizeIn, svc: NoteService = Depends(get_note_service)) -> SummarizeOut:
    if not payload.content or not payload.content.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No content provided")
    try:
        return SummarizeOut(summary=svc.summarize(payload.content))
    except ProviderError as e:
        _log.error("Summarize failed: %s", e.message)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to generate summary")
