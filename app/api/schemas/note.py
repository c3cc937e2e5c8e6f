"""
Esquemas Pydantic para `notes` (entrada/salida de la API).
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class NoteCreate(BaseModel):
    # content se valida en el servicio (400 en lugar de 422)
    content: Optional[str] = None
    # null u omitido -> []
    tags: Optional[List[str]] = None


class NoteUpdate(BaseModel):
    content: Optional[str] = None
    tags: Optional[List[str]] = None


class NoteOut(BaseModel):
    id: str
    content: str
    summary: str = ""
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None
