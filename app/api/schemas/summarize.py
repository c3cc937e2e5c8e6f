"""Schemas para el endpoint de resumen directo."""
from typing import Optional
from pydantic import BaseModel


class SummarizeIn(BaseModel):
    content: Optional[str] = None


class SummarizeOut(BaseModel):
    summary: str
