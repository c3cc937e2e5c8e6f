"""Agregador de routers de la API."""
from fastapi import APIRouter
from app.api.routers import health, note, summarize

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(note.router)
api_router.include_router(summarize.router)
