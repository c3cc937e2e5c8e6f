"""Schemas para endpoints de health/debug."""
from pydantic import BaseModel


class PingOut(BaseModel):
    message: str


class HealthOut(BaseModel):
    ok: bool
    db_ready: bool


class DebugStatusOut(BaseModel):
    app_name: str
    api_prefix: str
    openai_configured: bool
    ollama_enabled: bool
    mongo_uri_set: bool
    db_ready: bool
    summary_cache_entries: int
