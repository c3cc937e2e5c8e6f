"""
Service layer for notes: submission pipeline (admission → validation → cache →
summary → persistence) plus thin wrappers over the repository.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

from app.core.cache import SummaryCache
from app.core.config import FALLBACK_SUMMARY
from app.core.exceptions import InvalidInputError, ProviderError, RateLimitedError
from app.core.rate_limit import AdmissionController

_log = logging.getLogger("notes.pipeline")


class SummaryProvider(Protocol):
    def summarize(self, text: str, timeout: float = 10.0) -> str: ...


class NoteGateway(Protocol):
    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]: ...
    def find_all_ordered(self, q: Optional[str] = None, tag: Optional[str] = None,
                         limit: Optional[int] = None, skip: int = 0) -> List[Dict[str, Any]]: ...
    def get_by_id(self, note_id: str) -> Dict[str, Any]: ...
    def update_by_id(self, note_id: str, fields: Dict[str, Any]) -> Dict[str, Any]: ...
    def delete_by_id(self, note_id: str) -> None: ...


def clean_tags(tags: Optional[Sequence[str]]) -> List[str]:
    """Quita espacios y descarta etiquetas vacías; conserva orden y mayúsculas."""
    out = []
    for t in tags or []:
        tt = str(t).strip()
        if tt:
            out.append(tt)
    return out


class NoteService:
    def __init__(
        self,
        repo: NoteGateway,
        summarizer: SummaryProvider,
        limiter: AdmissionController,
        cache: SummaryCache,
        *,
        max_chars: int = 10_000,
        summary_timeout: float = 10.0,
        fallback_summary: str = FALLBACK_SUMMARY,
    ) -> None:
        self.repo = repo
        self.summarizer = summarizer
        self.limiter = limiter
        self.cache = cache
        self.max_chars = max_chars
        self.summary_timeout = summary_timeout
        self.fallback_summary = fallback_summary

    def validate_content(self, content: Optional[str]) -> str:
        if content is None or not str(content).strip():
            raise InvalidInputError("Note content is required")
        if len(content) > self.max_chars:
            raise InvalidInputError(
                f"Note content exceeds {self.max_chars} characters",
                {"length": len(content), "max": self.max_chars},
            )
        return content

    def summarize(self, content: str) -> str:
        """Llamada directa al proveedor (sin caché ni fallback); propaga ProviderError."""
        return self.summarizer.summarize(content, timeout=self.summary_timeout)

    def resolve_summary(self, content: str) -> str:
        cached = self.cache.get(content)
        if cached is not None:
            _log.debug("summary cache hit (len=%s)", len(content))
            return cached
        try:
            summary = self.summarize(content)
        except ProviderError as e:
            _log.warning("Summary provider failed, using fallback: %s", e.message)
            return self.fallback_summary
        except Exception as e:
            _log.warning("Summary provider raised %s, using fallback: %s", type(e).__name__, e)
            return self.fallback_summary
        self.cache.set(content, summary)
        return summary

    def submit(self, client_key: str, content: Optional[str], tags: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        if not self.limiter.try_consume(client_key):
            _log.info("Rate limited client=%s", client_key)
            raise RateLimitedError(
                "Too many requests, please try again later.",
                {"retry_after": self.limiter.retry_after(client_key)},
            )
        content = self.validate_content(content)
        summary = self.resolve_summary(content)
        return self.repo.create({"content": content, "summary": summary, "tags": clean_tags(tags)})

    def list_notes(self, q: Optional[str] = None, tag: Optional[str] = None,
                   limit: Optional[int] = None, skip: int = 0) -> List[Dict[str, Any]]:
        return self.repo.find_all_ordered(q=q, tag=tag, limit=limit, skip=skip)

    def get_note(self, note_id: str) -> Dict[str, Any]:
        return self.repo.get_by_id(note_id)

    def update_note(self, note_id: str, content: Optional[str] = None,
                    tags: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        # Sin regenerar resumen: sólo se reemplazan content/tags
        fields: Dict[str, Any] = {}
        if content is not None:
            fields["content"] = self.validate_content(content)
        if tags is not None:
            fields["tags"] = clean_tags(tags)
        return self.repo.update_by_id(note_id, fields)

    def delete_note(self, note_id: str) -> None:
        self.repo.delete_by_id(note_id)
