"""Fixtures compartidas: reloj falso, proveedor falso, Mongo en memoria y cliente HTTP."""
import pytest
from fastapi.testclient import TestClient
from mongomock import MongoClient

from app.core.cache import SummaryCache
from app.core.exceptions import ProviderError
from app.core.rate_limit import AdmissionController
from app.main import app
from app.repositories.note_repo import NoteRepository
from app.services.note_service import NoteService


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSummarizer:
    """Registra llamadas; falla con ProviderError si `fail` es True."""

    def __init__(self, prefix: str = "summary of: ") -> None:
        self.prefix = prefix
        self.fail = False
        self.calls: list[tuple[str, float]] = []

    def summarize(self, text: str, timeout: float = 10.0) -> str:
        self.calls.append((text, timeout))
        if self.fail:
            raise ProviderError("simulated timeout")
        return f"{self.prefix}{text[:20]}"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def mock_db():
    """Create a mock MongoDB database for testing."""
    client = MongoClient()
    return client["notes_test"]


@pytest.fixture
def repository(mock_db) -> NoteRepository:
    return NoteRepository(mock_db)


@pytest.fixture
def service(repository, summarizer, clock) -> NoteService:
    return NoteService(
        repository,
        summarizer,
        AdmissionController(limit=50, window_seconds=60, clock=clock),
        SummaryCache(ttl_seconds=3600, clock=clock),
    )


@pytest.fixture
def client(service):
    app.state.note_service = service
    try:
        yield TestClient(app)
    finally:
        app.state.note_service = None
