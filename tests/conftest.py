"""Pytest configuration and fixtures for testing."""

from collections.abc import AsyncIterator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.app.config import Settings
from backend.app.db.base import Base, get_engine, get_session_factory


class FakeLLM:
    """Scripted stand-in for ``LLMClient``.

    Responses are keyed by tool name (``tool_args``), schema class name
    (``json_responses``) or are plain text. Anything not scripted raises, which
    exercises the callers' best-effort paths. Every call is recorded in
    ``calls``.
    """

    def __init__(self) -> None:
        self.tool_args: dict[str, dict[str, Any] | None] = {}
        self.json_responses: dict[str, Any] = {}
        self.text: str | None = None
        self.chunks: list[str] | None = None
        self.final_text: str | None = None
        self.tool_script: list[tuple[str, dict[str, Any]]] = []
        self.tool_results: list[str] = []
        self.calls: list[tuple[str, Any]] = []

    async def call_tool(self, messages, function, *, temperature=0.0, max_tokens=None):
        self.calls.append(("call_tool", {"messages": messages, "function": function["name"]}))
        if function["name"] not in self.tool_args:
            raise RuntimeError("language model unavailable")
        return self.tool_args[function["name"]]

    async def generate_json(self, system, prompt, schema, *, temperature=0.2, max_tokens=None):
        self.calls.append(("generate_json", {"schema": schema.__name__, "prompt": prompt}))
        response = self.json_responses.get(schema.__name__)
        if response is None:
            raise RuntimeError("language model unavailable")
        if isinstance(response, BaseModel):
            return response
        return schema.model_validate(response)

    async def generate_text(self, prompt, *, system=None, temperature=0.2, max_tokens=None):
        self.calls.append(("generate_text", prompt))
        if self.text is None:
            raise RuntimeError("language model unavailable")
        return self.text

    async def stream_text(self, prompt, *, temperature=0.2) -> AsyncIterator[str]:
        self.calls.append(("stream_text", prompt))
        if self.chunks is None:
            raise RuntimeError("language model unavailable")
        for chunk in self.chunks:
            yield chunk

    async def run_tools(self, messages, functions, handlers, **kwargs):
        self.calls.append(("run_tools", messages))
        if self.final_text is None:
            raise RuntimeError("language model unavailable")
        for name, args in self.tool_script:
            self.tool_results.append(await handlers[name](args))
        return self.final_text

    def called(self, kind: str) -> list[Any]:
        return [payload for call, payload in self.calls if call == kind]


@pytest.fixture(scope="function")
def test_db_engine():
    """Create a test database engine with in-memory SQLite."""
    engine = get_engine(Settings(database_url="sqlite:///:memory:"))

    # Create all tables
    Base.metadata.create_all(engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_db_engine):
    """Create a test database session."""
    SessionFactory = get_session_factory(test_db_engine)
    session = SessionFactory()

    yield session

    session.close()


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def client(test_session: Session, fake_llm: FakeLLM):
    """Create a test client with database session and LLM overrides."""
    from backend.app.db.session import get_db_session
    from backend.app.llm import get_llm
    from backend.app.main import app

    def override_get_session():
        try:
            yield test_session
        finally:
            pass  # Don't close the session, it's managed by the test

    app.dependency_overrides[get_db_session] = override_get_session
    app.dependency_overrides[get_llm] = lambda: fake_llm
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
