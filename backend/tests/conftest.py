"""Shared fixtures: SQLite database, fake upstream clients and an API client."""

import os

# Must be set before llmscore.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["LOG_JSON"] = "false"

import httpx
import jwt
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from llmscore import models  # noqa: F401
from llmscore.config import get_settings
from llmscore.database import Base
from llmscore.services.firecrawl_service import MapServiceError


class FakeCrawler:
    """Stands in for FirecrawlService."""

    def __init__(
        self,
        links: list[dict] | None = None,
        search_results: dict[str, list[dict] | None] | None = None,
        markdown: str = "# Example\n\nWe build example widgets.",
        map_error: bool = False,
        scrape_error: bool = False,
        search_errors: set[str] | None = None,
    ):
        self.links = links if links is not None else []
        self.search_results = search_results or {}
        self.markdown = markdown
        self.map_error = map_error
        self.scrape_error = scrape_error
        self.search_errors = search_errors or set()
        self.map_calls: list[str] = []
        self.search_calls: list[str] = []

    async def map_website(self, url: str) -> list[dict]:
        self.map_calls.append(url)
        if self.map_error:
            raise MapServiceError("map failed")
        return self.links

    async def scrape_markdown(self, url: str) -> str:
        if self.scrape_error:
            raise RuntimeError("scrape failed")
        return self.markdown

    async def search(self, query: str, limit: int | None = None) -> list[dict] | None:
        self.search_calls.append(query)
        if query in self.search_errors:
            raise RuntimeError("search failed")
        return self.search_results.get(query, [])


class FakeLLM:
    """Stands in for LLMClient. Keyword prompts get `keywords`, others `narrative`."""

    def __init__(self, keywords: str = "", narrative: str = "Looks fine.", fail: bool = False):
        self.keywords = keywords
        self.narrative = narrative
        self.fail = fail
        self.prompts: list[str] = []

    async def complete(self, prompt: str, temperature: float = 0.7, max_tokens: int = 300) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise RuntimeError("llm unavailable")
        if "search keywords" in prompt:
            return self.keywords
        return self.narrative


class FakeProber:
    """Stands in for AIFileProber."""

    def __init__(self, checks=None):
        self.checks = checks or []
        self.origins: list[str] = []

    async def probe(self, origin: str, paths=None):
        self.origins.append(origin)
        return self.checks


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    # pysqlite defers BEGIN, which breaks SAVEPOINT; take over transaction start
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def crawler():
    return FakeCrawler()


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def prober():
    return FakeProber()


@pytest.fixture
async def client(session_maker, crawler, llm, prober):
    from llmscore.api.deps import get_ai_file_prober, get_firecrawl_service, get_llm_client
    from llmscore.database import get_db
    from llmscore.main import app

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_firecrawl_service] = lambda: crawler
    app.dependency_overrides[get_llm_client] = lambda: llm
    app.dependency_overrides[get_ai_file_prober] = lambda: prober

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client

    app.dependency_overrides.clear()


def make_token(user_id: str = "user-1", secret: str | None = None) -> str:
    return jwt.encode({"sub": user_id}, secret or get_settings().secret_key, algorithm="HS256")


def auth_headers(user_id: str = "user-1") -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}
