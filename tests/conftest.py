import json
import os
import httpx
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("LLM_ENABLED", "false")
os.environ.setdefault("CREATE_TABLES", "false")

from table_feedback.main import app
from table_feedback.db.base import Base
from table_feedback.db import models  # noqa: F401
from table_feedback.db.postgres import get_db
from table_feedback.feedback.insights import InsightGenerator, get_insight_generator

# In-memory database shared by every connection of one test
TEST_DATABASE_URL = "sqlite+aiosqlite://"

LLM_URL = "http://llm.test/api/generate"

POSITIVE_ANALYSIS = {
    "sentiment": "positive",
    "summary": "Guest loved the food but waited too long.",
    "actionableInsights": ["Add a second server during dinner rush"],
}


@pytest.fixture(scope="function")
async def db_session():
    """Create a fresh database for each test."""
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


def llm_transport(reply: dict, status_code: int = 200) -> httpx.MockTransport:
    """Mock LLM endpoint answering every request with ``reply``."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=reply)
    return httpx.MockTransport(handler)


def unreachable_transport() -> httpx.MockTransport:
    """Mock LLM endpoint that refuses every connection."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)
    return httpx.MockTransport(handler)


@pytest.fixture
def insight_generator():
    """Insight generator backed by a mock LLM that wraps its JSON in a code fence."""
    reply = {"response": "```json\n" + json.dumps(POSITIVE_ANALYSIS) + "\n```"}
    return InsightGenerator(url=LLM_URL, model="test-model", transport=llm_transport(reply))


@pytest.fixture(scope="function")
async def client(db_session, insight_generator):
    """Create a test client with overridden dependencies."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_insight_generator] = lambda: insight_generator

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def valid_feedback():
    return {
        "tableId": "1",
        "ratings": [
            {"service": "taste", "rating": 3},
            {"service": "service", "rating": 1},
        ],
        "feedbackText": "Great food, slow service",
    }
