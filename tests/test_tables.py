import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from table_feedback.config import TableInfo
from table_feedback.feedback.repository import FeedbackRepository
from table_feedback.tables.service import build_feedback_url


@pytest.mark.asyncio
async def test_list_tables_without_feedback(client: AsyncClient):
    """Test the static roster is returned with zeroed totals."""
    response = await client.get("/tables")

    assert response.status_code == 200
    tables = response.json()
    assert [t["id"] for t in tables] == ["1", "2", "3", "4", "5", "6"]
    first = tables[0]
    assert first["location"] == "Window Side"
    assert first["capacity"] == 4
    assert first["feedbackCount"] == 0
    assert first["averageRating"] == 0.0
    assert first["feedbackUrl"].endswith("/table/1")


@pytest.mark.asyncio
async def test_list_tables_with_feedback(client: AsyncClient, valid_feedback):
    """Test per-table count and the mean of per-feedback averages."""
    await client.post("/feedback", json=valid_feedback)  # average 2.0
    await client.post(
        "/feedback",
        json=dict(valid_feedback, ratings=[{"service": "value", "rating": 3}]),
    )  # average 3.0
    await client.post("/feedback", json=dict(valid_feedback, tableId="2"))

    tables = {t["id"]: t for t in (await client.get("/tables")).json()}

    assert tables["1"]["feedbackCount"] == 2
    assert tables["1"]["averageRating"] == 2.5
    assert tables["2"]["feedbackCount"] == 1
    assert tables["2"]["averageRating"] == 2.0
    assert tables["3"]["feedbackCount"] == 0


@pytest.mark.asyncio
async def test_list_tables_ignores_unknown_table_ids(client: AsyncClient, valid_feedback):
    await client.post("/feedback", json=dict(valid_feedback, tableId="99"))

    tables = (await client.get("/tables")).json()
    assert "99" not in [t["id"] for t in tables]
    assert sum(t["feedbackCount"] for t in tables) == 0


def test_build_feedback_url():
    table = TableInfo(id="3", location="Corner", capacity=6)
    assert build_feedback_url("https://cafe.example/feedback", table) == "https://cafe.example/feedback/table/3"
    assert build_feedback_url("https://cafe.example/feedback/", table) == "https://cafe.example/feedback/table/3"


def test_build_feedback_url_quotes_table_id():
    table = TableInfo(id="Patio A/2", location="Patio", capacity=4)
    assert build_feedback_url("https://cafe.example/feedback", table) == "https://cafe.example/feedback/table/Patio%20A%2F2"


@pytest.mark.asyncio
async def test_list_tables_store_failure(client: AsyncClient, monkeypatch):
    """Test a store failure returns 500 with a generic error."""
    async def failing_get_table_ratings(self, table_ids):
        raise OperationalError("SELECT feedback", {}, Exception("database is down"))

    monkeypatch.setattr(FeedbackRepository, "get_table_ratings", failing_get_table_ratings)

    response = await client.get("/tables")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch table data"}
