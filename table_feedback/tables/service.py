"""Table roster service"""
import logging
from collections import defaultdict
from typing import Dict, List
from urllib.parse import quote
from sqlalchemy.exc import SQLAlchemyError
from table_feedback.config import AppConfig, TableInfo
from table_feedback.feedback.analytics import compute_record_average, compute_table_summary
from table_feedback.feedback.repository import FeedbackRepository
from table_feedback.tables.exceptions import TableDataUnavailableException
from table_feedback.tables.schemas import TableSummary

logger = logging.getLogger(__name__)


def build_feedback_url(base_url: str, table: TableInfo) -> str:
    """URL of the table's feedback form: <base>/table/<id>"""
    return f"{base_url.rstrip('/')}/table/{quote(table.id, safe='')}"


class TableService:
    """Joins the static table roster with live feedback totals"""

    def __init__(self, repository: FeedbackRepository, config: AppConfig):
        self.repository = repository
        self.config = config

    async def list_tables(self) -> List[TableSummary]:
        """Every roster table with its feedback count and average rating"""
        try:
            rows = await self.repository.get_table_ratings(list(self.config.table_ids))
        except SQLAlchemyError as e:
            logger.error(f"Error fetching tables: {e}")
            raise TableDataUnavailableException()

        # table_id -> feedback_id -> ratings
        ratings_by_table: Dict[str, Dict[str, List[int]]] = defaultdict(lambda: defaultdict(list))
        for table_id, feedback_id, rating in rows:
            ratings_by_table[table_id][feedback_id].append(rating)

        summaries = []
        for table in self.config.tables:
            records = ratings_by_table.get(table.id, {})
            summary = compute_table_summary([compute_record_average(r) for r in records.values()])
            summaries.append(
                TableSummary(
                    id=table.id,
                    location=table.location,
                    capacity=table.capacity,
                    feedback_url=build_feedback_url(self.config.feedback_form_url, table),
                    **summary,
                )
            )
        return summaries
