"""Feedback repository for database operations"""
from datetime import datetime
from typing import List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from table_feedback.db.models import FeedbackRecord, FeedbackRating


class FeedbackRepository:
    """Repository for feedback database operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, feedback: FeedbackRecord) -> FeedbackRecord:
        """Insert a feedback record together with its ratings"""
        try:
            self.db.add(feedback)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return feedback

    async def count_all(self) -> int:
        """Total number of feedback records"""
        result = await self.db.execute(select(func.count()).select_from(FeedbackRecord))
        return int(result.scalar() or 0)

    async def count_since(self, since: datetime) -> int:
        """Number of feedback records created at or after ``since``"""
        stmt = select(func.count()).select_from(FeedbackRecord).where(FeedbackRecord.created_at >= since)
        result = await self.db.execute(stmt)
        return int(result.scalar() or 0)

    async def get_category_totals(self) -> List[Tuple[str, int, int]]:
        """
        Rating count and rating sum per category across all records.

        Returns:
            List of (category, rating_count, rating_sum)
        """
        stmt = select(
            FeedbackRating.service,
            func.count(FeedbackRating.id).label('rating_count'),
            func.sum(FeedbackRating.rating).label('rating_sum'),
        ).group_by(FeedbackRating.service)

        result = await self.db.execute(stmt)
        return [(row.service, int(row.rating_count), int(row.rating_sum or 0)) for row in result.all()]

    async def get_table_histogram(self) -> List[Tuple[str, str, int, int]]:
        """
        Rating counts grouped by table, category and rating value.

        Returns:
            List of (table_id, category, rating, count)
        """
        stmt = select(
            FeedbackRecord.table_id,
            FeedbackRating.service,
            FeedbackRating.rating,
            func.count(FeedbackRating.id).label('occurrences'),
        ).join(
            FeedbackRating, FeedbackRating.feedback_id == FeedbackRecord.id
        ).group_by(
            FeedbackRecord.table_id, FeedbackRating.service, FeedbackRating.rating
        )

        result = await self.db.execute(stmt)
        return [(row.table_id, row.service, int(row.rating), int(row.occurrences)) for row in result.all()]

    async def list_since(self, since: datetime, limit: int) -> List[FeedbackRecord]:
        """Newest feedback records created at or after ``since``"""
        stmt = select(FeedbackRecord).where(
            FeedbackRecord.created_at >= since
        ).order_by(FeedbackRecord.created_at.desc()).limit(limit)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_table_ratings(self, table_ids: List[str]) -> List[Tuple[str, str, int]]:
        """
        Every rating value for the given tables, tagged with its record.

        Returns:
            List of (table_id, feedback_id, rating)
        """
        if not table_ids:
            return []
        stmt = select(
            FeedbackRecord.table_id,
            FeedbackRecord.id,
            FeedbackRating.rating,
        ).join(
            FeedbackRating, FeedbackRating.feedback_id == FeedbackRecord.id
        ).where(FeedbackRecord.table_id.in_(table_ids))

        result = await self.db.execute(stmt)
        return [(row.table_id, str(row.id), int(row.rating)) for row in result.all()]
