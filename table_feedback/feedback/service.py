"""Feedback service layer for business logic"""
import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from table_feedback.config import AppConfig
from table_feedback.db.models import FeedbackRecord, FeedbackRating
from table_feedback.feedback.analytics import compute_category_stats, compute_overall_average
from table_feedback.feedback.exceptions import AnalyticsUnavailableException, PersistenceFailureException
from table_feedback.feedback.insights import InsightGenerator
from table_feedback.feedback.repository import FeedbackRepository
from table_feedback.feedback.schemas import (
    AnalyticsSnapshot,
    FeedbackAnalysis,
    RatingItem,
    RecentFeedback,
    SubmitFeedbackRequest,
)
from table_feedback.feedback.validators import FeedbackValidator
from table_feedback.utils.timezone import convert_to_local

logger = logging.getLogger(__name__)

RESPONSES_TODAY_WINDOW = timedelta(hours=24)


def to_recent_feedback(record: FeedbackRecord, tz_name: str) -> RecentFeedback:
    """Convert FeedbackRecord model to response schema"""
    return RecentFeedback(
        id=record.id,
        table_id=record.table_id,
        ratings=[RatingItem(service=r.service, rating=r.rating) for r in record.ratings],
        feedback_text=record.feedback_text,
        created_at=convert_to_local(record.created_at, tz_name),
    )


class FeedbackService:
    """Service layer for feedback business logic"""

    def __init__(self, db: AsyncSession, config: AppConfig, insight_generator: InsightGenerator):
        self.db = db
        self.config = config
        self.repository = FeedbackRepository(db)
        self.validator = FeedbackValidator(config.categories)
        self.insight_generator = insight_generator

    async def submit_feedback(
        self,
        request: SubmitFeedbackRequest,
    ) -> Tuple[FeedbackRecord, FeedbackAnalysis]:
        """
        Store a table's feedback and analyze its comment.

        Business rules:
        - Every rating must use a configured category and a value of 1-3
        - The record is written once and never changed afterwards
        - Analysis failures fall back to a neutral result and never fail the submission
        """
        logger.info(f"Received feedback for table {request.table_id!r} with {len(request.ratings)} ratings")
        self.validator.validate(request)

        feedback = FeedbackRecord(
            table_id=request.table_id,
            feedback_text=request.feedback_text,
            created_at=datetime.utcnow(),
            ratings=[
                FeedbackRating(position=position, service=item.service, rating=item.rating)
                for position, item in enumerate(request.ratings)
            ],
        )

        try:
            await self.repository.create(feedback)
        except SQLAlchemyError as e:
            logger.error(f"Error saving feedback for table {request.table_id!r}: {e}")
            raise PersistenceFailureException()
        logger.info(f"Feedback saved successfully, ID: {feedback.id}")

        analysis = await self.insight_generator.analyze(request.feedback_text, request.ratings)
        return feedback, analysis

    async def get_analytics(self, now: Optional[datetime] = None) -> AnalyticsSnapshot:
        """
        Compute the analytics snapshot over all feedback records.

        "Responses today" counts records from the last 24 hours (rolling window).
        """
        now = now or datetime.utcnow()
        since = now - RESPONSES_TODAY_WINDOW
        categories = self.config.categories

        try:
            total_feedbacks = await self.repository.count_all()
            responses_today = await self.repository.count_since(since)
            category_rows = await self.repository.get_category_totals()
            histogram_rows = await self.repository.get_table_histogram()
            recent = await self.repository.list_since(since, self.config.recent_feedback_limit)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching analytics: {e}")
            raise AnalyticsUnavailableException()

        category_stats, table_breakdown = compute_category_stats(category_rows, histogram_rows, categories)

        return AnalyticsSnapshot(
            total_feedbacks=total_feedbacks,
            overall_average_rating=compute_overall_average(category_stats),
            responses_today=responses_today,
            categories=category_stats,
            table_breakdown=table_breakdown,
            recent_feedbacks=[to_recent_feedback(r, self.config.display_timezone) for r in recent],
        )
