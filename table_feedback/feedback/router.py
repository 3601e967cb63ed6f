"""Feedback REST API endpoints"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from table_feedback.config import AppConfig, get_config
from table_feedback.db.postgres import get_db
from table_feedback.feedback.insights import InsightGenerator, get_insight_generator
from table_feedback.feedback.service import FeedbackService
from table_feedback.feedback.schemas import (
    AnalyticsSnapshot,
    SubmitFeedbackRequest,
    SubmitFeedbackResponse,
)


def get_feedback_service(
    db: AsyncSession = Depends(get_db),
    config: AppConfig = Depends(get_config),
    insight_generator: InsightGenerator = Depends(get_insight_generator),
) -> FeedbackService:
    """Dependency to get FeedbackService"""
    return FeedbackService(db, config, insight_generator)


router = APIRouter(
    prefix="/feedback",
    tags=["feedback"],
)


@router.post("", response_model=SubmitFeedbackResponse, status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    request: SubmitFeedbackRequest,
    service: FeedbackService = Depends(get_feedback_service),
):
    """
    Submit feedback from a table's QR form.

    Business rules:
    - Categories: ambience, cleanliness, taste, service, value (configurable)
    - Rating: 1=Worst, 2=Average, 3=Excellent
    - The comment is analyzed by the LLM; on failure a neutral analysis is returned
    """
    feedback, analysis = await service.submit_feedback(request)
    return SubmitFeedbackResponse(feedback_id=feedback.id, analysis=analysis)


@router.get("/analytics", response_model=AnalyticsSnapshot)
async def get_feedback_analytics(
    service: FeedbackService = Depends(get_feedback_service),
):
    """
    Get aggregated feedback analytics for the dashboard.

    Returns totals, per-category stats with sentiment scores, the
    per-table sentiment breakdown and the last 24 hours of feedback.
    """
    return await service.get_analytics()
