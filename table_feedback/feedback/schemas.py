"""Feedback Pydantic schemas"""
from uuid import UUID
from datetime import datetime
from typing import Dict, List, Literal
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RatingItem(CamelModel):
    """One category rating inside a submission"""
    service: StrictStr
    rating: StrictInt = Field(..., description="Rating: 1=Worst, 2=Average, 3=Excellent")


class SubmitFeedbackRequest(CamelModel):
    """Feedback submitted from a table's QR form"""
    table_id: StrictStr
    ratings: List[RatingItem]
    feedback_text: StrictStr


class FeedbackAnalysis(CamelModel):
    """Structured LLM reading of a feedback comment"""
    sentiment: Literal["positive", "neutral", "negative"]
    summary: StrictStr
    actionable_insights: List[StrictStr]

    @field_validator("sentiment", mode="before")
    @classmethod
    def normalize_sentiment(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class SubmitFeedbackResponse(CamelModel):
    """Result of a successful submission"""
    message: str = "Feedback saved successfully"
    feedback_id: UUID
    analysis: FeedbackAnalysis


class SentimentBuckets(CamelModel):
    """Rating counts per sentiment bucket"""
    worst: int = 0
    average: int = 0
    excellent: int = 0


class CategoryStats(CamelModel):
    """Aggregated ratings for one category"""
    feedback_count: int
    total_rating_sum: int
    average_rating: float
    sentiment: SentimentBuckets
    sentiment_score: int  # 0-100 scale


class RecentFeedback(CamelModel):
    """A feedback record from the last 24 hours"""
    id: UUID
    table_id: str
    ratings: List[RatingItem]
    feedback_text: str
    created_at: datetime


class AnalyticsSnapshot(CamelModel):
    """Read-time aggregate over all feedback records"""
    total_feedbacks: int
    overall_average_rating: float
    responses_today: int
    categories: Dict[str, CategoryStats]
    table_breakdown: Dict[str, Dict[str, SentimentBuckets]]
    recent_feedbacks: List[RecentFeedback]
