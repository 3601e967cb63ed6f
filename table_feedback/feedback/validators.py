"""Validation logic for feedback submissions"""
import logging
from typing import Iterable
from table_feedback.feedback.analytics import RATING_TO_BUCKET
from table_feedback.feedback.exceptions import InvalidInputException
from table_feedback.feedback.schemas import SubmitFeedbackRequest

logger = logging.getLogger(__name__)


class FeedbackValidator:
    """Validates feedback submissions against the configured categories"""

    VALID_RATINGS = tuple(RATING_TO_BUCKET)

    def __init__(self, categories: Iterable[str]):
        self.categories = tuple(categories)

    def validate_required_fields(self, request: SubmitFeedbackRequest) -> None:
        """Reject blank table ids and comments"""
        if not request.table_id.strip() or not request.feedback_text.strip():
            raise InvalidInputException("Missing required fields")

    def validate_ratings(self, request: SubmitFeedbackRequest) -> None:
        """Every rating needs a known category and a value of 1, 2 or 3"""
        if not request.ratings:
            raise InvalidInputException("At least one rating is required")
        for item in request.ratings:
            if item.service not in self.categories:
                raise InvalidInputException(
                    f"Invalid ratings format: unknown category '{item.service}'. "
                    f"Must be one of: {', '.join(self.categories)}"
                )
            if item.rating not in self.VALID_RATINGS:
                raise InvalidInputException(
                    f"Invalid ratings format: rating for '{item.service}' must be 1, 2 or 3"
                )

    def validate(self, request: SubmitFeedbackRequest) -> None:
        try:
            self.validate_required_fields(request)
            self.validate_ratings(request)
        except InvalidInputException as exc:
            logger.info(f"Feedback rejected for table {request.table_id!r}: {exc.detail}")
            raise
