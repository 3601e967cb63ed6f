"""Feedback custom exceptions"""
from fastapi import HTTPException, status


class InvalidInputException(HTTPException):
    """Raised when a submission is missing fields or carries malformed ratings"""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )


class PersistenceFailureException(HTTPException):
    """Raised when the feedback store rejects a write"""
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save feedback"
        )


class AnalyticsUnavailableException(HTTPException):
    """Raised when the feedback store cannot be read for analytics"""
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch analytics data"
        )


class InsightGenerationError(Exception):
    """The LLM call failed or returned something other than the expected JSON.

    Never leaves the insight client: it is caught there and replaced by the
    fallback analysis.
    """
