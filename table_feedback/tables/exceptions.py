"""Table roster exceptions"""
from fastapi import HTTPException, status


class TableDataUnavailableException(HTTPException):
    """Raised when feedback totals for the roster cannot be read"""
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch table data"
        )
