"""Table roster Pydantic schemas"""
from table_feedback.feedback.schemas import CamelModel


class TableSummary(CamelModel):
    """A roster table with its feedback totals"""
    id: str
    location: str
    capacity: int
    feedback_count: int
    average_rating: float  # mean of per-feedback averages, 1 decimal
    feedback_url: str  # target encoded in the table's QR code
