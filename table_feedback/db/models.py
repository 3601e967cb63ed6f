from datetime import datetime
from uuid import uuid4
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from table_feedback.db.base import Base


class FeedbackRecord(Base):
    """
    One customer submission from a table's QR form.
    Rows are append-only: nothing updates or deletes them.
    """
    __tablename__ = "feedback"

    id = Column(Uuid, primary_key=True, default=uuid4)
    table_id = Column(Text, nullable=False, index=True)
    feedback_text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    ratings = relationship(
        "FeedbackRating",
        back_populates="feedback",
        order_by="FeedbackRating.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class FeedbackRating(Base):
    """A single (category, rating) pair belonging to a feedback record"""
    __tablename__ = "feedback_ratings"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 3", name="ck_feedback_ratings_rating_range"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    feedback_id = Column(Uuid, ForeignKey("feedback.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # order within the submitted ratings list
    service = Column(String(50), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1=Worst, 2=Average, 3=Excellent

    feedback = relationship("FeedbackRecord", back_populates="ratings")
