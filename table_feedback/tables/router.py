from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from table_feedback.config import AppConfig, get_config
from table_feedback.db.postgres import get_db
from table_feedback.feedback.repository import FeedbackRepository
from table_feedback.tables.schemas import TableSummary
from table_feedback.tables.service import TableService


def get_table_service(
    db: AsyncSession = Depends(get_db),
    config: AppConfig = Depends(get_config),
) -> TableService:
    """Dependency to get TableService"""
    return TableService(FeedbackRepository(db), config)


router = APIRouter(
    prefix="/tables",
    tags=["tables"],
)


@router.get("", response_model=List[TableSummary])
async def list_tables(service: TableService = Depends(get_table_service)):
    """List the restaurant tables with feedback counts, average ratings and QR form links"""
    return await service.list_tables()
