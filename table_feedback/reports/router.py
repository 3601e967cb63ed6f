from datetime import datetime
from fastapi import APIRouter, Depends, Query, HTTPException
from fastapi.responses import StreamingResponse
from table_feedback.feedback.router import get_feedback_service
from table_feedback.feedback.service import FeedbackService
from table_feedback.reports.service import ReportsService


def get_reports_service() -> ReportsService:
    """Dependency to get ReportsService"""
    return ReportsService()


router = APIRouter(
    prefix="/reports",
    tags=["reports"],
)


@router.get("/analytics/download")
async def download_analytics_report(
    format: str = Query("json", enum=["json", "csv", "pdf"]),
    feedback_service: FeedbackService = Depends(get_feedback_service),
    service: ReportsService = Depends(get_reports_service),
):
    """Download the feedback analytics report"""
    snapshot = await feedback_service.get_analytics()
    stamp = datetime.utcnow().date().isoformat()

    if format == "json":
        return snapshot
    elif format == "csv":
        csv_buffer = service.generate_csv(snapshot)
        return StreamingResponse(csv_buffer, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename=feedback_analytics_{stamp}.csv"})
    elif format == "pdf":
        pdf_buffer = service.generate_pdf(snapshot, "Feedback Analytics Report")
        return StreamingResponse(pdf_buffer, media_type="application/pdf", headers={"Content-Disposition": f"attachment; filename=feedback_analytics_{stamp}.pdf"})
    else:
        raise HTTPException(status_code=400, detail="Invalid format")
