from datetime import datetime
from io import BytesIO
import pandas as pd
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas
from table_feedback.feedback.schemas import AnalyticsSnapshot


class ReportsService:
    """Service for exporting feedback analytics reports"""

    def breakdown_rows(self, snapshot: AnalyticsSnapshot) -> list[dict]:
        """Flatten the per-table sentiment breakdown into one row per (table, category)"""
        rows = []
        for table_id, categories in snapshot.table_breakdown.items():
            for category, buckets in categories.items():
                rows.append({
                    'Table': table_id,
                    'Category': category,
                    'Worst': buckets.worst,
                    'Average': buckets.average,
                    'Excellent': buckets.excellent,
                })
        return rows

    def generate_csv(self, snapshot: AnalyticsSnapshot) -> BytesIO:
        """Generate CSV file from the table breakdown"""
        df = pd.DataFrame(
            self.breakdown_rows(snapshot),
            columns=['Table', 'Category', 'Worst', 'Average', 'Excellent'],
        )
        buffer = BytesIO()
        df.to_csv(buffer, index=False)
        buffer.seek(0)
        return buffer

    def generate_pdf(self, snapshot: AnalyticsSnapshot, title: str) -> BytesIO:
        """Generate PDF file from the analytics snapshot"""
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=letter)
        width, height = letter
        line_x1 = 50
        line_x2 = width - 50

        # Title
        c.setFont("Helvetica-Bold", 16)
        c.drawString(100, height - 50, title)

        c.setFont("Helvetica", 10)
        c.drawString(50, height - 75, f"Generated: {datetime.utcnow().strftime('%Y-%m-%d %H:%M')} UTC")
        c.drawString(50, height - 90, f"Total Feedbacks: {snapshot.total_feedbacks}")
        c.drawString(50, height - 105, f"Average Rating: {snapshot.overall_average_rating}")
        c.drawString(50, height - 120, f"Responses Today: {snapshot.responses_today}")

        y = height - 150
        c.setFont("Helvetica-Bold", 12)
        c.drawString(50, y, "Categories")
        y -= 20
        c.setFont("Helvetica", 10)
        for category, stats in snapshot.categories.items():
            c.drawString(
                50, y,
                f"{category.capitalize()}: {stats.feedback_count} ratings, "
                f"average {stats.average_rating:.2f}, sentiment score {stats.sentiment_score}%"
            )
            y -= 15

        y -= 10
        c.setLineWidth(0.5)
        c.line(line_x1, y, line_x2, y)
        y -= 20

        c.setFont("Helvetica-Bold", 12)
        c.drawString(50, y, "Table Breakdown")
        y -= 20
        c.setFont("Helvetica", 10)

        for row in self.breakdown_rows(snapshot):
            if y < 60:
                c.showPage()
                y = height - 50
                c.setFont("Helvetica", 10)

            c.drawString(
                50, y,
                f"Table {row['Table']} - {row['Category']}: worst {row['Worst']}, "
                f"average {row['Average']}, excellent {row['Excellent']}"
            )
            y -= 15

        c.save()
        buffer.seek(0)
        return buffer
