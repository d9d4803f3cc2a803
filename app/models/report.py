from app.models.base import MongoModel


class MonthlyReport(MongoModel):
    month: str
    pdf_data: str  # base64
    file_name: str
    generated_by: str
    generated_by_name: str = "Admin"
    file_size: int = 0
