from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from app.schemas.common import DocumentId, Month


class ReportCreate(BaseModel):
    month: Month


class ReportSummary(BaseModel):
    id: DocumentId
    month: str
    file_name: str
    generated_by: str
    generated_by_name: str
    file_size: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)


class ReportResponse(ReportSummary):
    pdf_data: str
