from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from schoolhub.models.student import StudentSummary


class MarkRecord(BaseModel):
    """A score for one subject of one exam. Repeats are allowed and all count."""

    id: Optional[str] = None
    student_id: str
    exam_type: str  # e.g. "Midterm", "Final"
    subject: str
    score: float
    max_score: float = 100
    entered_by: str  # staff id
    recorded_at: datetime = Field(default_factory=datetime.utcnow)


class MarkCreate(BaseModel):
    student_id: str
    exam_type: str
    subject: str
    score: float
    max_score: float = 100


class MarkRow(MarkRecord):
    student: StudentSummary


class RankEntry(BaseModel):
    student: StudentSummary
    total: float
    subject_count: int
    average: float
    grade: str
