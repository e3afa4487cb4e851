from fastapi import APIRouter

from schoolhub.api.deps import Grading, MarkRecorder, MarkViewer
from schoolhub.models.mark import MarkCreate, MarkRecord, MarkRow, RankEntry

router = APIRouter()


@router.post("/", status_code=201, response_model=MarkRecord)
async def add_mark(data: MarkCreate, grading: Grading, user: MarkRecorder):
    return await grading.add_mark(data, user.id)


# Registered before /student/{student_id} so "all" is not taken as an id.
@router.get("/student/all", response_model=list[MarkRow])
async def all_marks(grading: Grading, user: MarkViewer):
    return await grading.all_marks()


@router.get("/student/{student_id}", response_model=list[MarkRecord])
async def marks_by_student(student_id: str, grading: Grading, user: MarkViewer):
    return await grading.by_student(student_id)


@router.get("/exam/{exam_type}", response_model=list[MarkRow])
async def marks_by_exam(exam_type: str, grading: Grading, user: MarkViewer):
    return await grading.by_exam(exam_type)


@router.get("/rank/{exam_type}", response_model=list[RankEntry])
async def rank(exam_type: str, grading: Grading, user: MarkViewer):
    """Students ranked by average score for an exam, with letter grades."""
    return await grading.rank(exam_type)
