from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from schoolhub.api.deps import CurrentPrincipal, ReportViewer, Reporting
from schoolhub.models.report import AttendanceReport, MarksReport, StudentReport

router = APIRouter()


@router.get("/attendance", response_model=AttendanceReport)
async def attendance_report(
    reporting: Reporting,
    user: ReportViewer,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    class_name: Optional[str] = Query(None, alias="class"),
):
    return await reporting.attendance_report(class_name, start_date, end_date)


@router.get("/marks", response_model=MarksReport)
async def marks_report(
    reporting: Reporting,
    user: ReportViewer,
    exam_type: Optional[str] = None,
    class_name: Optional[str] = Query(None, alias="class"),
):
    return await reporting.marks_report(exam_type, class_name)


@router.get("/class/{class_name}", response_model=list[StudentReport])
async def class_report(
    class_name: str,
    reporting: Reporting,
    user: ReportViewer,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
):
    return await reporting.class_report(class_name, start_date, end_date)


@router.get("/student/{student_id}", response_model=StudentReport)
async def student_report(student_id: str, principal: CurrentPrincipal, reporting: Reporting):
    """Students may only read their own report."""
    return await reporting.student_report(student_id, principal)
