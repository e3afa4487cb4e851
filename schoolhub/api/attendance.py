from datetime import date

from fastapi import APIRouter
from pydantic import BaseModel

from schoolhub.api.deps import Attendance, AttendanceMarker, AttendanceViewer
from schoolhub.models.attendance import (
    AttendanceEntry,
    AttendanceRecord,
    AttendanceRow,
    AttendanceStatus,
    BulkAttendanceResult,
    MonthlyAttendance,
)

router = APIRouter()


class MarkRequest(BaseModel):
    student_id: str
    date: date
    status: AttendanceStatus


class BulkMarkRequest(BaseModel):
    date: date
    attendances: list[AttendanceEntry] = []


@router.post("/", response_model=AttendanceRecord)
async def mark_attendance(data: MarkRequest, attendance: Attendance, user: AttendanceMarker):
    return await attendance.mark(data.student_id, data.date, data.status, user.id)


@router.post("/bulk", response_model=BulkAttendanceResult)
async def mark_attendance_bulk(data: BulkMarkRequest, attendance: Attendance, user: AttendanceMarker):
    """Mark attendance for many students on one date."""
    return await attendance.mark_bulk(data.attendances, data.date, user.id)


@router.get("/date/{date_str}", response_model=list[AttendanceRow])
async def get_by_date(date_str: str, attendance: Attendance, user: AttendanceViewer):
    return await attendance.get_by_date(date_str)


@router.get("/student/{student_id}", response_model=list[AttendanceRecord])
async def get_by_student(student_id: str, attendance: Attendance, user: AttendanceViewer):
    return await attendance.get_by_student(student_id)


@router.get("/monthly/{student_id}/{month}/{year}", response_model=MonthlyAttendance)
async def monthly_report(student_id: str, month: int, year: int, attendance: Attendance, user: AttendanceViewer):
    return await attendance.monthly_report(student_id, month, year)
