"""Student enrollment, approval and profile management."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field

from schoolhub.api.deps import (
    Approver,
    CurrentPrincipal,
    Enrollment,
    StudentManager,
    require_capability,
)
from schoolhub.models.report import BulkStatusResult, EnrollmentStats
from schoolhub.models.student import StudentCreate, StudentFilter, StudentStatus, StudentUpdate

router = APIRouter()


class PasswordRequest(BaseModel):
    password: str = ""


class BulkRequest(BaseModel):
    student_ids: list[str] = Field(default_factory=list)


@router.post("/enroll", status_code=201)
async def enroll(data: StudentCreate, enrollment: Enrollment):
    """Public self-registration; the student waits for admin approval."""
    student = await enrollment.enroll(data)
    return {
        "message": "Registration submitted successfully. Waiting for admin approval.",
        "student": student.public(),
    }


@router.get("/")
async def list_students(
    principal: CurrentPrincipal,
    enrollment: Enrollment,
    search: Optional[str] = Query(None, description="Search by name, roll number or email"),
    class_name: Optional[str] = Query(None, alias="class"),
    status: Optional[StudentStatus] = None,
):
    filters = StudentFilter(search=search, class_name=class_name, status=status)
    return [s.public() for s in await enrollment.list_students(filters, principal)]


@router.get("/pending", dependencies=[Depends(require_capability("view_pending"))])
async def list_pending(enrollment: Enrollment):
    return [s.public() for s in await enrollment.list_pending()]


@router.get(
    "/stats/overview",
    response_model=EnrollmentStats,
    dependencies=[Depends(require_capability("view_all_students"))],
)
async def stats_overview(enrollment: Enrollment):
    return await enrollment.enrollment_stats()


@router.get("/{student_id}", dependencies=[Depends(require_capability("view_students"))])
async def get_student(student_id: str, enrollment: Enrollment):
    return (await enrollment.get(student_id)).public()


@router.post("/", status_code=201)
async def create_student(data: StudentCreate, enrollment: Enrollment, admin: StudentManager):
    return (await enrollment.create(data)).public()


@router.put("/{student_id}")
async def update_student(student_id: str, data: StudentUpdate, enrollment: Enrollment, admin: StudentManager):
    return (await enrollment.update(student_id, data)).public()


@router.put("/{student_id}/set-password")
async def set_password(student_id: str, data: PasswordRequest, enrollment: Enrollment, admin: StudentManager):
    student = await enrollment.set_credential(student_id, data.password)
    return {"message": "Password set successfully", "student": {"id": student.id, "name": student.name}}


@router.put("/{student_id}/approve")
async def approve_student(student_id: str, enrollment: Enrollment, admin: Approver):
    student = await enrollment.approve(student_id, admin.id)
    return {"message": "Student approved successfully", "student": student.public()}


@router.put("/{student_id}/reject")
async def reject_student(student_id: str, enrollment: Enrollment, admin: Approver):
    student = await enrollment.reject(student_id, admin.id)
    return {"message": "Student rejected", "student": student.public()}


@router.post("/bulk-approve", response_model=BulkStatusResult)
async def bulk_approve(data: BulkRequest, enrollment: Enrollment, admin: Approver):
    return await enrollment.bulk_approve(data.student_ids, admin.id)


@router.post("/bulk-reject", response_model=BulkStatusResult)
async def bulk_reject(data: BulkRequest, enrollment: Enrollment, admin: Approver):
    return await enrollment.bulk_reject(data.student_ids, admin.id)


@router.delete("/{student_id}", status_code=204)
async def delete_student(student_id: str, enrollment: Enrollment, admin: StudentManager):
    await enrollment.delete(student_id)
    return Response(status_code=204)
