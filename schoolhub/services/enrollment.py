"""Student enrollment lifecycle: pending -> approved | rejected, plus credentials."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from schoolhub import queries
from schoolhub.errors import AuthError, NotFoundError, ValidationError
from schoolhub.models.report import BulkStatusResult, EnrollmentStats
from schoolhub.models.staff import Principal
from schoolhub.models.student import (
    Student,
    StudentCreate,
    StudentFilter,
    StudentStatus,
    StudentUpdate,
)
from schoolhub.rbac import has_capability
from schoolhub.security import get_password_hash, verify_password
from schoolhub.services._validation import parse
from schoolhub.store.base import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthOutcome:
    """Result of a student login.

    ``needs_setup`` is set when the student has no credential yet and
    presented their roll number; no session should be issued in that case.
    """

    student: Student
    needs_setup: bool = False


class EnrollmentService:
    def __init__(self, store: RecordStore):
        self._store = store

    async def _require(self, student_id: str) -> Student:
        student = await self._store.get_student(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    async def enroll(self, data: StudentCreate | dict[str, Any]) -> Student:
        """Self-registration. The student waits in ``pending`` for an admin."""
        payload = parse(StudentCreate, data)
        student = await self._store.insert_student(
            Student(**payload.model_dump(exclude={"password"}), status=StudentStatus.PENDING)
        )
        logger.info("Enrollment submitted for roll number %s", student.roll_number)
        return student

    async def create(self, data: StudentCreate | dict[str, Any]) -> Student:
        """Admin creation; same checks as enroll, optionally with a first credential."""
        payload = parse(StudentCreate, data)
        password_hash = get_password_hash(payload.password) if payload.password else None
        return await self._store.insert_student(
            Student(**payload.model_dump(exclude={"password"}), password_hash=password_hash)
        )

    async def get(self, student_id: str) -> Student:
        return await self._require(student_id)

    async def update(self, student_id: str, data: StudentUpdate | dict[str, Any]) -> Student:
        changes = parse(StudentUpdate, data).model_dump(exclude_unset=True)
        if any(changes.get(k) is None for k in ("name", "roll_number", "email", "class_name") if k in changes):
            raise ValidationError("Required fields cannot be cleared")
        student = await self._require(student_id)
        return await self._store.save_student(student.model_copy(update=changes))

    async def delete(self, student_id: str) -> None:
        if not await self._store.delete_student(student_id):
            raise NotFoundError("Student not found")
        logger.info("Student %s deleted", student_id)

    async def approve(self, student_id: str, approver_id: str) -> Student:
        student = await self._require(student_id)
        student = student.model_copy(
            update={
                "status": StudentStatus.APPROVED,
                "approved_at": datetime.utcnow(),
                "approved_by": approver_id,
            }
        )
        student = await self._store.save_student(student)
        logger.info("Student %s approved by %s", student_id, approver_id)
        return student

    async def reject(self, student_id: str, approver_id: str) -> Student:
        student = await self._require(student_id)
        student = student.model_copy(
            update={"status": StudentStatus.REJECTED, "approved_by": approver_id}
        )
        student = await self._store.save_student(student)
        logger.info("Student %s rejected by %s", student_id, approver_id)
        return student

    async def _bulk(self, student_ids: Sequence[str], changes: dict) -> BulkStatusResult:
        if (
            not isinstance(student_ids, (list, tuple))
            or not student_ids
            or not all(isinstance(i, str) for i in student_ids)
        ):
            raise ValidationError("Student IDs array is required")
        matched_ids, modified = await self._store.set_students_status(list(student_ids), changes)
        matched = set(matched_ids)
        skipped = [i for i in student_ids if i not in matched]
        if skipped:
            logger.warning("Bulk %s skipped %d unknown ids", changes["status"].value, len(skipped))
        return BulkStatusResult(modified_count=modified, skipped=skipped)

    async def bulk_approve(self, student_ids: Sequence[str], approver_id: str) -> BulkStatusResult:
        result = await self._bulk(
            student_ids,
            {
                "status": StudentStatus.APPROVED,
                "approved_at": datetime.utcnow(),
                "approved_by": approver_id,
            },
        )
        logger.info("%d students approved by %s", result.modified_count, approver_id)
        return result

    async def bulk_reject(self, student_ids: Sequence[str], approver_id: str) -> BulkStatusResult:
        result = await self._bulk(
            student_ids, {"status": StudentStatus.REJECTED, "approved_by": approver_id}
        )
        logger.info("%d students rejected by %s", result.modified_count, approver_id)
        return result

    async def set_credential(self, student_id: str, plaintext: str) -> Student:
        if not plaintext:
            raise ValidationError("Password is required")
        student = await self._require(student_id)
        return await self._store.save_student(
            student.model_copy(update={"password_hash": get_password_hash(plaintext)})
        )

    async def _approved_by_roll(self, roll_number: str) -> Student:
        student = await self._store.find_student_by_roll(roll_number)
        if not student or not student.is_approved:
            raise AuthError("Invalid credentials or student not approved")
        return student

    async def authenticate(self, roll_number: str, plaintext: str) -> AuthOutcome:
        student = await self._approved_by_roll(roll_number)
        if student.password_hash is None:
            if plaintext == student.roll_number:
                return AuthOutcome(student=student, needs_setup=True)
            raise AuthError(
                "Password not set. Use your roll number as temporary password to set up your account."
            )
        if not verify_password(plaintext, student.password_hash):
            raise AuthError("Invalid credentials")
        return AuthOutcome(student=student)

    async def setup_credential(self, roll_number: str, temporary: str, new_password: str) -> Student:
        """Replace the bootstrap (or current) credential with ``new_password``."""
        student = await self._approved_by_roll(roll_number)
        if student.password_hash is None:
            if temporary != student.roll_number:
                raise AuthError("Invalid temporary password. Use your roll number.")
        elif not verify_password(temporary, student.password_hash):
            raise AuthError("Invalid current password")
        if not new_password:
            raise ValidationError("New password is required")
        student = await self._store.save_student(
            student.model_copy(update={"password_hash": get_password_hash(new_password)})
        )
        logger.info("Credential set up for roll number %s", roll_number)
        return student

    async def list_students(
        self, filters: Optional[StudentFilter | dict[str, Any]], principal: Principal
    ) -> list[Student]:
        filters = parse(StudentFilter, filters or {})
        if has_capability(principal, "view_all_students"):
            statuses = [filters.status] if filters.status else None
        else:
            statuses = [StudentStatus.APPROVED]
        return list(
            await self._store.find_students(
                statuses=statuses, class_name=filters.class_name, search=filters.search
            )
        )

    async def list_pending(self) -> list[Student]:
        return list(await self._store.find_students(statuses=[StudentStatus.PENDING]))

    async def enrollment_stats(self) -> EnrollmentStats:
        students = await self._store.find_students()
        by_status = {status: 0 for status in StudentStatus}
        for s in students:
            by_status[s.status] += 1
        return EnrollmentStats(
            total=len(students),
            approved=by_status[StudentStatus.APPROVED],
            pending=by_status[StudentStatus.PENDING],
            rejected=by_status[StudentStatus.REJECTED],
            class_distribution=queries.class_distribution(s for s in students if s.is_approved),
        )
