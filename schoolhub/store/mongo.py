"""RecordStore implementation on MongoDB through Beanie."""
from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from enum import Enum
from typing import Iterable, Optional, Sequence

from beanie import PydanticObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from schoolhub.errors import NotFoundError, ValidationError
from schoolhub.models.attendance import AttendanceRecord, AttendanceStatus
from schoolhub.models.mark import MarkRecord
from schoolhub.models.staff import StaffAccount
from schoolhub.models.student import Student, StudentStatus
from schoolhub.store.documents import (
    AttendanceDocument,
    MarkDocument,
    StaffDocument,
    StudentDocument,
)

logger = logging.getLogger(__name__)

_DUPLICATE_MESSAGES = {
    "email": "Email already exists",
    "roll_number": "Roll Number already exists",
    "username": "Username already exists",
}


def _object_id(value: str) -> Optional[PydanticObjectId]:
    if not value or not PydanticObjectId.is_valid(value):
        return None
    return PydanticObjectId(value)


def _duplicate_error(exc: DuplicateKeyError) -> ValidationError:
    key_pattern = (exc.details or {}).get("keyPattern") or {}
    field = next(iter(key_pattern), "")
    if field not in _DUPLICATE_MESSAGES:
        # older servers only name the index in the error text
        field = next((f for f in _DUPLICATE_MESSAGES if f in str(exc)), "")
    return ValidationError(_DUPLICATE_MESSAGES.get(field, "Duplicate record"))


def _plain(changes: dict) -> dict:
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in changes.items()}


class MongoRecordStore:
    """Stateless; every call goes to MongoDB. Requires ``init_beanie`` to have run."""

    # Students

    async def insert_student(self, student: Student) -> Student:
        doc = StudentDocument(**student.model_dump(exclude={"id"}))
        try:
            await doc.insert()
        except DuplicateKeyError as e:
            raise _duplicate_error(e) from e
        return doc.to_model()

    async def _student_document(self, student_id: str) -> Optional[StudentDocument]:
        oid = _object_id(student_id)
        if oid is None:
            return None
        return await StudentDocument.get(oid)

    async def get_student(self, student_id: str) -> Optional[Student]:
        doc = await self._student_document(student_id)
        return doc.to_model() if doc else None

    async def find_student_by_roll(self, roll_number: str) -> Optional[Student]:
        doc = await StudentDocument.find_one(StudentDocument.roll_number == roll_number)
        return doc.to_model() if doc else None

    async def find_students(
        self,
        *,
        statuses: Optional[Iterable[StudentStatus]] = None,
        class_name: Optional[str] = None,
        search: Optional[str] = None,
        ids: Optional[Iterable[str]] = None,
    ) -> Sequence[Student]:
        query: dict = {}
        if statuses is not None:
            query["status"] = {"$in": [StudentStatus(s).value for s in statuses]}
        if class_name:
            query["class_name"] = class_name
        if search and search.strip():
            pattern = re.escape(search.strip())
            query["$or"] = [
                {"name": {"$regex": pattern, "$options": "i"}},
                {"roll_number": {"$regex": pattern, "$options": "i"}},
                {"email": {"$regex": pattern, "$options": "i"}},
            ]
        if ids is not None:
            query["_id"] = {"$in": [oid for oid in map(_object_id, ids) if oid is not None]}
        docs = await StudentDocument.find(query).sort("-created_at").to_list()
        return [d.to_model() for d in docs]

    async def save_student(self, student: Student) -> Student:
        doc = await self._student_document(student.id)
        if not doc:
            raise NotFoundError("Student not found")
        for key, value in student.model_dump(exclude={"id"}).items():
            setattr(doc, key, value)
        try:
            await doc.save()
        except DuplicateKeyError as e:
            raise _duplicate_error(e) from e
        return doc.to_model()

    async def set_students_status(
        self, student_ids: Sequence[str], changes: dict
    ) -> tuple[list[str], int]:
        oids = [oid for oid in map(_object_id, student_ids) if oid is not None]
        if not oids:
            return [], 0
        matched = await StudentDocument.find({"_id": {"$in": oids}}).to_list()
        if not matched:
            return [], 0
        result = await StudentDocument.get_motor_collection().update_many(
            {"_id": {"$in": [d.id for d in matched]}}, {"$set": _plain(changes)}
        )
        return [str(d.id) for d in matched], result.modified_count

    async def delete_student(self, student_id: str) -> bool:
        doc = await self._student_document(student_id)
        if not doc:
            return False
        await doc.delete()
        return True

    # Staff

    async def insert_staff(self, account: StaffAccount) -> StaffAccount:
        doc = StaffDocument(**account.model_dump(exclude={"id"}))
        try:
            await doc.insert()
        except DuplicateKeyError as e:
            raise _duplicate_error(e) from e
        return doc.to_model()

    async def get_staff(self, staff_id: str) -> Optional[StaffAccount]:
        oid = _object_id(staff_id)
        if oid is None:
            return None
        doc = await StaffDocument.get(oid)
        return doc.to_model() if doc else None

    async def find_staff_by_username(self, username: str) -> Optional[StaffAccount]:
        doc = await StaffDocument.find_one(StaffDocument.username == username)
        return doc.to_model() if doc else None

    # Attendance

    async def upsert_attendance(
        self, student_id: str, day: date, status: AttendanceStatus, marked_by: str
    ) -> AttendanceRecord:
        if await self._student_document(student_id) is None:
            raise NotFoundError("Student not found")
        # BSON has no date type; stored as midnight like Beanie's encoder does
        key = {"student_id": student_id, "date": datetime.combine(day, time.min)}
        update = {
            "$set": {
                "status": AttendanceStatus(status).value,
                "marked_by": marked_by,
                "marked_at": datetime.utcnow(),
            }
        }
        collection = AttendanceDocument.get_motor_collection()
        try:
            raw = await collection.find_one_and_update(
                key, update, upsert=True, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError:
            # a concurrent first mark won the insert; the document exists now
            logger.info("Attendance insert race for %s on %s, updating", student_id, day)
            raw = await collection.find_one_and_update(
                key, update, return_document=ReturnDocument.AFTER
            )
        return AttendanceRecord(
            id=str(raw["_id"]),
            student_id=raw["student_id"],
            date=raw["date"].date(),
            status=raw["status"],
            marked_by=raw["marked_by"],
            marked_at=raw["marked_at"],
        )

    async def find_attendance(
        self,
        *,
        student_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        query: dict = {}
        if student_id:
            query["student_id"] = student_id
        window: dict = {}
        if start:
            window["$gte"] = start
        if end:
            window["$lte"] = end
        if window:
            query["date"] = window
        cursor = AttendanceDocument.find(query).sort("-date")
        if limit:
            cursor = cursor.limit(limit)
        return [d.to_model() for d in await cursor.to_list()]

    # Marks

    async def insert_mark(self, mark: MarkRecord) -> MarkRecord:
        if await self._student_document(mark.student_id) is None:
            raise NotFoundError("Student not found")
        doc = MarkDocument(**mark.model_dump(exclude={"id"}))
        await doc.insert()
        return doc.to_model()

    async def find_marks(
        self,
        *,
        student_id: Optional[str] = None,
        exam_type: Optional[str] = None,
    ) -> Sequence[MarkRecord]:
        query: dict = {}
        if student_id:
            query["student_id"] = student_id
        if exam_type:
            query["exam_type"] = exam_type
        docs = await MarkDocument.find(query).sort("-recorded_at").to_list()
        return [d.to_model() for d in docs]
