"""Registration service.

Keeps the course enrolled counter and the registration rows consistent:
registering claims a seat and inserts the registration in one transaction,
dropping releases the seat and marks the registration dropped in another.
"""
import logging
import re
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app import models
from app.errors import (
    CapacityExceededError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")


def _clean(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


class RegistrationService:
    def __init__(self, db: Session):
        self.db = db

    # courses

    def list_courses(self) -> List[models.Course]:
        try:
            return self.db.query(models.Course).order_by(models.Course.id).all()
        except SQLAlchemyError as e:
            raise StorageError("Failed to fetch courses") from e

    def get_course(self, course_id: int) -> models.Course:
        try:
            course = self.db.get(models.Course, course_id)
        except SQLAlchemyError as e:
            raise StorageError("Failed to fetch course") from e
        if course is None:
            raise NotFoundError("Course not found")
        return course

    # registrations

    def register(self, student_id, student_name, email, course_id) -> models.Registration:
        student_id = _clean(student_id)
        student_name = _clean(student_name)
        email = _clean(email).lower()
        if not student_id or not student_name or not email or not course_id:
            raise ValidationError("All fields are required")
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Please enter a valid email address")

        course = self.get_course(course_id)
        if self._find_active(student_id, course.id) is not None:
            raise ConflictError("Already registered for this course")

        try:
            # claim the seat only if one is left; no separate read-then-write
            claimed = self.db.execute(
                update(models.Course)
                .where(models.Course.id == course.id, models.Course.enrolled < models.Course.capacity)
                .values(enrolled=models.Course.enrolled + 1)
                .execution_options(synchronize_session=False)
            )
            if claimed.rowcount == 0:
                self.db.rollback()
                raise CapacityExceededError("Course is full")

            registration = models.Registration(
                student_id=student_id,
                student_name=student_name,
                email=email,
                course_id=course.id,
                course_name=course.name,
                course_code=course.code,
                status=models.STATUS_ACTIVE,
            )
            self.db.add(registration)
            self.db.commit()
        except IntegrityError as e:
            # a concurrent request registered the same pair first
            self.db.rollback()
            raise ConflictError("Already registered for this course") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Register failed student=%s course=%s", student_id, course_id)
            raise StorageError("Failed to register for course") from e

        self.db.refresh(registration)
        logger.info("Registered id=%s student=%s course=%s",
                    registration.id, student_id, registration.course_code)
        return registration

    def list_for_student(self, student_id: str, status: str = models.STATUS_ACTIVE) -> List[models.Registration]:
        # stored ids are trimmed on register
        return self._list(status, student_id=_clean(student_id))

    def list_all(self, status: str = models.STATUS_ACTIVE) -> List[models.Registration]:
        return self._list(status)

    def drop(self, registration_id: int) -> models.Registration:
        try:
            registration = self.db.get(models.Registration, registration_id)
        except SQLAlchemyError as e:
            raise StorageError("Failed to cancel registration") from e
        if registration is None or registration.status != models.STATUS_ACTIVE:
            raise NotFoundError("Registration not found")

        try:
            # flip the status only if still active, so a seat is released at most once
            flipped = self.db.execute(
                update(models.Registration)
                .where(models.Registration.id == registration_id,
                       models.Registration.status == models.STATUS_ACTIVE)
                .values(status=models.STATUS_DROPPED, dropped_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session=False)
            )
            if flipped.rowcount == 0:
                self.db.rollback()
                raise NotFoundError("Registration not found")

            self.db.execute(
                update(models.Course)
                .where(models.Course.id == registration.course_id, models.Course.enrolled > 0)
                .values(enrolled=models.Course.enrolled - 1)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Drop failed id=%s", registration_id)
            raise StorageError("Failed to cancel registration") from e

        self.db.refresh(registration)
        logger.info("Dropped registration id=%s student=%s course=%s",
                    registration.id, registration.student_id, registration.course_code)
        return registration

    def _find_active(self, student_id: str, course_id: int) -> Optional[models.Registration]:
        try:
            return (
                self.db.query(models.Registration)
                .filter(
                    models.Registration.student_id == student_id,
                    models.Registration.course_id == course_id,
                    models.Registration.status == models.STATUS_ACTIVE,
                )
                .first()
            )
        except SQLAlchemyError as e:
            raise StorageError("Failed to register for course") from e

    def _list(self, status: str, student_id: Optional[str] = None) -> List[models.Registration]:
        status = (status or models.STATUS_ACTIVE).lower()
        if status not in models.STATUSES:
            raise ValidationError("Unknown status: %s" % status)
        q = self.db.query(models.Registration).filter(models.Registration.status == status)
        if student_id is not None:
            q = q.filter(models.Registration.student_id == student_id)
        try:
            # registered_at has second precision on some backends; id breaks ties
            return q.order_by(models.Registration.registered_at.desc(), models.Registration.id.desc()).all()
        except SQLAlchemyError as e:
            raise StorageError("Failed to fetch registrations") from e
