from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import relationship

from app.database import Base

STATUS_ACTIVE = "active"
STATUS_DROPPED = "dropped"
STATUSES = (STATUS_ACTIVE, STATUS_DROPPED)


class Course(Base):
    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint("credits >= 1 AND credits <= 6", name="ck_course_credits"),
        CheckConstraint("capacity >= 1", name="ck_course_capacity"),
        CheckConstraint("enrolled >= 0 AND enrolled <= capacity", name="ck_course_enrolled"),
    )

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(16), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=False)
    instructor = Column(String(120), nullable=False)
    credits = Column(Integer, nullable=False)
    schedule = Column(String(120), nullable=False)
    capacity = Column(Integer, nullable=False)
    enrolled = Column(Integer, default=0, nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    registrations = relationship("Registration", back_populates="course")

    @property
    def available_seats(self) -> int:
        return self.capacity - self.enrolled


class Registration(Base):
    __tablename__ = "registrations"
    __table_args__ = (
        # one active registration per student and course; dropped rows are history
        Index(
            "uq_registration_active_pair",
            "student_id",
            "course_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(String(64), index=True, nullable=False)
    student_name = Column(String(120), nullable=False)
    email = Column(String(254), nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id"), index=True, nullable=False)
    course_name = Column(String(200), nullable=False)
    course_code = Column(String(16), nullable=False)
    status = Column(String(20), default=STATUS_ACTIVE, nullable=False)
    registered_at = Column(DateTime(timezone=True), server_default=func.now())
    dropped_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    course = relationship("Course", back_populates="registrations")
