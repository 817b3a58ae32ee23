# app/schemas.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime


class CamelModel(BaseModel):
    # JSON keys are camelCase (studentId, availableSeats, ...); python names stay snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CourseOut(CamelModel):
    id: int
    code: str
    name: str
    instructor: str
    credits: int
    schedule: str
    capacity: int
    enrolled: int
    available_seats: int
    description: str


class RegistrationCreate(CamelModel):
    # fields are optional here so a missing one is reported by the service as a 400
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    email: Optional[str] = None
    course_id: Optional[int] = None


class RegistrationOut(CamelModel):
    id: int
    student_id: str
    student_name: str
    email: str
    course_id: int
    course_name: str
    course_code: str
    status: str
    registered_at: Optional[datetime] = None
    dropped_at: Optional[datetime] = None


class RegistrationResult(CamelModel):
    message: str
    registration: RegistrationOut


class HealthOut(CamelModel):
    status: str
    database: str
    timestamp: datetime
