# app/main.py
from datetime import datetime, timezone
from typing import List, Optional
from fastapi import FastAPI, BackgroundTasks, Depends, Query
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException
import os
import logging

from app import database, errors, events, schemas, seed
from app.services import RegistrationService

# config / env
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./course_registration.db")
RABBITMQ_URL = os.getenv("RABBITMQ_URL", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("registration-service")

app = FastAPI(title="Course Registration Service")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Create DB tables and seed the sample courses at startup
@app.on_event("startup")
def startup():
    logger.info("Initializing DB at %s", DATABASE_URL)
    database.init_db(DATABASE_URL)
    db = database.SessionLocal()
    try:
        seed.seed_courses(db)
    finally:
        db.close()
    if not RABBITMQ_URL:
        logger.info("RABBITMQ_URL not set, registration events disabled")
    logger.info("Startup complete.")


def get_db():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_service(db: Session = Depends(get_db)) -> RegistrationService:
    return RegistrationService(db)


# every error leaves as {"error": message}
@app.exception_handler(errors.RegistrationError)
def registration_error_handler(request, exc: errors.RegistrationError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
def http_error_handler(request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
def request_validation_handler(request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ())[1:])
    message = "Invalid value for %s: %s" % (field, first.get("msg")) if field else "Invalid request body"
    return JSONResponse(status_code=400, content={"error": message})


# Root + health endpoints
@app.get("/")
def root():
    return {
        "service": "Course Registration Service",
        "status": "running",
        "endpoints": ["/api/courses", "/api/register", "/api/registrations", "/api/health", "/docs"],
    }


@app.get("/api/health", response_model=schemas.HealthOut)
def health():
    now = datetime.now(timezone.utc)
    try:
        db = database.SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except Exception as e:
        logger.exception("Health check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content={"status": "ERROR", "database": "disconnected", "timestamp": now.isoformat()},
        )
    return schemas.HealthOut(status="OK", database="connected", timestamp=now)


@app.get("/api/courses", response_model=List[schemas.CourseOut])
def list_courses(service: RegistrationService = Depends(get_service)):
    return [schemas.CourseOut.model_validate(c) for c in service.list_courses()]


@app.get("/api/courses/{course_id}", response_model=schemas.CourseOut)
def get_course(course_id: int, service: RegistrationService = Depends(get_service)):
    return schemas.CourseOut.model_validate(service.get_course(course_id))


# Register -> active registration, enrolled + 1, publish RegistrationCreated (background)
@app.post("/api/register", response_model=schemas.RegistrationResult, status_code=201)
def register(payload: schemas.RegistrationCreate, background_tasks: BackgroundTasks,
             service: RegistrationService = Depends(get_service)):
    registration = service.register(payload.student_id, payload.student_name, payload.email, payload.course_id)
    background_tasks.add_task(
        events.publish_registration_event,
        RABBITMQ_URL,
        events.registration_event("RegistrationCreated", registration),
    )
    return schemas.RegistrationResult(
        message="Successfully registered for the course",
        registration=schemas.RegistrationOut.model_validate(registration),
    )


# Admin view: all registrations, active unless ?status= says otherwise
@app.get("/api/registrations", response_model=List[schemas.RegistrationOut])
def list_registrations(status: Optional[str] = Query(None), service: RegistrationService = Depends(get_service)):
    return [schemas.RegistrationOut.model_validate(r) for r in service.list_all(status)]


@app.get("/api/registrations/{student_id}", response_model=List[schemas.RegistrationOut])
def list_student_registrations(student_id: str, status: Optional[str] = Query(None),
                               service: RegistrationService = Depends(get_service)):
    return [schemas.RegistrationOut.model_validate(r) for r in service.list_for_student(student_id, status)]


# Drop (soft state change), enrolled - 1
@app.delete("/api/registrations/{registration_id}", response_model=schemas.RegistrationResult)
def drop_registration(registration_id: int, background_tasks: BackgroundTasks,
                      service: RegistrationService = Depends(get_service)):
    registration = service.drop(registration_id)
    background_tasks.add_task(
        events.publish_registration_event,
        RABBITMQ_URL,
        events.registration_event("RegistrationDropped", registration),
    )
    return schemas.RegistrationResult(
        message="Registration cancelled successfully",
        registration=schemas.RegistrationOut.model_validate(registration),
    )


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
