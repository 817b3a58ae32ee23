import logging

from sqlalchemy.orm import Session

from app import models

logger = logging.getLogger(__name__)

SAMPLE_COURSES = [
    {
        "id": 1,
        "code": "CS101",
        "name": "Introduction to Computer Science",
        "instructor": "Dr. Sarah Johnson",
        "credits": 3,
        "schedule": "Mon, Wed, Fri 9:00-10:00 AM",
        "capacity": 30,
        "description": "Fundamental concepts of computer science and programming.",
    },
    {
        "id": 2,
        "code": "CS201",
        "name": "Data Structures and Algorithms",
        "instructor": "Prof. Michael Chen",
        "credits": 4,
        "schedule": "Tue, Thu 10:30-12:00 PM",
        "capacity": 25,
        "description": "Study of data structures, algorithms, and their analysis.",
    },
    {
        "id": 3,
        "code": "CS301",
        "name": "Database Management Systems",
        "instructor": "Dr. Emily Rodriguez",
        "credits": 3,
        "schedule": "Mon, Wed 2:00-3:30 PM",
        "capacity": 28,
        "description": "Design and implementation of database systems.",
    },
    {
        "id": 4,
        "code": "CS302",
        "name": "Web Development",
        "instructor": "Prof. David Kim",
        "credits": 3,
        "schedule": "Tue, Thu 1:00-2:30 PM",
        "capacity": 30,
        "description": "Modern web development technologies and frameworks.",
    },
    {
        "id": 5,
        "code": "CS401",
        "name": "Machine Learning",
        "instructor": "Dr. Lisa Wang",
        "credits": 4,
        "schedule": "Mon, Wed, Fri 11:00-12:00 PM",
        "capacity": 20,
        "description": "Introduction to machine learning algorithms and applications.",
    },
    {
        "id": 6,
        "code": "CS402",
        "name": "Cloud Computing",
        "instructor": "Prof. James Anderson",
        "credits": 3,
        "schedule": "Tue, Thu 3:00-4:30 PM",
        "capacity": 25,
        "description": "Cloud computing concepts, services, and deployment models.",
    },
]


def seed_courses(db: Session) -> int:
    """Insert the sample courses when the course table is empty.

    Returns the number of courses inserted.
    """
    if db.query(models.Course).count():
        return 0
    for data in SAMPLE_COURSES:
        db.add(models.Course(**dict(data, code=data["code"].strip()), enrolled=0))
    db.commit()
    logger.info("Seeded %d sample courses", len(SAMPLE_COURSES))
    return len(SAMPLE_COURSES)
