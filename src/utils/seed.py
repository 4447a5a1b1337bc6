"""Demo records loaded into a fresh store.

Seed records keep readable identifiers (``student1``, ``course1`` ...). The
``enrolled`` counter of each course is derived from the seeded enrollments,
and result grades are derived from their scores.
"""

import logging
import mimetypes

from sqlalchemy.orm import Session

from config import UPLOAD_URL_PREFIX
from models.assignment import AssignmentModel
from models.course import CourseModel
from models.enrollment import EnrollmentModel
from models.material import MaterialModel
from models.result import ResultModel
from models.user import UserModel
from utils.converters import (
    course_snapshot,
    creator_snapshot,
    instructor_snapshot,
    student_snapshot,
)
from utils.result_manager import compute_result, result_student_snapshot

logger = logging.getLogger(__name__)

SEED_CREATED_AT = "2024-01-01T00:00:00Z"

SEED_USERS = [
    ("admin1", "Admin", "User", "admin@university.edu", "admin", None),
    ("instructor1", "Dr. Sarah", "Johnson", "instructor@university.edu", "instructor", "INST001"),
    ("instructor2", "Prof. Michael", "Brown", "michael.brown@university.edu", "instructor", "INST002"),
    ("student1", "John", "Doe", "student@university.edu", "student", "STU001"),
    ("student2", "Jane", "Smith", "jane.smith@university.edu", "student", "STU002"),
    ("student3", "Alex", "Wilson", "alex.wilson@university.edu", "student", "STU003"),
    ("student4", "Emily", "Davis", "emily.davis@university.edu", "student", "STU004"),
    ("student5", "David", "Miller", "david.miller@university.edu", "student", "STU005"),
]

SEED_COURSES = [
    {
        "course_id": "course1",
        "title": "Introduction to Computer Science",
        "code": "CS101",
        "description": "A comprehensive introduction to computer science fundamentals "
        "including programming, algorithms, and data structures.",
        "instructor_id": "instructor1",
        "capacity": 50,
        "duration": "16 weeks",
        "credits": 3,
        "level": "beginner",
        "category": "Computer Science",
        "end_date": "2024-05-15T00:00:00Z",
    },
    {
        "course_id": "course2",
        "title": "Data Structures and Algorithms",
        "code": "CS201",
        "description": "Advanced study of data structures and algorithmic problem-solving techniques.",
        "instructor_id": "instructor2",
        "capacity": 40,
        "duration": "16 weeks",
        "credits": 4,
        "level": "intermediate",
        "category": "Computer Science",
        "end_date": "2024-05-15T00:00:00Z",
    },
    {
        "course_id": "course3",
        "title": "Web Development Fundamentals",
        "code": "WEB101",
        "description": "Learn HTML, CSS, JavaScript and modern web development practices.",
        "instructor_id": "instructor1",
        "capacity": 45,
        "duration": "12 weeks",
        "credits": 3,
        "level": "beginner",
        "category": "Web Development",
        "end_date": "2024-04-15T00:00:00Z",
    },
    {
        "course_id": "course4",
        "title": "Database Management Systems",
        "code": "DB201",
        "description": "Comprehensive study of database design, implementation, and management.",
        "instructor_id": "instructor2",
        "capacity": 35,
        "duration": "16 weeks",
        "credits": 4,
        "level": "intermediate",
        "category": "Database",
        "end_date": "2024-05-15T00:00:00Z",
    },
    {
        "course_id": "course5",
        "title": "Machine Learning Basics",
        "code": "ML301",
        "description": "Introduction to machine learning algorithms and applications.",
        "instructor_id": "instructor1",
        "capacity": 30,
        "duration": "16 weeks",
        "credits": 4,
        "level": "advanced",
        "category": "Machine Learning",
        "end_date": "2024-05-15T00:00:00Z",
    },
]

# (id, student, course, status, progress, grade, score, updated_at)
SEED_ENROLLMENTS = [
    ("enrollment1", "student1", "course1", "active", 75, "A", 92, "2024-03-01T00:00:00Z"),
    ("enrollment2", "student1", "course2", "active", 60, None, None, "2024-03-01T00:00:00Z"),
    ("enrollment3", "student2", "course1", "active", 80, "A-", 88, "2024-03-01T00:00:00Z"),
    ("enrollment4", "student2", "course3", "completed", 100, "A+", 96, "2024-04-15T00:00:00Z"),
    ("enrollment5", "student3", "course2", "active", 45, None, None, "2024-03-01T00:00:00Z"),
]

# (id, course, title, description, due date, max points, creator, created_at)
SEED_ASSIGNMENTS = [
    ("assignment1", "course1", "Programming Assignment 1",
     "Implement basic data structures in Python",
     "2024-03-15T23:59:59Z", 100, "instructor1", "2024-02-01T00:00:00Z"),
    ("assignment2", "course2", "Algorithm Analysis",
     "Analyze time complexity of given algorithms",
     "2024-03-20T23:59:59Z", 150, "instructor2", "2024-02-05T00:00:00Z"),
    ("assignment3", "course3", "HTML/CSS Portfolio",
     "Create a personal portfolio website using HTML and CSS",
     "2024-03-10T23:59:59Z", 200, "instructor1", "2024-02-01T00:00:00Z"),
    ("assignment4", "course4", "Database Design Project",
     "Design and implement a normalized database schema",
     "2024-03-25T23:59:59Z", 250, "instructor2", "2024-02-10T00:00:00Z"),
    ("assignment5", "course5", "Linear Regression Implementation",
     "Implement linear regression from scratch",
     "2024-03-30T23:59:59Z", 300, "instructor1", "2024-02-15T00:00:00Z"),
]

# (id, course, title, description, type, file name, original name, size, uploader, created_at)
SEED_MATERIALS = [
    ("material1", "course1", "Introduction to Programming Concepts",
     "Comprehensive guide to programming fundamentals", "pdf",
     "intro_programming.pdf", "Introduction to Programming Concepts.pdf",
     2048576, "instructor1", "2024-01-20T00:00:00Z"),
    ("material2", "course2", "Data Structures Overview",
     "Visual guide to common data structures", "video",
     "data_structures_overview.mp4", "Data Structures Overview.mp4",
     52428800, "instructor2", "2024-01-25T00:00:00Z"),
    ("material3", "course3", "HTML Best Practices",
     "Guidelines for writing clean HTML code", "docx",
     "html_best_practices.docx", "HTML Best Practices.docx",
     1048576, "instructor1", "2024-01-30T00:00:00Z"),
    ("material4", "course4", "Database Design Patterns",
     "Common patterns in database design", "pdf",
     "db_design_patterns.pdf", "Database Design Patterns.pdf",
     3145728, "instructor2", "2024-02-01T00:00:00Z"),
]

# (id, student, course, ca score, final exam score, updated_at)
SEED_RESULTS = [
    ("result1", "student1", "course1", 88, 96, "2024-05-15T00:00:00Z"),
    ("result2", "student2", "course3", 94, 98, "2024-04-15T00:00:00Z"),
    ("result3", "student1", "course2", 85, None, "2024-03-01T00:00:00Z"),
]


def load_seed_data(db: Session) -> None:
    """Insert the demo records into an empty store.

    Args:
        db: SQLAlchemy Session.
    """
    users = {}
    for index, (user_id, first, last, email, role, identifier) in enumerate(SEED_USERS):
        users[user_id] = UserModel(
            user_id=user_id,
            first_name=first,
            last_name=last,
            email=email,
            phone=f"+123456789{index}",
            role=role,
            is_active=True,
            student_id=identifier if role == "student" else None,
            instructor_id=identifier if role == "instructor" else None,
            created_at=SEED_CREATED_AT,
            updated_at=SEED_CREATED_AT,
        )
    db.add_all(users.values())

    courses = {}
    for data in SEED_COURSES:
        instructor = users[data["instructor_id"]]
        courses[data["course_id"]] = CourseModel(
            **data,
            instructor=instructor_snapshot(instructor),
            enrolled=0,
            status="active",
            start_date="2024-01-15T00:00:00Z",
            created_at=SEED_CREATED_AT,
            updated_at=SEED_CREATED_AT,
        )
    db.add_all(courses.values())

    for enrollment_id, student_id, course_id, status, progress, grade, score, updated_at in SEED_ENROLLMENTS:
        course = courses[course_id]
        db.add(
            EnrollmentModel(
                enrollment_id=enrollment_id,
                student_id=student_id,
                course_id=course_id,
                student=student_snapshot(users[student_id]),
                course=course_snapshot(course),
                status=status,
                progress=progress,
                enrollment_date="2024-01-15T00:00:00Z",
                grade=grade,
                score=score,
                created_at="2024-01-15T00:00:00Z",
                updated_at=updated_at,
            )
        )
        if status != "dropped":
            course.enrolled += 1

    for assignment_id, course_id, title, description, due_date, max_points, creator, created_at in SEED_ASSIGNMENTS:
        db.add(
            AssignmentModel(
                assignment_id=assignment_id,
                course_id=course_id,
                course=course_snapshot(courses[course_id]),
                title=title,
                description=description,
                due_date=due_date,
                max_points=max_points,
                status="active",
                created_by=creator_snapshot(users[creator]),
                created_at=created_at,
                updated_at=created_at,
            )
        )

    for (material_id, course_id, title, description, file_type, file_name,
         original_name, size, uploader, created_at) in SEED_MATERIALS:
        db.add(
            MaterialModel(
                material_id=material_id,
                course_id=course_id,
                course=course_snapshot(courses[course_id]),
                title=title,
                description=description,
                file_type=file_type,
                file_name=file_name,
                original_name=original_name,
                mime_type=mimetypes.guess_type(file_name)[0],
                size=size,
                file_url=f"{UPLOAD_URL_PREFIX}/{file_name}",
                uploaded_by=creator_snapshot(users[uploader]),
                created_at=created_at,
                updated_at=created_at,
            )
        )

    for result_id, student_id, course_id, ca_score, final_exam_score, updated_at in SEED_RESULTS:
        percentage, grade, status = None, None, "pending"
        if ca_score is not None and final_exam_score is not None:
            percentage, grade, status = compute_result(ca_score, final_exam_score)
        db.add(
            ResultModel(
                result_id=result_id,
                student_id=student_id,
                course_id=course_id,
                student=result_student_snapshot(users[student_id]),
                course=course_snapshot(courses[course_id]),
                ca_score=ca_score,
                final_exam_score=final_exam_score,
                final_percentage=percentage,
                final_grade=grade,
                status=status,
                created_at="2024-01-15T00:00:00Z",
                updated_at=updated_at,
            )
        )

    db.commit()
    logger.info(
        "Seeded %d users, %d courses, %d enrollments",
        len(users),
        len(courses),
        len(SEED_ENROLLMENTS),
    )
