"""Dashboard aggregate schemas. All of them are recomputed on every call."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from schemas.common import CamelModel


class DashboardStats(CamelModel):
    total_courses: int
    total_students: int
    total_enrollments: int
    completed_courses: int


class RecentEnrollment(CamelModel):
    id: str = Field(alias="_id")
    student: Dict[str, Any] = Field(description="Student snapshot")
    course: Dict[str, Any] = Field(description="Course snapshot")
    status: str
    created_at: str


class CoursePerformance(CamelModel):
    id: str = Field(alias="_id")
    course_title: str
    course_code: str
    total_students: int
    average_score: int
    passed_count: int
    failed_count: int
    pass_rate: int


class MetricsOverview(CamelModel):
    total_courses: int
    total_students: int
    total_instructors: int
    total_enrollments: int
    total_results: int


class MetricsEnrollments(CamelModel):
    active: int
    completed: int
    completion_rate: int


class MetricsPerformance(CamelModel):
    average_score: int
    top_course: Optional[str] = None


class RecentActivity(CamelModel):
    id: str
    student_name: str
    course_name: str
    status: str
    date: str


class DashboardMetrics(CamelModel):
    overview: MetricsOverview
    enrollments: MetricsEnrollments
    performance: MetricsPerformance
    recent_activity: List[RecentActivity]


class DashboardCounts(CamelModel):
    total_materials: int
    total_assignments: int
