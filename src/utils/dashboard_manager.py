"""Dashboard aggregates, recomputed from the store on every call."""

import logging
from collections import defaultdict
from typing import Dict, List

from sqlalchemy.orm import Session

from models.assignment import AssignmentModel
from models.course import CourseModel
from models.enrollment import EnrollmentModel
from models.material import MaterialModel
from models.result import ResultModel
from models.user import UserModel
from schemas.dashboard import (
    CoursePerformance,
    DashboardCounts,
    DashboardMetrics,
    DashboardStats,
    MetricsEnrollments,
    MetricsOverview,
    MetricsPerformance,
    RecentActivity,
    RecentEnrollment,
)
from utils.converters import full_name
from utils.result_manager import round_half_up

logger = logging.getLogger(__name__)


def _percent(part: int, whole: int) -> int:
    if not whole:
        return 0
    return round_half_up(part / whole * 100)


def _mean(values: List[float]) -> int:
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


class DashboardManager:
    """Read-only aggregations over courses, enrollments and results."""

    def __init__(self, db: Session):
        self.db = db

    def _count_users(self, role: str) -> int:
        return self.db.query(UserModel).filter(UserModel.role == role).count()

    def get_stats(self) -> DashboardStats:
        return DashboardStats(
            total_courses=self.db.query(CourseModel).count(),
            total_students=self._count_users("student"),
            total_enrollments=self.db.query(EnrollmentModel).count(),
            completed_courses=(
                self.db.query(EnrollmentModel)
                .filter(EnrollmentModel.status == "completed")
                .count()
            ),
        )

    def _newest_enrollments(self, limit: int) -> List[EnrollmentModel]:
        return (
            self.db.query(EnrollmentModel)
            .order_by(EnrollmentModel.created_at.desc(), EnrollmentModel.id.desc())
            .limit(max(limit, 0))
            .all()
        )

    def get_recent_enrollments(self, limit: int = 5) -> List[RecentEnrollment]:
        """The newest enrollments, most recent first.

        Args:
            limit: Maximum number of entries.

        Returns:
            Entries carrying the student and course snapshots.
        """
        return [
            RecentEnrollment(
                id=model.enrollment_id,
                student=model.student,
                course=model.course,
                status=model.status,
                created_at=model.created_at,
            )
            for model in self._newest_enrollments(limit)
        ]

    def get_course_performance(self) -> List[CoursePerformance]:
        """Per-course enrollment and result figures.

        ``totalStudents`` counts non-dropped enrollments. Averages and pass
        figures come from results that have a final percentage.
        """
        live_counts: Dict[str, int] = defaultdict(int)
        for enrollment in (
            self.db.query(EnrollmentModel)
            .filter(EnrollmentModel.status != "dropped")
            .all()
        ):
            live_counts[enrollment.course_id] += 1

        graded: Dict[str, List[ResultModel]] = defaultdict(list)
        for result in (
            self.db.query(ResultModel)
            .filter(ResultModel.final_percentage.isnot(None))
            .order_by(ResultModel.id)
            .all()
        ):
            graded[result.course_id].append(result)

        performance = []
        for course in self.db.query(CourseModel).order_by(CourseModel.id).all():
            results = graded[course.course_id]
            passed = sum(1 for r in results if r.status == "passed")
            failed = sum(1 for r in results if r.status == "failed")
            performance.append(
                CoursePerformance(
                    id=course.course_id,
                    course_title=course.title,
                    course_code=course.code,
                    total_students=live_counts[course.course_id],
                    average_score=_mean([r.final_percentage for r in results]),
                    passed_count=passed,
                    failed_count=failed,
                    pass_rate=_percent(passed, passed + failed),
                )
            )
        return performance

    def get_metrics(self, recent_limit: int = 5) -> DashboardMetrics:
        total_enrollments = self.db.query(EnrollmentModel).count()
        active = (
            self.db.query(EnrollmentModel)
            .filter(EnrollmentModel.status == "active")
            .count()
        )
        completed = (
            self.db.query(EnrollmentModel)
            .filter(EnrollmentModel.status == "completed")
            .count()
        )

        performance = self.get_course_performance()
        scored = [p for p in performance if p.passed_count + p.failed_count > 0]
        top_course = max(scored, key=lambda p: p.average_score) if scored else None
        percentages = [
            row.final_percentage
            for row in self.db.query(ResultModel.final_percentage)
            .filter(ResultModel.final_percentage.isnot(None))
            .all()
        ]

        return DashboardMetrics(
            overview=MetricsOverview(
                total_courses=self.db.query(CourseModel).count(),
                total_students=self._count_users("student"),
                total_instructors=self._count_users("instructor"),
                total_enrollments=total_enrollments,
                total_results=self.db.query(ResultModel).count(),
            ),
            enrollments=MetricsEnrollments(
                active=active,
                completed=completed,
                completion_rate=_percent(completed, total_enrollments),
            ),
            performance=MetricsPerformance(
                average_score=_mean(percentages),
                top_course=top_course.course_title if top_course else None,
            ),
            recent_activity=[
                RecentActivity(
                    id=model.enrollment_id,
                    student_name=full_name(model.student),
                    course_name=(model.course or {}).get("title", "Unknown"),
                    status=model.status,
                    date=model.created_at,
                )
                for model in self._newest_enrollments(recent_limit)
            ],
        )

    def get_counts(self) -> DashboardCounts:
        return DashboardCounts(
            total_materials=self.db.query(MaterialModel).count(),
            total_assignments=self.db.query(AssignmentModel).count(),
        )
