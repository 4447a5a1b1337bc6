"""Dashboard routes. Every figure is recomputed per request."""

from fastapi import APIRouter, Query

from config import RECENT_ENROLLMENTS_LIMIT
from core.dependencies import DashboardManagerDep
from schemas.common import success_envelope

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/stats", summary="Headline counts")
def get_stats(dashboard_manager: DashboardManagerDep = None) -> dict:
    return success_envelope(dashboard_manager.get_stats())


@router.get("/recent-enrollments", summary="Newest enrollments")
def get_recent_enrollments(
    limit: int = Query(default=RECENT_ENROLLMENTS_LIMIT, ge=0),
    dashboard_manager: DashboardManagerDep = None,
) -> dict:
    return success_envelope(dashboard_manager.get_recent_enrollments(limit))


@router.get("/course-performance", summary="Per-course performance")
def get_course_performance(dashboard_manager: DashboardManagerDep = None) -> dict:
    return success_envelope(dashboard_manager.get_course_performance())


@router.get("/metrics", summary="Consolidated metrics")
def get_metrics(dashboard_manager: DashboardManagerDep = None) -> dict:
    return success_envelope(dashboard_manager.get_metrics(RECENT_ENROLLMENTS_LIMIT))


@router.get("/counts", summary="Material and assignment counts")
def get_counts(dashboard_manager: DashboardManagerDep = None) -> dict:
    return success_envelope(dashboard_manager.get_counts())
