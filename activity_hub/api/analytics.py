"""Student analytics dashboard and the faculty cross-student view."""
from datetime import datetime

from fastapi import APIRouter

from activity_hub.api.deps import FacultyOrAdmin, StudentOnly, Store
from activity_hub.config import settings
from activity_hub.services.analytics import (
    category_performance,
    faculty_analytics,
    generate_goals,
    generate_insights,
    monthly_trends,
    progress_metrics,
)

router = APIRouter()
faculty_router = APIRouter()


@router.get("/me")
async def my_analytics(store: Store, student: StudentOnly):
    now = datetime.utcnow()
    activities = await store.list_activities_by_student(student.id)
    categories = await store.list_categories()
    portfolio = await store.get_portfolio(student.id)
    return {
        "metrics": progress_metrics(activities, now, months=settings.trend_months),
        "trends": monthly_trends(activities, now, months=settings.trend_months),
        "categories": category_performance(activities, categories),
        "insights": generate_insights(activities, portfolio, now, recent_days=settings.recent_window_days),
        "goals": generate_goals(portfolio),
    }


@faculty_router.get("/")
async def overview(store: Store, reviewer: FacultyOrAdmin):
    activities = await store.list_all_activities()
    profiles = await store.list_student_profiles()
    categories = await store.list_categories()
    return faculty_analytics(activities, profiles, categories)
