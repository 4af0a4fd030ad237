"""Student portfolios: point totals, achievements and skills."""
from datetime import datetime

from fastapi import APIRouter, HTTPException

from activity_hub.api.deps import Aggregator, Caller, FacultyOrAdmin, StudentOnly, Store
from activity_hub.models.activity import ActivityStatus
from activity_hub.models.portfolio import Portfolio
from activity_hub.models.user import UserRole
from activity_hub.services.analytics import generate_achievements, generate_skills

router = APIRouter()


def portfolio_out(student_id: str, p: Portfolio | None) -> dict:
    if p is None:
        p = Portfolio(student_id=student_id)
        generated_at = None
    else:
        generated_at = p.last_generated_at.isoformat()
    return {
        "student_id": student_id,
        "total_points": p.total_points,
        "total_activities": p.total_activities,
        "category_points": {group.value: points for group, points in p.group_points().items()},
        "last_generated_at": generated_at,
    }


@router.get("/me")
async def my_portfolio(store: Store, student: StudentOnly):
    return portfolio_out(student.id, await store.get_portfolio(student.id))


@router.get("/me/highlights")
async def my_highlights(store: Store, student: StudentOnly):
    """Achievements and skills derived from approved activities."""
    portfolio = await store.get_portfolio(student.id)
    approved = await store.list_activities_by_student(student.id, status=ActivityStatus.APPROVED)
    categories = await store.list_categories()
    return {
        "achievements": generate_achievements(approved, portfolio, datetime.utcnow()),
        "skills": generate_skills(approved, categories),
    }


@router.get("/{student_id}")
async def student_portfolio(student_id: str, store: Store, reviewer: FacultyOrAdmin):
    return portfolio_out(student_id, await store.get_portfolio(student_id))


@router.post("/{student_id}/recompute")
async def recompute_portfolio(student_id: str, aggregator: Aggregator, caller: Caller):
    if caller.role == UserRole.STUDENT and caller.id != student_id:
        raise HTTPException(status_code=403, detail="Not authorized for this student")
    return portfolio_out(student_id, await aggregator.recompute(student_id))
