"""Activities: student submissions, edits and listings."""
from typing import Optional

from fastapi import APIRouter, HTTPException

from activity_hub.api.deps import Caller, StudentOnly, Store, Workflow
from activity_hub.models.activity import Activity, ActivityCreate, ActivityStatus, ActivityUpdate
from activity_hub.models.category import Category
from activity_hub.models.user import UserRole
from activity_hub.services.categories import categories_by_id
from activity_hub.services.workflow import suggested_points

router = APIRouter()

STATUS_DISPLAY: dict[ActivityStatus, dict[str, str]] = {
    ActivityStatus.PENDING: {"label": "Pending Review", "color": "yellow"},
    ActivityStatus.APPROVED: {"label": "Approved", "color": "green"},
    ActivityStatus.REJECTED: {"label": "Rejected", "color": "red"},
    ActivityStatus.REVISION_REQUIRED: {"label": "Revision Required", "color": "orange"},
}


def activity_out(a: Activity, category: Optional[Category] = None) -> dict:
    display = STATUS_DISPLAY[a.status]
    return {
        "id": a.id,
        "student_id": a.student_id,
        "category_id": a.category_id,
        "category": {
            "name": category.name if category else "Unknown",
            "points_multiplier": category.points_multiplier if category else 1.0,
        },
        "title": a.title,
        "description": a.description,
        "activity_date": a.activity_date.isoformat(),
        "duration_hours": a.duration_hours,
        "location": a.location,
        "organizer": a.organizer,
        "points_claimed": a.points_claimed,
        "points_awarded": a.points_awarded,
        "suggested_points": suggested_points(a, category) if category else a.points_claimed,
        "evidence_urls": a.evidence_urls,
        "status": a.status.value,
        "status_label": display["label"],
        "status_color": display["color"],
        "rejection_reason": a.rejection_reason,
        "approved_by": a.approved_by,
        "approved_at": a.approved_at.isoformat() if a.approved_at else None,
        "created_at": a.created_at.isoformat(),
        "is_editable": a.is_open,
    }


async def serialize_activities(store, activities: list[Activity]) -> list[dict]:
    lookup = categories_by_id(await store.list_categories())
    return [activity_out(a, lookup.get(a.category_id)) for a in activities]


@router.get("/")
async def list_activities(
    store: Store,
    caller: Caller,
    status: Optional[ActivityStatus] = None,
    category_id: Optional[str] = None,
):
    if caller.role == UserRole.STUDENT:
        activities = await store.list_activities_by_student(caller.id, status=status, category_id=category_id)
    else:
        activities = await store.list_all_activities(status=status, category_id=category_id)
    return await serialize_activities(store, activities)


@router.get("/summary")
async def activity_summary(store: Store, student: StudentOnly):
    """Counts for the student dashboard."""
    activities = await store.list_activities_by_student(student.id)
    return {
        "total": len(activities),
        "pending": sum(1 for a in activities if a.status == ActivityStatus.PENDING),
        "approved": sum(1 for a in activities if a.status == ActivityStatus.APPROVED),
        "recent": await serialize_activities(store, activities[:5]),
    }


@router.get("/{activity_id}")
async def get_activity(activity_id: str, store: Store, caller: Caller):
    activity = await store.get_activity(activity_id)
    if caller.role == UserRole.STUDENT and activity.student_id != caller.id:
        raise HTTPException(status_code=403, detail="Not authorized for this activity")
    return (await serialize_activities(store, [activity]))[0]


@router.post("/", status_code=201)
async def submit_activity(data: ActivityCreate, workflow: Workflow, student: StudentOnly):
    activity = await workflow.submit(data, student.id)
    return (await serialize_activities(workflow.store, [activity]))[0]


@router.patch("/{activity_id}")
async def edit_activity(activity_id: str, data: ActivityUpdate, workflow: Workflow, caller: Caller):
    activity = await workflow.edit(activity_id, data, caller.id)
    return (await serialize_activities(workflow.store, [activity]))[0]
