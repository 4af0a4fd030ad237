"""Faculty review queue and decisions: approve, reject, request revision."""
from typing import Optional

from fastapi import APIRouter

from activity_hub.api.activities import serialize_activities
from activity_hub.api.deps import FacultyOrAdmin, Store, Workflow
from activity_hub.models.activity import ActivityStatus, ApprovalRequest, ReviewDecision
from activity_hub.services.analytics import status_counts

router = APIRouter()


@router.get("/queue")
async def review_queue(
    store: Store,
    reviewer: FacultyOrAdmin,
    status: Optional[ActivityStatus] = ActivityStatus.PENDING,
    category_id: Optional[str] = None,
):
    activities = await store.list_all_activities(status=status, category_id=category_id)
    profiles = {p.id: p for p in await store.list_student_profiles()}
    rows = await serialize_activities(store, activities)
    for row in rows:
        profile = profiles.get(row["student_id"])
        row["student"] = {
            "full_name": profile.full_name if profile else "Unknown",
            "department": (profile.department if profile else None) or "Unknown",
        }
    return rows


@router.get("/stats")
async def review_stats(store: Store, reviewer: FacultyOrAdmin):
    return status_counts(await store.list_all_activities())


@router.post("/{activity_id}/approve")
async def approve_activity(
    activity_id: str,
    workflow: Workflow,
    reviewer: FacultyOrAdmin,
    data: Optional[ApprovalRequest] = None,
):
    points = data.points_to_award if data else None
    activity = await workflow.approve(activity_id, reviewer.id, points_to_award=points)
    return (await serialize_activities(workflow.store, [activity]))[0]


@router.post("/{activity_id}/reject")
async def reject_activity(activity_id: str, data: ReviewDecision, workflow: Workflow, reviewer: FacultyOrAdmin):
    activity = await workflow.reject(activity_id, reviewer.id, data.reason)
    return (await serialize_activities(workflow.store, [activity]))[0]


@router.post("/{activity_id}/request-revision")
async def request_revision(
    activity_id: str,
    data: ReviewDecision,
    workflow: Workflow,
    reviewer: FacultyOrAdmin,
):
    activity = await workflow.request_revision(activity_id, reviewer.id, data.reason)
    return (await serialize_activities(workflow.store, [activity]))[0]
