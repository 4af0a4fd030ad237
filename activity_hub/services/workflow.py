"""Activity review workflow: submission, student edits and reviewer decisions.

    pending / revision_required --approve--> approved (terminal)
    pending / revision_required --reject--> rejected
    pending / revision_required --request_revision--> revision_required

Student edits are allowed from pending and revision_required and never change
the status. Every write is a compare-and-set on the activity version read at
the start of the operation, so two reviewers racing on the same activity
cannot both succeed, and a decision never lands on top of an edit it did not
see. Approval recomputes the owner's portfolio afterwards.
"""
from __future__ import annotations

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Optional

from activity_hub.errors import AuthorizationError, InvalidStateError, NotFound, ValidationError
from activity_hub.models.activity import (
    EDITABLE_FIELDS,
    Activity,
    ActivityCreate,
    ActivityStatus,
    ActivityUpdate,
)
from activity_hub.models.category import Category
from activity_hub.services.portfolio import PortfolioAggregator
from activity_hub.services.store import ActivityStore

logger = logging.getLogger(__name__)


def award_points(points: int, multiplier: float) -> int:
    """``points × multiplier`` rounded to the nearest integer, .5 upward.

    The multiplier goes through ``str`` so 1.1 is treated as 1.1, not
    1.100000000000000088817841970012523.
    """
    product = Decimal(points) * Decimal(str(multiplier))
    return int(product.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def suggested_points(activity: Activity, category: Category) -> int:
    return award_points(activity.points_claimed, category.points_multiplier)


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


def _require_positive_points(points: Optional[int]) -> int:
    if points is None or points <= 0:
        raise ValidationError("points_claimed must be a positive integer")
    return points


class ReviewWorkflow:
    def __init__(
        self,
        store: ActivityStore,
        aggregator: Optional[PortfolioAggregator] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.store = store
        self.clock = clock
        self.aggregator = aggregator or PortfolioAggregator(store, clock=clock)

    async def _resolve_category(self, category_id: Optional[str]) -> Category:
        if not category_id:
            raise ValidationError("category_id is required")
        try:
            return await self.store.get_category(category_id)
        except NotFound:
            raise ValidationError(f"Unknown category: {category_id}")

    async def _open_activity(self, activity_id: str) -> Activity:
        activity = await self.store.get_activity(activity_id)
        if not activity.is_open:
            raise InvalidStateError(
                f"Activity {activity_id} is {activity.status.value} and can no longer be changed"
            )
        return activity

    async def submit(self, draft: ActivityCreate, student_id: str) -> Activity:
        title = _require_text(draft.title, "title")
        description = _require_text(draft.description, "description")
        if draft.activity_date is None:
            raise ValidationError("activity_date is required")
        points_claimed = _require_positive_points(draft.points_claimed)
        category = await self._resolve_category(draft.category_id)

        now = self.clock()
        activity = Activity(
            student_id=student_id,
            category_id=category.id,
            title=title,
            description=description,
            activity_date=draft.activity_date,
            duration_hours=draft.duration_hours,
            location=draft.location,
            organizer=draft.organizer,
            points_claimed=points_claimed,
            evidence_urls=list(draft.evidence_urls),
            status=ActivityStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        created = await self.store.insert_activity(activity)
        logger.info("Student %s submitted activity %s", student_id, created.id)
        return created

    async def edit(self, activity_id: str, patch: ActivityUpdate, requester_id: str) -> Activity:
        activity = await self.store.get_activity(activity_id)
        if activity.student_id != requester_id:
            raise AuthorizationError("Only the owning student can edit this activity")
        if not activity.is_open:
            raise InvalidStateError(
                f"Activity {activity_id} is {activity.status.value} and can no longer be edited"
            )

        changes: dict[str, Any] = {
            field: value
            for field, value in patch.model_dump(exclude_unset=True).items()
            if field in EDITABLE_FIELDS
        }
        if "title" in changes:
            changes["title"] = _require_text(changes["title"], "title")
        if "description" in changes:
            changes["description"] = _require_text(changes["description"], "description")
        if "activity_date" in changes and changes["activity_date"] is None:
            raise ValidationError("activity_date is required")
        if "points_claimed" in changes:
            _require_positive_points(changes["points_claimed"])
        if "category_id" in changes:
            changes["category_id"] = (await self._resolve_category(changes["category_id"])).id
        if "evidence_urls" in changes and changes["evidence_urls"] is None:
            changes["evidence_urls"] = []
        changes["updated_at"] = self.clock()

        updated = await self.store.update_activity(activity_id, changes, expected_version=activity.version)
        logger.info("Student %s edited activity %s", requester_id, activity_id)
        return updated

    async def approve(
        self,
        activity_id: str,
        reviewer_id: str,
        points_to_award: Optional[int] = None,
    ) -> Activity:
        """Approve an open activity and refresh the owner's portfolio.

        Points are computed from the activity and category as read here; the
        write is guarded on that read's version, so a concurrent student edit
        or reviewer decision makes this raise ``ConflictError`` instead.

        The portfolio recompute runs after the approval is stored. A failing
        recompute is logged with the activity and student ids but does not
        undo the approval; the portfolio stays stale until the next recompute
        (e.g. ``POST /api/portfolio/{student_id}/recompute``).
        """
        activity = await self._open_activity(activity_id)
        base_points = activity.points_claimed if points_to_award is None else points_to_award
        if base_points < 0:
            raise ValidationError("points_to_award cannot be negative")
        category = await self.store.get_category(activity.category_id)

        now = self.clock()
        approved = await self.store.update_activity(
            activity_id,
            {
                "status": ActivityStatus.APPROVED,
                "points_awarded": award_points(base_points, category.points_multiplier),
                "approved_by": reviewer_id,
                "approved_at": now,
                "rejection_reason": None,
                "updated_at": now,
            },
            expected_version=activity.version,
        )
        logger.info(
            "Reviewer %s approved activity %s with %s points",
            reviewer_id,
            activity_id,
            approved.points_awarded,
        )
        try:
            await self.aggregator.recompute(approved.student_id)
        except Exception:
            logger.exception(
                "Portfolio recompute failed after approving activity %s; portfolio of student %s is stale",
                activity_id,
                approved.student_id,
            )
        return approved

    async def _close_with_reason(
        self,
        activity_id: str,
        reviewer_id: str,
        reason: Optional[str],
        status: ActivityStatus,
    ) -> Activity:
        activity = await self._open_activity(activity_id)
        reason = _require_text(reason, "reason")
        updated = await self.store.update_activity(
            activity_id,
            {
                "status": status,
                "rejection_reason": reason,
                "points_awarded": None,
                "approved_by": None,
                "approved_at": None,
                "updated_at": self.clock(),
            },
            expected_version=activity.version,
        )
        logger.info("Reviewer %s marked activity %s as %s", reviewer_id, activity_id, status.value)
        return updated

    async def reject(self, activity_id: str, reviewer_id: str, reason: Optional[str]) -> Activity:
        return await self._close_with_reason(activity_id, reviewer_id, reason, ActivityStatus.REJECTED)

    async def request_revision(self, activity_id: str, reviewer_id: str, reason: Optional[str]) -> Activity:
        return await self._close_with_reason(
            activity_id, reviewer_id, reason, ActivityStatus.REVISION_REQUIRED
        )
