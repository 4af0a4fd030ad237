"""Submitted activities and the payloads that create, edit and review them."""
from datetime import date, datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed
from pydantic import BaseModel, Field


class ActivityStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    REVISION_REQUIRED = "revision_required"


# Statuses in which the owning student may still edit, and a reviewer may decide.
OPEN_STATUSES = frozenset({ActivityStatus.PENDING, ActivityStatus.REVISION_REQUIRED})

# Fields a student may change through an edit; everything else is owned by the workflow.
EDITABLE_FIELDS = (
    "category_id",
    "title",
    "description",
    "activity_date",
    "duration_hours",
    "location",
    "organizer",
    "points_claimed",
    "evidence_urls",
)


class ActivityFields(BaseModel):
    student_id: str
    category_id: str
    title: str
    description: str
    activity_date: date
    duration_hours: Optional[float] = None
    location: Optional[str] = None
    organizer: Optional[str] = None
    points_claimed: int
    points_awarded: Optional[int] = None
    evidence_urls: list[str] = Field(default_factory=list)
    status: ActivityStatus = ActivityStatus.PENDING
    rejection_reason: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    # Bumped by the store on every update; guarded writes compare against it.
    version: int = 0


class Activity(ActivityFields):
    """Activity record handed between the store and the workflow."""

    id: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES


class ActivityDocument(Document, ActivityFields):
    student_id: Indexed(str)

    class Settings:
        name = "activities"
        use_state_management = True
        indexes = ["status"]


class ActivityCreate(BaseModel):
    """Draft submitted by a student. Validated by the workflow, not here."""

    category_id: str = ""
    title: str = ""
    description: str = ""
    activity_date: Optional[date] = None
    duration_hours: Optional[float] = None
    location: Optional[str] = None
    organizer: Optional[str] = None
    points_claimed: int = 0
    evidence_urls: list[str] = Field(default_factory=list)


class ActivityUpdate(BaseModel):
    """All fields optional for PATCH; status and review fields are not updatable."""

    category_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    activity_date: Optional[date] = None
    duration_hours: Optional[float] = None
    location: Optional[str] = None
    organizer: Optional[str] = None
    points_claimed: Optional[int] = None
    evidence_urls: Optional[list[str]] = None


class ApprovalRequest(BaseModel):
    points_to_award: Optional[int] = None


class ReviewDecision(BaseModel):
    reason: str = ""
