"""
Activity Hub - Test Configuration and Fixtures
"""
import itertools
import os
from datetime import date, datetime
from typing import Optional

import pytest

# Set testing environment before the app reads its settings
os.environ["DEBUG"] = "true"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key-for-testing"

from activity_hub.errors import ConflictError, NotFound
from activity_hub.models.activity import Activity, ActivityCreate, ActivityStatus
from activity_hub.models.category import Category, CategoryGroup
from activity_hub.models.portfolio import Portfolio
from activity_hub.models.user import Profile
from activity_hub.services.portfolio import PortfolioAggregator
from activity_hub.services.store import ActivityStore
from activity_hub.services.workflow import ReviewWorkflow

NOW = datetime(2026, 10, 19, 12, 0, 0)


class InMemoryStore(ActivityStore):
    """Dict-backed ActivityStore; hands out copies so callers cannot mutate state."""

    def __init__(self, categories=(), profiles=()):
        self.activities: dict[str, Activity] = {}
        self.categories: dict[str, Category] = {c.id: c for c in categories}
        self.portfolios: dict[str, Portfolio] = {}
        self.profiles: list[Profile] = list(profiles)
        self.portfolio_writes = 0
        self._ids = itertools.count(1)

    @staticmethod
    def _matches(a: Activity, status, category_id) -> bool:
        if status is not None and a.status != status:
            return False
        if category_id and a.category_id != category_id:
            return False
        return True

    def _newest_first(self, activities):
        return [a.model_copy(deep=True) for a in sorted(activities, key=lambda a: a.created_at, reverse=True)]

    async def get_activity(self, activity_id: str) -> Activity:
        if activity_id not in self.activities:
            raise NotFound(f"Activity {activity_id} not found")
        return self.activities[activity_id].model_copy(deep=True)

    async def list_activities_by_student(self, student_id, status=None, category_id=None):
        return self._newest_first(
            a for a in self.activities.values()
            if a.student_id == student_id and self._matches(a, status, category_id)
        )

    async def list_all_activities(self, status=None, category_id=None):
        return self._newest_first(a for a in self.activities.values() if self._matches(a, status, category_id))

    async def insert_activity(self, activity: Activity) -> Activity:
        stored = activity.model_copy(update={"id": f"act-{next(self._ids)}"}, deep=True)
        self.activities[stored.id] = stored
        return stored.model_copy(deep=True)

    async def update_activity(self, activity_id, patch, expected_version=None):
        current = self.activities.get(activity_id)
        if current is None:
            raise NotFound(f"Activity {activity_id} not found")
        if expected_version is not None and current.version != expected_version:
            raise ConflictError(f"Activity {activity_id} was modified concurrently; reload and retry")
        updated = current.model_copy(update={**patch, "version": current.version + 1}, deep=True)
        self.activities[activity_id] = updated
        return updated.model_copy(deep=True)

    async def get_category(self, category_id: str) -> Category:
        if category_id not in self.categories:
            raise NotFound(f"Category {category_id} not found")
        return self.categories[category_id]

    async def list_categories(self) -> list[Category]:
        return list(self.categories.values())

    async def get_portfolio(self, student_id: str) -> Optional[Portfolio]:
        portfolio = self.portfolios.get(student_id)
        return portfolio.model_copy(deep=True) if portfolio else None

    async def upsert_portfolio(self, portfolio: Portfolio) -> None:
        self.portfolio_writes += 1
        self.portfolios[portfolio.student_id] = portfolio.model_copy(deep=True)

    async def list_student_profiles(self) -> list[Profile]:
        return list(self.profiles)


CATEGORIES = [
    Category(id="cat-academic", name="Academic Excellence", points_multiplier=1.5, group=CategoryGroup.ACADEMIC),
    Category(id="cat-leadership", name="Leadership", points_multiplier=1.25, group=CategoryGroup.LEADERSHIP),
    Category(id="cat-community", name="Community Service", points_multiplier=1.0, group=CategoryGroup.COMMUNITY),
    Category(id="cat-sports", name="Sports & Recreation", points_multiplier=1.0, group=CategoryGroup.SPORTS),
    Category(id="cat-cultural", name="Cultural Activities", points_multiplier=1.0, group=CategoryGroup.CULTURAL),
    Category(id="cat-technical", name="Technical Skills", points_multiplier=2.0, group=CategoryGroup.TECHNICAL),
    Category(
        id="cat-startup", name="Entrepreneurship", points_multiplier=1.0, group=CategoryGroup.ENTREPRENEURSHIP
    ),
]

PROFILES = [
    Profile(id="stu-1", full_name="Asha Rao", department="Computer Science"),
    Profile(id="stu-2", full_name="Ben Okafor", department="Mechanical"),
    Profile(id="stu-3", full_name="Chen Li", department="Computer Science"),
]


def make_activity(
    student_id: str = "stu-1",
    category_id: str = "cat-academic",
    status: ActivityStatus = ActivityStatus.APPROVED,
    points_awarded: Optional[int] = 10,
    activity_date: date = date(2026, 10, 1),
    **extra,
) -> Activity:
    """Build an Activity directly, bypassing the workflow, for analytics inputs."""
    fields = {
        "id": extra.pop("id", None),
        "student_id": student_id,
        "category_id": category_id,
        "title": "Hackathon",
        "description": "Built a thing",
        "activity_date": activity_date,
        "points_claimed": extra.pop("points_claimed", 10),
        "status": status,
        "points_awarded": points_awarded if status == ActivityStatus.APPROVED else None,
        "rejection_reason": "needs proof"
        if status in (ActivityStatus.REJECTED, ActivityStatus.REVISION_REQUIRED)
        else None,
    }
    fields.update(extra)
    return Activity(**fields)


def make_draft(**overrides) -> ActivityCreate:
    fields = {
        "category_id": "cat-academic",
        "title": "Science Fair",
        "description": "Presented a solar tracker",
        "activity_date": date(2026, 10, 1),
        "points_claimed": 15,
        "evidence_urls": ["https://example.edu/certificate.pdf"],
    }
    fields.update(overrides)
    return ActivityCreate(**fields)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore(categories=CATEGORIES, profiles=PROFILES)


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def aggregator(store, clock) -> PortfolioAggregator:
    return PortfolioAggregator(store, clock=clock)


@pytest.fixture
def workflow(store, aggregator, clock) -> ReviewWorkflow:
    return ReviewWorkflow(store, aggregator=aggregator, clock=clock)
