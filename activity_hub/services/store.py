"""Persistence boundary for the review workflow, portfolio and analytics code.

The core never talks to MongoDB directly: it receives an ``ActivityStore``
handle and composes explicit calls against it. ``BeanieStore`` is the
production implementation.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Optional

from beanie import PydanticObjectId, UpdateResponse

from activity_hub.errors import ConflictError, NotFound
from activity_hub.models.activity import Activity, ActivityDocument, ActivityStatus
from activity_hub.models.category import Category, CategoryDocument
from activity_hub.models.portfolio import Portfolio, PortfolioDocument
from activity_hub.models.user import Profile, User, UserRole

logger = logging.getLogger(__name__)

_DOCUMENT_ONLY_FIELDS = {"id", "revision_id"}


class ActivityStore(ABC):
    """Store operations the core depends on."""

    @abstractmethod
    async def get_activity(self, activity_id: str) -> Activity:
        """Return the activity or raise ``NotFound``."""

    @abstractmethod
    async def list_activities_by_student(
        self,
        student_id: str,
        status: Optional[ActivityStatus] = None,
        category_id: Optional[str] = None,
    ) -> list[Activity]:
        """Newest first."""

    @abstractmethod
    async def list_all_activities(
        self,
        status: Optional[ActivityStatus] = None,
        category_id: Optional[str] = None,
    ) -> list[Activity]:
        """Newest first."""

    @abstractmethod
    async def insert_activity(self, activity: Activity) -> Activity:
        ...

    @abstractmethod
    async def update_activity(
        self,
        activity_id: str,
        patch: dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> Activity:
        """Apply ``patch`` atomically and bump the activity's ``version``.

        When ``expected_version`` is given the write only lands if the stored
        version still equals it, i.e. nothing else (a reviewer decision or a
        student edit) was written since the caller's read; otherwise
        ``ConflictError`` is raised.
        """

    @abstractmethod
    async def get_category(self, category_id: str) -> Category:
        """Return the category or raise ``NotFound``."""

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        ...

    @abstractmethod
    async def get_portfolio(self, student_id: str) -> Optional[Portfolio]:
        ...

    @abstractmethod
    async def upsert_portfolio(self, portfolio: Portfolio) -> None:
        ...

    @abstractmethod
    async def list_student_profiles(self) -> list[Profile]:
        ...


def safe_object_id(value: str | None) -> PydanticObjectId | None:
    if not value:
        return None
    try:
        return PydanticObjectId(value)
    except Exception:
        return None


def _to_mongo(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    return value


def _activity_query(
    status: Optional[ActivityStatus],
    category_id: Optional[str],
) -> dict[str, Any]:
    query: dict[str, Any] = {}
    if status is not None:
        query["status"] = status.value
    if category_id:
        query["category_id"] = category_id
    return query


class BeanieStore(ActivityStore):
    """``ActivityStore`` backed by the Beanie documents registered in ``db.py``."""

    @staticmethod
    def _activity(doc: ActivityDocument) -> Activity:
        return Activity(id=str(doc.id), **doc.model_dump(exclude=_DOCUMENT_ONLY_FIELDS))

    @staticmethod
    def _category(doc: CategoryDocument) -> Category:
        return Category(id=str(doc.id), **doc.model_dump(exclude=_DOCUMENT_ONLY_FIELDS))

    @staticmethod
    def _portfolio(doc: PortfolioDocument) -> Portfolio:
        return Portfolio(id=str(doc.id), **doc.model_dump(exclude=_DOCUMENT_ONLY_FIELDS))

    async def get_activity(self, activity_id: str) -> Activity:
        oid = safe_object_id(activity_id)
        doc = await ActivityDocument.get(oid) if oid else None
        if not doc:
            raise NotFound(f"Activity {activity_id} not found")
        return self._activity(doc)

    async def list_activities_by_student(self, student_id, status=None, category_id=None):
        query = _activity_query(status, category_id)
        query["student_id"] = student_id
        docs = await ActivityDocument.find(query).sort("-created_at").to_list()
        return [self._activity(d) for d in docs]

    async def list_all_activities(self, status=None, category_id=None):
        docs = await ActivityDocument.find(_activity_query(status, category_id)).sort("-created_at").to_list()
        return [self._activity(d) for d in docs]

    async def insert_activity(self, activity: Activity) -> Activity:
        doc = ActivityDocument(**activity.model_dump(exclude={"id"}))
        await doc.insert()
        return self._activity(doc)

    async def update_activity(self, activity_id, patch, expected_version=None):
        oid = safe_object_id(activity_id)
        if not oid:
            raise NotFound(f"Activity {activity_id} not found")
        query: dict[str, Any] = {"_id": oid}
        if expected_version is not None:
            query["version"] = expected_version
        fields = {k: _to_mongo(v) for k, v in patch.items() if k != "version"}
        updated = await ActivityDocument.find_one(query).update(
            {"$set": fields, "$inc": {"version": 1}},
            response_type=UpdateResponse.NEW_DOCUMENT,
        )
        if updated is None:
            current = await ActivityDocument.get(oid)
            if not current:
                raise NotFound(f"Activity {activity_id} not found")
            logger.warning(
                "Guarded update of activity %s lost: expected version %s, found %s (%s)",
                activity_id,
                expected_version,
                current.version,
                current.status.value,
            )
            raise ConflictError(f"Activity {activity_id} was modified concurrently; reload and retry")
        return self._activity(updated)

    async def get_category(self, category_id: str) -> Category:
        oid = safe_object_id(category_id)
        doc = await CategoryDocument.get(oid) if oid else None
        if not doc:
            raise NotFound(f"Category {category_id} not found")
        return self._category(doc)

    async def list_categories(self) -> list[Category]:
        docs = await CategoryDocument.find_all().sort("name").to_list()
        return [self._category(d) for d in docs]

    async def get_portfolio(self, student_id: str) -> Optional[Portfolio]:
        doc = await PortfolioDocument.find_one(PortfolioDocument.student_id == student_id)
        return self._portfolio(doc) if doc else None

    async def upsert_portfolio(self, portfolio: Portfolio) -> None:
        data = portfolio.model_dump(exclude={"id"})
        existing = await PortfolioDocument.find_one(PortfolioDocument.student_id == portfolio.student_id)
        if not existing:
            await PortfolioDocument(**data).insert()
            return
        for field, value in data.items():
            setattr(existing, field, value)
        await existing.save()

    async def list_student_profiles(self) -> list[Profile]:
        users = await User.find(User.role == UserRole.STUDENT, User.is_active == True).to_list()
        return [Profile(id=str(u.id), full_name=u.full_name, department=u.department) for u in users]
