"""Portfolio recomputation from a student's approved activities."""
from __future__ import annotations

import asyncio
import logging
import weakref
from datetime import datetime
from typing import Callable, Iterable

from activity_hub.models.activity import Activity, ActivityStatus
from activity_hub.models.category import Category, CategoryGroup
from activity_hub.models.portfolio import Portfolio
from activity_hub.services.categories import categories_by_id
from activity_hub.services.store import ActivityStore

logger = logging.getLogger(__name__)

# Shared by every aggregator in the process so per-request instances still serialize.
# An entry lives only while some recompute holds or waits on the lock.
_student_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()


def _lock_for(student_id: str) -> asyncio.Lock:
    lock = _student_locks.get(student_id)
    if lock is None:
        lock = asyncio.Lock()
        _student_locks[student_id] = lock
    return lock


def build_portfolio_totals(
    student_id: str,
    activities: Iterable[Activity],
    categories: Iterable[Category],
) -> dict:
    """Sum awarded points overall and per category group.

    Only approved activities owned by ``student_id`` count. Activities whose
    category is missing from the catalog are skipped so the group fields always
    add up to ``total_points``.
    """
    lookup = categories_by_id(list(categories))
    groups = {group: 0 for group in CategoryGroup}
    total_points = 0
    total_activities = 0
    for activity in activities:
        if activity.student_id != student_id or activity.status != ActivityStatus.APPROVED:
            continue
        category = lookup.get(activity.category_id)
        if category is None:
            logger.warning(
                "Approved activity %s references unknown category %s; skipped",
                activity.id,
                activity.category_id,
            )
            continue
        points = activity.points_awarded or 0
        groups[category.group] += points
        total_points += points
        total_activities += 1

    totals = {
        "student_id": student_id,
        "total_points": total_points,
        "total_activities": total_activities,
    }
    for group, points in groups.items():
        totals[f"{group.value}_points"] = points
    return totals


class PortfolioAggregator:
    """Rebuilds portfolio snapshots; one in-flight recompute per student."""

    def __init__(self, store: ActivityStore, clock: Callable[[], datetime] = datetime.utcnow):
        self.store = store
        self.clock = clock

    async def recompute(self, student_id: str) -> Portfolio:
        async with _lock_for(student_id):
            activities = await self.store.list_activities_by_student(
                student_id, status=ActivityStatus.APPROVED
            )
            categories = await self.store.list_categories()
            portfolio = Portfolio(
                **build_portfolio_totals(student_id, activities, categories),
                last_generated_at=self.clock(),
            )
            await self.store.upsert_portfolio(portfolio)
        logger.info(
            "Recomputed portfolio for student %s: %s points over %s activities",
            student_id,
            portfolio.total_points,
            portfolio.total_activities,
        )
        return portfolio
