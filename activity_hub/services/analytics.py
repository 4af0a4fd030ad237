"""Analytics, insights and portfolio highlights derived from activity snapshots.

Everything here is a pure function of its arguments: callers load activities,
categories, profiles and the portfolio, pass ``now`` explicitly, and get plain
dicts back ready for JSON serialization.
"""
from __future__ import annotations

from collections import Counter
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from activity_hub.models.activity import Activity, ActivityStatus
from activity_hub.models.category import Category, CategoryGroup
from activity_hub.models.portfolio import Portfolio
from activity_hub.models.user import Profile
from activity_hub.services.categories import CATEGORY_SKILLS, categories_by_id, skill_area

UNKNOWN = "Unknown"
MILESTONE_POINTS = 100
MOMENTUM_ACTIVITIES = 3
RECOMMENDATION_THRESHOLD = 20
TOP_STUDENTS = 5


def _approved(activities: Iterable[Activity]) -> list[Activity]:
    return [a for a in activities if a.status == ActivityStatus.APPROVED]


def _month_start(year: int, month: int, offset: int) -> date:
    """First day of the month ``offset`` months after ``year``/``month`` (may be negative)."""
    index = year * 12 + (month - 1) + offset
    return date(index // 12, index % 12 + 1, 1)


def _category_name(category_id: str, lookup: dict[str, Category]) -> str:
    category = lookup.get(category_id)
    return category.name if category else UNKNOWN


def _percent_change(previous: int, current: int) -> float:
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 1)


def monthly_trends(activities: Iterable[Activity], now: datetime, months: int = 6) -> list[dict]:
    """Approved activity counts and points per calendar month, oldest first.

    Always returns ``months`` buckets ending with the month of ``now``; months
    without approved activities are zero-filled.
    """
    buckets: dict[tuple[int, int], dict] = {}
    for offset in range(-(months - 1), 1):
        start = _month_start(now.year, now.month, offset)
        buckets[(start.year, start.month)] = {
            "month_label": start.strftime("%b %y"),
            "activity_count": 0,
            "points_sum": 0,
        }
    for activity in _approved(activities):
        bucket = buckets.get((activity.activity_date.year, activity.activity_date.month))
        if bucket is None:
            continue
        bucket["activity_count"] += 1
        bucket["points_sum"] += activity.points_awarded or 0
    return list(buckets.values())


def category_performance(activities: Iterable[Activity], categories: Iterable[Category]) -> list[dict]:
    lookup = categories_by_id(list(categories))
    rows: dict[str, dict] = {}
    for activity in _approved(activities):
        name = _category_name(activity.category_id, lookup)
        row = rows.setdefault(name, {"category": name, "activity_count": 0, "points_sum": 0})
        row["activity_count"] += 1
        row["points_sum"] += activity.points_awarded or 0
    for row in rows.values():
        row["average_points"] = row["points_sum"] / row["activity_count"]
    return list(rows.values())


def progress_metrics(activities: Iterable[Activity], now: datetime, months: int = 6) -> dict:
    """Headline numbers for a student's analytics page.

    Growth compares the last two trend buckets (previous month vs. current).
    """
    activities = list(activities)
    approved = _approved(activities)
    total_points = sum(a.points_awarded or 0 for a in approved)
    trends = monthly_trends(activities, now, months=max(months, 2))
    previous, current = trends[-2], trends[-1]
    return {
        "total_points": total_points,
        "total_activities": len(approved),
        "approval_rate": (len(approved) / len(activities) * 100) if activities else 0.0,
        "average_points": (total_points / len(approved)) if approved else 0.0,
        "monthly_growth": {
            "points": _percent_change(previous["points_sum"], current["points_sum"]),
            "activities": _percent_change(previous["activity_count"], current["activity_count"]),
        },
    }


def status_counts(activities: Iterable[Activity]) -> dict[str, int]:
    counts = {status.value: 0 for status in ActivityStatus}
    for activity in activities:
        counts[activity.status.value] += 1
    return counts


def generate_insights(
    activities: Iterable[Activity],
    portfolio: Optional[Portfolio],
    now: datetime,
    recent_days: int = 30,
) -> list[dict]:
    insights: list[dict] = []
    total_points = portfolio.total_points if portfolio else 0

    if total_points >= MILESTONE_POINTS:
        insights.append(
            {
                "type": "achievement",
                "title": "Milestone Reached!",
                "description": f"You've earned over {MILESTONE_POINTS} points!",
                "value": f"{total_points} pts",
                "priority": "high",
            }
        )

    cutoff = now - timedelta(days=recent_days)
    recent = [a for a in _approved(activities) if datetime.combine(a.activity_date, time.min) > cutoff]
    if len(recent) >= MOMENTUM_ACTIVITIES:
        insights.append(
            {
                "type": "trend",
                "title": "Great Momentum!",
                "description": "You've been very active recently with multiple approved activities.",
                "value": f"{len(recent)} activities",
                "priority": "medium",
            }
        )

    group_points = portfolio.group_points() if portfolio else {group: 0 for group in CategoryGroup}
    # min() keeps the first of equal values, i.e. CategoryGroup order.
    lowest = min(CategoryGroup, key=lambda group: group_points[group])
    if group_points[lowest] < RECOMMENDATION_THRESHOLD:
        insights.append(
            {
                "type": "recommendation",
                "title": "Diversify Your Activities",
                "description": (
                    f"Consider participating in more {lowest.value} activities "
                    "to build a well-rounded profile."
                ),
                "value": lowest.value,
                "priority": "medium",
            }
        )
    return insights


def generate_achievements(
    activities: Iterable[Activity],
    portfolio: Optional[Portfolio],
    now: datetime,
) -> list[dict]:
    if portfolio is None:
        return []
    achievements: list[dict] = []
    awarded_on = now.isoformat()

    if portfolio.total_points >= 100:
        achievements.append(
            {
                "title": "Century Achiever",
                "description": "Earned 100+ activity points",
                "category": "Milestone",
                "points": portfolio.total_points,
                "date": awarded_on,
                "type": "milestone",
            }
        )
    if portfolio.total_activities >= 10:
        achievements.append(
            {
                "title": "Active Participant",
                "description": "Completed 10+ activities",
                "category": "Participation",
                "points": portfolio.total_activities * 5,
                "date": awarded_on,
                "type": "participation",
            }
        )
    high_impact = [a for a in _approved(activities) if (a.points_awarded or 0) >= 50]
    if len(high_impact) >= 3:
        achievements.append(
            {
                "title": "Excellence Seeker",
                "description": "Completed 3+ high-impact activities (50+ points each)",
                "category": "Excellence",
                "points": 75,
                "date": awarded_on,
                "type": "excellence",
            }
        )
    if portfolio.leadership_points >= 50:
        achievements.append(
            {
                "title": "Leadership Champion",
                "description": "Demonstrated strong leadership skills",
                "category": "Leadership",
                "points": portfolio.leadership_points,
                "date": awarded_on,
                "type": "leadership",
            }
        )
    return achievements


def generate_skills(activities: Iterable[Activity], categories: Iterable[Category]) -> list[dict]:
    """Skill levels grow by 15 per approved activity in a mapped category, capped at 100."""
    lookup = categories_by_id(list(categories))
    skills: dict[str, dict] = {}
    for activity in _approved(activities):
        category = lookup.get(activity.category_id)
        if category is None:
            continue
        for skill in CATEGORY_SKILLS.get(category.group, []):
            entry = skills.setdefault(
                skill,
                {"name": skill, "level": 0, "category": skill_area(skill), "activities_count": 0},
            )
            entry["level"] = min(100, entry["level"] + 15)
            entry["activities_count"] += 1
    return list(skills.values())


def generate_goals(portfolio: Optional[Portfolio]) -> list[dict]:
    total_points = portfolio.total_points if portfolio else 0
    leadership_points = portfolio.leadership_points if portfolio else 0
    goals: list[dict] = []
    if total_points < 200:
        goals.append(
            {
                "id": "total-points",
                "title": "Reach 200 Points",
                "description": "Earn 200 total activity points",
                "target": 200,
                "current": total_points,
                "progress": round(total_points / 200 * 100, 1),
                "category": "Academic Progress",
            }
        )
    if leadership_points < 50:
        goals.append(
            {
                "id": "leadership",
                "title": "Leadership Development",
                "description": "Earn 50 points in leadership activities",
                "target": 50,
                "current": leadership_points,
                "progress": round(leadership_points / 50 * 100, 1),
                "category": "Leadership",
            }
        )
    return goals


def faculty_analytics(
    activities: Iterable[Activity],
    profiles: Iterable[Profile],
    categories: Iterable[Category],
) -> dict:
    """Cross-student view: departments, category distribution and top students."""
    activities = list(activities)
    approved = _approved(activities)
    profiles = list(profiles)
    profile_by_id = {p.id: p for p in profiles}
    lookup = categories_by_id(list(categories))

    departments: dict[str, dict] = {}
    for profile in profiles:
        name = profile.department or UNKNOWN
        row = departments.setdefault(name, {"department": name, "students": 0, "activities": 0, "points": 0})
        row["students"] += 1
    for activity in approved:
        profile = profile_by_id.get(activity.student_id)
        if profile is None:
            continue
        row = departments[profile.department or UNKNOWN]
        row["activities"] += 1
        row["points"] += activity.points_awarded or 0

    distribution = Counter(_category_name(a.category_id, lookup) for a in approved)

    students: dict[str, dict] = {}
    for activity in approved:
        profile = profile_by_id.get(activity.student_id)
        entry = students.setdefault(
            activity.student_id,
            {
                "student_id": activity.student_id,
                "name": profile.full_name if profile else UNKNOWN,
                "department": (profile.department if profile else None) or UNKNOWN,
                "activities": 0,
                "points": 0,
            },
        )
        entry["activities"] += 1
        entry["points"] += activity.points_awarded or 0
    # sorted() is stable: equal totals keep first-accumulated order.
    top_students = sorted(students.values(), key=lambda s: s["points"], reverse=True)[:TOP_STUDENTS]

    total_points = sum(a.points_awarded or 0 for a in approved)
    return {
        "total_students": len(profiles),
        "total_activities": len(activities),
        "approval_rate": (len(approved) / len(activities) * 100) if activities else 0.0,
        "average_points": (total_points / len(approved)) if approved else 0.0,
        "department_data": list(departments.values()),
        "category_data": [{"name": name, "value": count} for name, count in distribution.items()],
        "top_students": top_students,
    }
