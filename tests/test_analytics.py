"""Analytics and insight function tests. Everything here is pure, so no store is involved."""
from datetime import date, datetime

from activity_hub.models.activity import ActivityStatus
from activity_hub.models.portfolio import Portfolio
from activity_hub.models.user import Profile
from activity_hub.services.analytics import (
    category_performance,
    faculty_analytics,
    generate_achievements,
    generate_goals,
    generate_insights,
    generate_skills,
    monthly_trends,
    progress_metrics,
    status_counts,
)
from conftest import CATEGORIES, NOW, PROFILES, make_activity


def portfolio(**points) -> Portfolio:
    fields = {f"{group}_points": value for group, value in points.items()}
    total = sum(fields.values())
    return Portfolio(student_id="stu-1", total_points=total, total_activities=len(fields), **fields)


def balanced_portfolio(**overrides) -> Portfolio:
    points = {
        "academic": 30,
        "leadership": 30,
        "community": 30,
        "sports": 30,
        "cultural": 30,
        "technical": 30,
        "entrepreneurship": 30,
    }
    points.update(overrides)
    return portfolio(**points)


# =============================================================================
# TRENDS
# =============================================================================
class TestMonthlyTrends:
    def test_zero_activities_gives_six_empty_buckets(self):
        trends = monthly_trends([], NOW)

        assert len(trends) == 6
        assert all(b["activity_count"] == 0 and b["points_sum"] == 0 for b in trends)
        assert [b["month_label"] for b in trends] == ["May 26", "Jun 26", "Jul 26", "Aug 26", "Sep 26", "Oct 26"]

    def test_window_wraps_across_years(self):
        trends = monthly_trends([], datetime(2026, 2, 10))

        assert [b["month_label"] for b in trends] == ["Sep 25", "Oct 25", "Nov 25", "Dec 25", "Jan 26", "Feb 26"]

    def test_counts_only_approved_inside_window(self):
        activities = [
            make_activity(activity_date=date(2026, 10, 2), points_awarded=10),
            make_activity(activity_date=date(2026, 10, 30), points_awarded=5),
            make_activity(activity_date=date(2026, 7, 15), points_awarded=20),
            make_activity(activity_date=date(2026, 10, 3), status=ActivityStatus.PENDING),
            make_activity(activity_date=date(2026, 4, 30), points_awarded=99),
            make_activity(activity_date=date(2025, 10, 3), points_awarded=99),
        ]

        trends = {b["month_label"]: b for b in monthly_trends(activities, NOW)}

        assert trends["Oct 26"] == {"month_label": "Oct 26", "activity_count": 2, "points_sum": 15}
        assert trends["Jul 26"]["points_sum"] == 20
        assert trends["May 26"]["activity_count"] == 0
        assert sum(b["points_sum"] for b in trends.values()) == 35

    def test_custom_month_count(self):
        assert len(monthly_trends([], NOW, months=12)) == 12


# =============================================================================
# CATEGORY PERFORMANCE AND METRICS
# =============================================================================
class TestCategoryPerformance:
    def test_groups_by_category_name_with_average(self):
        activities = [
            make_activity(category_id="cat-academic", points_awarded=10),
            make_activity(category_id="cat-academic", points_awarded=25),
            make_activity(category_id="cat-sports", points_awarded=6),
            make_activity(category_id="cat-sports", status=ActivityStatus.REJECTED),
        ]

        rows = category_performance(activities, CATEGORIES)

        assert rows == [
            {"category": "Academic Excellence", "activity_count": 2, "points_sum": 35, "average_points": 17.5},
            {"category": "Sports & Recreation", "activity_count": 1, "points_sum": 6, "average_points": 6.0},
        ]

    def test_unknown_category_is_labelled(self):
        rows = category_performance([make_activity(category_id="cat-gone")], CATEGORIES)

        assert rows[0]["category"] == "Unknown"

    def test_empty_input(self):
        assert category_performance([], CATEGORIES) == []


class TestProgressMetrics:
    def test_headline_numbers_and_growth(self):
        activities = [
            make_activity(activity_date=date(2026, 9, 5), points_awarded=10),
            make_activity(activity_date=date(2026, 10, 5), points_awarded=10),
            make_activity(activity_date=date(2026, 10, 6), points_awarded=5),
            make_activity(status=ActivityStatus.PENDING),
        ]

        metrics = progress_metrics(activities, NOW)

        assert metrics["total_points"] == 25
        assert metrics["total_activities"] == 3
        assert metrics["approval_rate"] == 75.0
        assert round(metrics["average_points"], 2) == 8.33
        assert metrics["monthly_growth"] == {"points": 50.0, "activities": 100.0}

    def test_no_activities(self):
        metrics = progress_metrics([], NOW)

        assert metrics["approval_rate"] == 0.0
        assert metrics["average_points"] == 0.0
        assert metrics["monthly_growth"] == {"points": 0.0, "activities": 0.0}

    def test_growth_from_empty_previous_month(self):
        metrics = progress_metrics([make_activity(activity_date=date(2026, 10, 1))], NOW)

        assert metrics["monthly_growth"]["points"] == 100.0

    def test_same_inputs_same_outputs(self):
        activities = [make_activity(activity_date=date(2026, 10, 1)), make_activity(activity_date=date(2026, 8, 1))]

        assert progress_metrics(activities, NOW) == progress_metrics(activities, NOW)


def test_status_counts_has_every_status():
    counts = status_counts([make_activity(), make_activity(status=ActivityStatus.PENDING)])

    assert counts == {"pending": 1, "approved": 1, "rejected": 0, "revision_required": 0}


# =============================================================================
# INSIGHTS
# =============================================================================
class TestInsights:
    def test_milestone_at_one_hundred_points(self):
        insights = generate_insights([], balanced_portfolio(), NOW)

        milestone = [i for i in insights if i["type"] == "achievement"]
        assert len(milestone) == 1
        assert milestone[0]["priority"] == "high"
        assert milestone[0]["value"] == "210 pts"

    def test_no_milestone_below_threshold(self):
        p = portfolio(academic=20, leadership=20, community=20, sports=20, cultural=19)

        insights = generate_insights([], p, NOW)

        assert not [i for i in insights if i["type"] == "achievement"]

    def test_momentum_needs_three_recent_approved(self):
        recent = [
            make_activity(activity_date=date(2026, 10, 15)),
            make_activity(activity_date=date(2026, 10, 1)),
            make_activity(activity_date=date(2026, 9, 20)),
        ]
        stale = make_activity(activity_date=date(2026, 9, 10))
        pending = make_activity(activity_date=date(2026, 10, 16), status=ActivityStatus.PENDING)

        with_three = generate_insights(recent + [stale], balanced_portfolio(), NOW)
        with_two = generate_insights(recent[:2] + [stale, pending], balanced_portfolio(), NOW)

        trend = [i for i in with_three if i["type"] == "trend"]
        assert trend and trend[0]["priority"] == "medium"
        assert trend[0]["value"] == "3 activities"
        assert not [i for i in with_two if i["type"] == "trend"]

    def test_recommendation_names_lowest_group(self):
        insights = generate_insights([], balanced_portfolio(cultural=4), NOW)

        rec = [i for i in insights if i["type"] == "recommendation"]
        assert rec[0]["value"] == "cultural"
        assert rec[0]["priority"] == "medium"

    def test_recommendation_ties_go_to_first_group(self):
        insights = generate_insights([], balanced_portfolio(leadership=5, technical=5), NOW)

        rec = [i for i in insights if i["type"] == "recommendation"]
        assert rec[0]["value"] == "leadership"

    def test_no_recommendation_when_every_group_has_twenty(self):
        insights = generate_insights([], balanced_portfolio(sports=20), NOW)

        assert not [i for i in insights if i["type"] == "recommendation"]

    def test_without_portfolio_only_academic_recommendation(self):
        insights = generate_insights([], None, NOW)

        assert [(i["type"], i["value"]) for i in insights] == [("recommendation", "academic")]


# =============================================================================
# ACHIEVEMENTS, SKILLS AND GOALS
# =============================================================================
class TestHighlights:
    def test_achievements(self):
        approved = [make_activity(points_awarded=60) for _ in range(3)]
        p = Portfolio(student_id="stu-1", total_points=180, total_activities=12, leadership_points=60)

        titles = {a["title"]: a for a in generate_achievements(approved, p, NOW)}

        assert set(titles) == {"Century Achiever", "Active Participant", "Excellence Seeker", "Leadership Champion"}
        assert titles["Active Participant"]["points"] == 60
        assert titles["Excellence Seeker"]["points"] == 75
        assert titles["Century Achiever"]["date"] == NOW.isoformat()

    def test_no_achievements_without_portfolio(self):
        assert generate_achievements([make_activity(points_awarded=80)], None, NOW) == []

    def test_skills_grow_per_activity_and_cap(self):
        technical = [make_activity(category_id="cat-technical") for _ in range(8)]
        leadership = [make_activity(category_id="cat-leadership")]
        pending = [make_activity(category_id="cat-sports", status=ActivityStatus.PENDING)]

        skills = {s["name"]: s for s in generate_skills(technical + leadership + pending, CATEGORIES)}

        assert skills["Programming"]["level"] == 100
        assert skills["Programming"]["activities_count"] == 8
        assert skills["Programming"]["category"] == "technical"
        assert skills["Communication"]["level"] == 15
        assert skills["Communication"]["category"] == "leadership"
        assert "Teamwork" not in skills

    def test_goals_track_progress(self):
        goals = {g["id"]: g for g in generate_goals(Portfolio(student_id="stu-1", total_points=50, leadership_points=10))}

        assert goals["total-points"]["progress"] == 25.0
        assert goals["leadership"]["current"] == 10

    def test_goals_drop_once_reached(self):
        assert generate_goals(Portfolio(student_id="stu-1", total_points=250, leadership_points=60)) == []


# =============================================================================
# FACULTY VIEW
# =============================================================================
class TestFacultyAnalytics:
    def test_departments_categories_and_totals(self):
        activities = [
            make_activity(student_id="stu-1", category_id="cat-academic", points_awarded=30),
            make_activity(student_id="stu-3", category_id="cat-technical", points_awarded=20),
            make_activity(student_id="stu-2", category_id="cat-academic", points_awarded=10),
            make_activity(student_id="stu-2", status=ActivityStatus.PENDING),
            make_activity(student_id="ghost", points_awarded=50),
        ]

        result = faculty_analytics(activities, PROFILES, CATEGORIES)

        assert result["total_students"] == 3
        assert result["total_activities"] == 5
        assert result["approval_rate"] == 80.0
        assert result["average_points"] == 27.5
        assert result["department_data"] == [
            {"department": "Computer Science", "students": 2, "activities": 2, "points": 50},
            {"department": "Mechanical", "students": 1, "activities": 1, "points": 10},
        ]
        assert result["category_data"] == [
            {"name": "Academic Excellence", "value": 3},
            {"name": "Technical Skills", "value": 1},
        ]

    def test_profiles_without_department_are_unknown(self):
        profiles = [Profile(id="stu-9", full_name="No Dept")]

        result = faculty_analytics([make_activity(student_id="stu-9")], profiles, CATEGORIES)

        assert result["department_data"] == [{"department": "Unknown", "students": 1, "activities": 1, "points": 10}]

    def test_top_students_sorted_desc_and_stable_on_ties(self):
        profiles = [Profile(id=f"s{i}", full_name=f"Student {i}", department="Arts") for i in range(7)]
        points = {"s0": 10, "s1": 40, "s2": 25, "s3": 40, "s4": 5, "s5": 25, "s6": 1}
        activities = [make_activity(student_id=sid, points_awarded=p) for sid, p in points.items()]

        top = faculty_analytics(activities, profiles, CATEGORIES)["top_students"]

        assert [s["student_id"] for s in top] == ["s1", "s3", "s2", "s5", "s0"]
        assert top[0] == {
            "student_id": "s1",
            "name": "Student 1",
            "department": "Arts",
            "activities": 1,
            "points": 40,
        }

    def test_empty_inputs(self):
        result = faculty_analytics([], [], CATEGORIES)

        assert result["top_students"] == []
        assert result["department_data"] == []
        assert result["approval_rate"] == 0.0
