"""Category catalog: seeded defaults and the static lookup tables keyed by group."""
from __future__ import annotations

import logging

from activity_hub.models.category import Category, CategoryDocument, CategoryGroup

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: list[dict] = [
    {
        "name": "Academic Excellence",
        "description": "Competitions, publications, research and academic awards",
        "points_multiplier": 1.5,
        "group": CategoryGroup.ACADEMIC,
    },
    {
        "name": "Leadership",
        "description": "Leading clubs, councils, teams or events",
        "points_multiplier": 1.25,
        "group": CategoryGroup.LEADERSHIP,
    },
    {
        "name": "Community Service",
        "description": "Volunteering and social outreach",
        "points_multiplier": 1.25,
        "group": CategoryGroup.COMMUNITY,
    },
    {
        "name": "Sports & Recreation",
        "description": "Sports events, tournaments and fitness programmes",
        "points_multiplier": 1.0,
        "group": CategoryGroup.SPORTS,
    },
    {
        "name": "Cultural Activities",
        "description": "Music, dance, theatre, art and cultural festivals",
        "points_multiplier": 1.0,
        "group": CategoryGroup.CULTURAL,
    },
    {
        "name": "Technical Skills",
        "description": "Hackathons, certifications, workshops and projects",
        "points_multiplier": 1.5,
        "group": CategoryGroup.TECHNICAL,
    },
    {
        "name": "Entrepreneurship",
        "description": "Startups, business plan contests and incubation programmes",
        "points_multiplier": 2.0,
        "group": CategoryGroup.ENTREPRENEURSHIP,
    },
]

CATEGORY_SKILLS: dict[CategoryGroup, list[str]] = {
    CategoryGroup.ACADEMIC: ["Research", "Critical Thinking", "Problem Solving"],
    CategoryGroup.LEADERSHIP: ["Team Management", "Communication", "Decision Making"],
    CategoryGroup.COMMUNITY: ["Social Awareness", "Empathy", "Project Management"],
    CategoryGroup.SPORTS: ["Teamwork", "Discipline", "Physical Fitness"],
    CategoryGroup.CULTURAL: ["Creativity", "Cultural Awareness", "Artistic Expression"],
    CategoryGroup.TECHNICAL: ["Programming", "Technical Analysis", "Innovation"],
    CategoryGroup.ENTREPRENEURSHIP: ["Business Development", "Strategic Thinking", "Risk Management"],
}

# Skills not listed here fall under "analytical".
SKILL_AREAS: dict[str, str] = {
    "Programming": "technical",
    "Technical Analysis": "technical",
    "Innovation": "technical",
    "Team Management": "leadership",
    "Communication": "leadership",
    "Decision Making": "leadership",
    "Project Management": "leadership",
    "Creativity": "creative",
    "Artistic Expression": "creative",
    "Cultural Awareness": "creative",
}


def skill_area(skill: str) -> str:
    return SKILL_AREAS.get(skill, "analytical")


def categories_by_id(categories: list[Category]) -> dict[str, Category]:
    return {c.id: c for c in categories if c.id}


async def ensure_default_categories() -> None:
    """Insert any default category missing by name; existing ones are left as edited."""
    for item in DEFAULT_CATEGORIES:
        existing = await CategoryDocument.find_one(CategoryDocument.name == item["name"])
        if existing:
            continue
        await CategoryDocument(**item).insert()
        logger.info("Seeded category %s", item["name"])
