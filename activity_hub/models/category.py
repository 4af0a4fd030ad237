"""Activity categories and the fixed category groups portfolios are split by."""
from enum import Enum
from typing import Optional

from beanie import Document, Indexed
from pydantic import BaseModel, Field


class CategoryGroup(str, Enum):
    """Portfolio buckets. Declaration order is the tie-break order."""

    ACADEMIC = "academic"
    LEADERSHIP = "leadership"
    COMMUNITY = "community"
    SPORTS = "sports"
    CULTURAL = "cultural"
    TECHNICAL = "technical"
    ENTREPRENEURSHIP = "entrepreneurship"


class CategoryFields(BaseModel):
    name: str
    description: str = ""
    points_multiplier: float = Field(default=1.0, gt=0)
    group: CategoryGroup


class Category(CategoryFields):
    """Category as seen by the workflow and analytics code."""

    id: Optional[str] = None


class CategoryDocument(Document, CategoryFields):
    name: Indexed(str, unique=True)

    class Settings:
        name = "activity_categories"
        use_state_management = True


class CategoryCreate(BaseModel):
    name: str
    description: str = ""
    points_multiplier: float = Field(default=1.0, gt=0)
    group: CategoryGroup
