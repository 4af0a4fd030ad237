"""Beanie document models and Pydantic schemas."""
from activity_hub.models.user import User, UserRole, UserCreate, Profile, Identity
from activity_hub.models.activity import (
    Activity,
    ActivityDocument,
    ActivityStatus,
    ActivityCreate,
    ActivityUpdate,
    ApprovalRequest,
    ReviewDecision,
)
from activity_hub.models.category import Category, CategoryDocument, CategoryGroup, CategoryCreate
from activity_hub.models.portfolio import Portfolio, PortfolioDocument

__all__ = [
    "User",
    "UserRole",
    "UserCreate",
    "Profile",
    "Identity",
    "Activity",
    "ActivityDocument",
    "ActivityStatus",
    "ActivityCreate",
    "ActivityUpdate",
    "ApprovalRequest",
    "ReviewDecision",
    "Category",
    "CategoryDocument",
    "CategoryGroup",
    "CategoryCreate",
    "Portfolio",
    "PortfolioDocument",
]
