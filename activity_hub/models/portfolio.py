"""Per-student portfolio: derived point totals, never edited directly."""
from datetime import datetime
from typing import Optional

from beanie import Document, Indexed
from pydantic import BaseModel, Field

from activity_hub.models.category import CategoryGroup


class PortfolioFields(BaseModel):
    student_id: str
    total_points: int = 0
    total_activities: int = 0
    academic_points: int = 0
    leadership_points: int = 0
    community_points: int = 0
    sports_points: int = 0
    cultural_points: int = 0
    technical_points: int = 0
    entrepreneurship_points: int = 0
    last_generated_at: datetime = Field(default_factory=datetime.utcnow)

    def group_points(self) -> dict[CategoryGroup, int]:
        """Per-group totals in CategoryGroup order."""
        return {group: getattr(self, f"{group.value}_points") for group in CategoryGroup}


class Portfolio(PortfolioFields):
    id: Optional[str] = None


class PortfolioDocument(Document, PortfolioFields):
    student_id: Indexed(str, unique=True)

    class Settings:
        name = "portfolios"
        use_state_management = True
