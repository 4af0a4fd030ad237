"""RBAC: Students, Faculty, Admins."""
from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed
from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


class User(Document):
    """User document for RBAC across Student, Faculty, Admin."""

    email: Indexed(EmailStr, unique=True)
    hashed_password: str
    role: UserRole
    full_name: str
    phone: Optional[str] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # Student-specific
    student_number: Optional[str] = None
    department: Optional[str] = None

    class Settings:
        name = "users"
        use_state_management = True


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    role: UserRole = UserRole.STUDENT
    full_name: str
    phone: Optional[str] = None
    student_number: Optional[str] = None
    department: Optional[str] = None


class Profile(BaseModel):
    """Student projection used by cross-student analytics."""

    id: str
    full_name: str
    department: Optional[str] = None


class Identity(BaseModel):
    """Resolved caller; what the routers and workflow need to know about a user."""

    id: str
    role: UserRole
    full_name: str = ""
    department: Optional[str] = None
