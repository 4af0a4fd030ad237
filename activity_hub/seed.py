"""Seed default admin user if not present."""
from activity_hub.api.deps import get_password_hash
from activity_hub.config import settings
from activity_hub.models.user import User, UserRole


async def seed_admin():
    existing = await User.find_one(User.email == settings.admin_email)
    if existing:
        return
    await User(
        email=settings.admin_email,
        hashed_password=get_password_hash(settings.admin_password),
        role=UserRole.ADMIN,
        full_name=settings.admin_full_name,
    ).insert()
