"""Shared dependencies: JWT auth, role checks, store and workflow handles."""
from datetime import datetime, timedelta
from typing import Annotated, Optional

import bcrypt
from beanie import PydanticObjectId
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from activity_hub.config import settings
from activity_hub.models.user import Identity, User, UserRole
from activity_hub.rbac import ACTION_BY_METHOD, has_permission
from activity_hub.services.portfolio import PortfolioAggregator
from activity_hub.services.store import ActivityStore, BeanieStore
from activity_hub.services.workflow import ReviewWorkflow

security = HTTPBearer(auto_error=False)


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_access_token(subject: str, role: str) -> str:
    expire = datetime.utcnow() + timedelta(minutes=settings.jwt_access_token_expire_minutes)
    to_encode = {"sub": subject, "role": role, "exp": expire, "type": "access"}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_refresh_token(subject: str) -> str:
    expire = datetime.utcnow() + timedelta(days=settings.jwt_refresh_token_expire_days)
    to_encode = {"sub": subject, "exp": expire, "type": "refresh"}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> User:
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = credentials.credentials
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        user_id: str = payload.get("sub")
        if not user_id or payload.get("type") != "access":
            raise HTTPException(status_code=401, detail="Invalid token")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    user = await User.get(PydanticObjectId(user_id))
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")
    return user


async def get_identity(user: Annotated[User, Depends(get_current_user)]) -> Identity:
    return Identity(id=str(user.id), role=user.role, full_name=user.full_name, department=user.department)


def require_roles(*allowed: UserRole):
    allowed_values = [role.value for role in allowed]

    async def checker(identity: Annotated[Identity, Depends(get_identity)]):
        if identity.role.value not in allowed_values:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return identity

    return checker


def require_module_permission(module: str):
    async def checker(request: Request, identity: Annotated[Identity, Depends(get_identity)]):
        method = request.method.upper()
        action = ACTION_BY_METHOD.get(method)
        if not action:
            raise HTTPException(status_code=405, detail=f"Unsupported method for permission check: {method}")
        if not has_permission(identity.role.value, module, action):
            raise HTTPException(status_code=403, detail=f"Missing {module}.{action} permission")
        return identity

    return checker


def get_store() -> ActivityStore:
    return BeanieStore()


def get_aggregator(store: Annotated[ActivityStore, Depends(get_store)]) -> PortfolioAggregator:
    return PortfolioAggregator(store)


def get_workflow(
    store: Annotated[ActivityStore, Depends(get_store)],
    aggregator: Annotated[PortfolioAggregator, Depends(get_aggregator)],
) -> ReviewWorkflow:
    return ReviewWorkflow(store, aggregator=aggregator)


# Type aliases for route injection
CurrentUser = Annotated[User, Depends(get_current_user)]
Caller = Annotated[Identity, Depends(get_identity)]
StudentOnly = Annotated[Identity, Depends(require_roles(UserRole.STUDENT))]
FacultyOrAdmin = Annotated[Identity, Depends(require_roles(UserRole.FACULTY, UserRole.ADMIN))]
AdminOnly = Annotated[Identity, Depends(require_roles(UserRole.ADMIN))]
Store = Annotated[ActivityStore, Depends(get_store)]
Aggregator = Annotated[PortfolioAggregator, Depends(get_aggregator)]
Workflow = Annotated[ReviewWorkflow, Depends(get_workflow)]
