"""Activity Hub - FastAPI entrypoint."""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import ServerSelectionTimeoutError

from activity_hub.config import settings
from activity_hub.db import db_shutdown, db_startup
from activity_hub.errors import ActivityHubError
from activity_hub.seed import seed_admin
from activity_hub.services.categories import ensure_default_categories
from activity_hub.api import activities, analytics, auth, categories, portfolio, reviews
from activity_hub.api.deps import require_module_permission

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await db_startup()
        await ensure_default_categories()
        await seed_admin()
    except ServerSelectionTimeoutError as e:
        logger.error(
            "MongoDB is not running. Start it with: docker compose up -d (from project root)"
        )
        raise RuntimeError(
            "MongoDB connection failed. Start MongoDB (e.g. docker compose up -d)."
        ) from e
    yield
    await db_shutdown()


app = FastAPI(
    title=settings.app_name,
    description="Student activity submissions, faculty review, portfolios and analytics",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": errors},
    )


@app.exception_handler(ActivityHubError)
async def activity_error_handler(request: Request, exc: ActivityHubError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.kind},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(categories.router, prefix="/api/categories", tags=["Categories"], dependencies=[Depends(require_module_permission("categories"))])
app.include_router(activities.router, prefix="/api/activities", tags=["Activities"], dependencies=[Depends(require_module_permission("activities"))])
app.include_router(reviews.router, prefix="/api/reviews", tags=["Reviews"], dependencies=[Depends(require_module_permission("reviews"))])
app.include_router(portfolio.router, prefix="/api/portfolio", tags=["Portfolio"], dependencies=[Depends(require_module_permission("portfolio"))])
app.include_router(analytics.router, prefix="/api/analytics", tags=["Analytics"], dependencies=[Depends(require_module_permission("analytics"))])
app.include_router(analytics.faculty_router, prefix="/api/faculty/analytics", tags=["Faculty Analytics"], dependencies=[Depends(require_module_permission("faculty_analytics"))])


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.app_name}
