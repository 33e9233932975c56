from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.exceptions import register_exception_handlers
from app.startup import configure_startup_logging, run_startup_checks

# ========== Feedback ==========
from modules.feedback.routers.feedback_router import router as feedback_router
from modules.feedback.routers.admin_feedback_router import router as admin_feedback_router

# ========== Notifications ==========
from modules.notifications.routers.notifications_router import router as notifications_router

# ========== Business accounts ==========
from modules.businesses.routers.admin_users_router import router as admin_users_router

configure_startup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate configuration and create missing tables before serving"""
    run_startup_checks()
    yield


app = FastAPI(
    title="QR Feedback - Intake & Notifications API",
    description="""
    Anonymous customer feedback collected through per-business QR codes.

    ## Features

    * **Feedback intake** - Public submission with abuse control, sentiment and critical keyword detection
    * **Notifications** - Owner alerts for critical keywords, rating trends, moderation and account events
    * **Moderation** - Admin replies, soft deletion and restore
    * **Broadcasts** - Manual notifications to one owner, a list of owners or everyone

    ## Authentication

    Owner and admin endpoints require a JWT bearer token. Feedback submission
    and public statistics are anonymous.
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(feedback_router)
app.include_router(admin_feedback_router)
app.include_router(notifications_router)
app.include_router(admin_users_router)


@app.get("/")
def read_root():
    return {"message": "Feedback backend is running"}
