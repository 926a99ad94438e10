"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request tracing), registers the exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from abg_site.core.database import init_db
from abg_site.core.logging_config import get_logger, setup_logging
from abg_site.core.monitoring import initialize_logfire

from .api.v1 import (
    applications,
    audit,
    cycles,
    emails,
    event_admin,
    events,
    forms,
    health,
    newsletter,
    newsroom,
    phases,
    portal,
    projects,
    questions,
    recruitment_events,
    site_settings,
    slots,
    team,
    users,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.site_settings import MaintenanceGuard

# Initialize logging
setup_logging(log_level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup and shutdown events for the FastAPI application.
    """
    # Startup
    try:
        logger.info(f"Starting up {constant.PROJECT_NAME} server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info(f"Shutting down {constant.PROJECT_NAME} server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    ABG Site Server API

    Backend for the student organization website: public events with attendance
    and waitlists, the newsletter, and the recruitment portal where applicants
    apply, RSVP and book chats while reviewers score and advance them. Site
    content (projects, team, newsroom, forms) and site settings, including
    maintenance mode, are managed here too.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

initialize_logfire(app)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(users.router, prefix=f"{constant.API_V1_STR}/users", tags=["users"])
app.include_router(audit.router, prefix=f"{constant.API_V1_STR}/audit", tags=["audit"])
app.include_router(cycles.router, prefix=f"{constant.API_V1_STR}/cycles", tags=["cycles"])
app.include_router(questions.router, prefix=f"{constant.API_V1_STR}/questions", tags=["questions"])
app.include_router(applications.router, prefix=f"{constant.API_V1_STR}/applications", tags=["applications"])
app.include_router(
    recruitment_events.router, prefix=f"{constant.API_V1_STR}/recruitment-events", tags=["recruitment-events"]
)
app.include_router(slots.router, prefix=f"{constant.API_V1_STR}/slots", tags=["slots"])
app.include_router(phases.router, prefix=f"{constant.API_V1_STR}/phases", tags=["phases"])
app.include_router(emails.router, prefix=f"{constant.API_V1_STR}/emails", tags=["emails"])
app.include_router(portal.router, prefix=f"{constant.API_V1_STR}/portal", tags=["portal"], dependencies=[MaintenanceGuard])
app.include_router(events.router, prefix=f"{constant.API_V1_STR}/events", tags=["events"], dependencies=[MaintenanceGuard])
app.include_router(event_admin.router, prefix=f"{constant.API_V1_STR}/admin/events", tags=["events"])
app.include_router(
    newsletter.router, prefix=f"{constant.API_V1_STR}/newsletter", tags=["newsletter"], dependencies=[MaintenanceGuard]
)

# Site content
app.include_router(
    projects.router, prefix=f"{constant.API_V1_STR}/projects", tags=["projects"], dependencies=[MaintenanceGuard]
)
app.include_router(projects.admin_router, prefix=f"{constant.API_V1_STR}/admin/projects", tags=["projects"])
app.include_router(team.router, prefix=f"{constant.API_V1_STR}/team", tags=["team"], dependencies=[MaintenanceGuard])
app.include_router(team.admin_router, prefix=f"{constant.API_V1_STR}/admin/team", tags=["team"])
app.include_router(
    newsroom.router, prefix=f"{constant.API_V1_STR}/newsroom", tags=["newsroom"], dependencies=[MaintenanceGuard]
)
app.include_router(newsroom.admin_router, prefix=f"{constant.API_V1_STR}/admin/newsroom", tags=["newsroom"])
app.include_router(forms.router, prefix=f"{constant.API_V1_STR}/forms", tags=["forms"], dependencies=[MaintenanceGuard])
app.include_router(forms.admin_router, prefix=f"{constant.API_V1_STR}/admin/forms", tags=["forms"])
app.include_router(site_settings.router, prefix=f"{constant.API_V1_STR}/settings", tags=["settings"])
app.include_router(site_settings.admin_router, prefix=f"{constant.API_V1_STR}/admin/settings", tags=["settings"])
