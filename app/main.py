from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.routes import admin_content, admin_logs, auth, content, gallery, health, media
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import setup_logging
from app.core.middleware import LatencyMonitorMiddleware, RequestIdMiddleware

# Setup logging
logger = setup_logging()

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


# =============================================================================
# OpenAPI Tags Metadata
# =============================================================================
tags_metadata = [
    {
        "name": "content",
        "description": "**Site content** - Profile, facilities, flagship programs, activities, announcements and documentation for the public pages.",
    },
    {
        "name": "gallery",
        "description": "**Documentation gallery** - Server-rendered photo and video grid with lazy media loading.",
    },
    {
        "name": "admin",
        "description": "**Admin panel** - Content editing, media library, activity log and monitoring. **Requires the admin role.**",
    },
    {
        "name": "auth",
        "description": "**Authentication** - Supabase Auth login, logout and session info.",
    },
    {
        "name": "health",
        "description": "**Health** - Service checks and the database keep-alive ping.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Storage backend: {settings.STORAGE_BACKEND}")

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
## Waqf Portal API

Backend for the waqf foundation website and its admin panel: public content,
the documentation gallery, and an audited admin editor.
    """,
    openapi_tags=tags_metadata,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Latency Monitoring (SLO Check)
app.add_middleware(LatencyMonitorMiddleware)

# Request ID Tracing
app.add_middleware(RequestIdMiddleware)

# Register global exception handlers
register_exception_handlers(app)

# Public
app.include_router(auth.router, prefix=f"{settings.API_V1_PREFIX}/auth", tags=["auth"])
app.include_router(
    content.router, prefix=f"{settings.API_V1_PREFIX}/content", tags=["content"]
)
app.include_router(gallery.router, tags=["gallery"])
app.include_router(
    health.router, prefix=f"{settings.API_V1_PREFIX}/health", tags=["health"]
)

# Admin (role-gated inside each router)
app.include_router(
    admin_content.router, prefix=f"{settings.API_V1_PREFIX}/admin/content"
)
app.include_router(admin_logs.router, prefix=f"{settings.API_V1_PREFIX}/admin/logs")
app.include_router(media.router, prefix=f"{settings.API_V1_PREFIX}/admin/media")
app.include_router(health.admin_router, prefix=f"{settings.API_V1_PREFIX}/admin")

# Local object storage is served by the app itself
if settings.STORAGE_BACKEND == "local":
    storage_root = Path(settings.STORAGE_LOCAL_PATH)
    storage_root.mkdir(parents=True, exist_ok=True)
    app.mount("/storage", StaticFiles(directory=str(storage_root)), name="storage")

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.get("/health", summary="Health check")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/", summary="API root")
async def root():
    """Root endpoint with API info"""
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": "/docs",
        "health": "/health",
        "gallery": "/dokumentasi",
    }
