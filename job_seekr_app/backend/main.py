from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .api import application, interview, export, health
from .models.db.database import engine, Base
from .models.db import application as application_model  # noqa: F401
from .models.db import interview as interview_model  # noqa: F401
from .utils.logging_config import setup_logging, get_logger
from .config.settings import get_settings

# Initialize settings
settings = get_settings()

# Setup logging configuration
setup_logging(
    level=settings.log_level,
    log_file=settings.log_file,
    module_levels=settings.module_log_levels,
)
logger = get_logger(__name__)

# Validate configuration on startup
missing_settings = settings.validate_required_settings()
if missing_settings:
    for setting in missing_settings:
        logger.error("Configuration error: %s", setting)
    if settings.is_production():
        raise RuntimeError("Invalid configuration for production environment")

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    docs_url="/docs" if settings.api_docs_enabled else None,
    redoc_url="/redoc" if settings.api_docs_enabled else None,
)

if settings.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Routers
app.include_router(health.router, prefix="/api", tags=["Health Check"])
app.include_router(application.router, prefix="/api/applications", tags=["Applications"])
app.include_router(interview.router, prefix="/api/interviews", tags=["Interviews"])
app.include_router(export.router, prefix="/api/export", tags=["Export"])


@app.on_event("startup")
def on_startup():
    """Initialize database tables and log application startup."""
    logger.info("Starting %s v%s...", settings.app_name, settings.app_version)
    # Model modules are imported above so their tables are registered on Base.metadata
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized successfully")


@app.get("/")
def read_root():
    return {"message": f"Welcome to the {settings.app_name} API"}
