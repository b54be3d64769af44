"""
Centralized configuration management for the Job Seekr application tracker.
All environment variables and configuration settings are managed here.
"""
from typing import Dict, List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache


SUPPORTED_PAGE_SIZES = ("A4", "LETTER")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings with validation and type hints."""

    # =============================================================================
    # APPLICATION SETTINGS
    # =============================================================================
    app_name: str = "Job Seekr"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    testing: bool = False

    # =============================================================================
    # DATABASE SETTINGS
    # =============================================================================
    database_url: str = "sqlite:///./job_seekr.db"
    database_echo: bool = False
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # =============================================================================
    # LOGGING SETTINGS
    # =============================================================================
    log_level: str = "INFO"
    log_file: Optional[str] = None
    # e.g. {"repositories": "DEBUG", "export": "WARNING"} or full logger names
    module_log_levels: Dict[str, str] = {}

    # =============================================================================
    # OWNER IDENTIFICATION
    # =============================================================================
    # Set by the authenticating proxy in front of the API; trusted as-is.
    owner_id_header: str = "X-Owner-Id"

    # =============================================================================
    # REPORT EXPORT SETTINGS
    # =============================================================================
    report_title: str = "Job Applications Report"
    report_page_size: str = "A4"
    report_chunk_size: int = 64 * 1024  # 64 KB per streamed chunk
    report_spool_max_bytes: int = 2 * 1024 * 1024  # spill to disk above 2 MB

    @field_validator("report_chunk_size", "report_spool_max_bytes")
    @classmethod
    def validate_positive_size(cls, v):
        if v <= 0:
            raise ValueError("Report buffer sizes must be positive")
        return v

    @field_validator("report_page_size")
    @classmethod
    def normalize_page_size(cls, v):
        return v.upper()

    # =============================================================================
    # DEVELOPMENT SETTINGS
    # =============================================================================
    api_docs_enabled: bool = True
    cors_enabled: bool = True
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:8000"]

    # =============================================================================
    # CONFIGURATION LOADING
    # =============================================================================
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.testing or self.environment.lower() == "testing"

    def get_database_url(self) -> str:
        """Get database URL with appropriate settings for environment."""
        if self.is_testing():
            return "sqlite:///:memory:"
        return self.database_url

    def validate_required_settings(self) -> List[str]:
        """Validate that all required settings are properly configured."""
        missing = []

        if self.is_production():
            if self.debug:
                missing.append("DEBUG must be False in production")

            if self.database_url.startswith("sqlite"):
                missing.append("DATABASE_URL should point to a server database in production")

        if self.log_level not in VALID_LOG_LEVELS:
            missing.append(f"Invalid LOG_LEVEL: {self.log_level}")

        for name, level in self.module_log_levels.items():
            if level.upper() not in VALID_LOG_LEVELS:
                missing.append(f"Invalid MODULE_LOG_LEVELS entry for {name}: {level}")

        if self.report_page_size not in SUPPORTED_PAGE_SIZES:
            missing.append(f"Invalid REPORT_PAGE_SIZE: {self.report_page_size}")

        if not self.owner_id_header.strip():
            missing.append("OWNER_ID_HEADER cannot be empty")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    This function is cached to avoid recreating the settings object multiple times.
    """
    return Settings()
