"""
Logging setup for the Job Seekr API.

One root configuration is installed at startup. Library loggers are held at
WARNING, and individual application loggers (the repositories, the export
pipeline) can be raised or lowered on their own through MODULE_LOG_LEVELS.
"""
import logging
import sys
from typing import Dict, Mapping, Optional


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LIBRARY_LOG_LEVELS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "reportlab": logging.WARNING,
}

REPOSITORY_LOGGERS = (
    "job_seekr_app.backend.services.application_tracker",
    "job_seekr_app.backend.services.interview_tracker",
)
EXPORT_LOGGERS = (
    "job_seekr_app.backend.services.report_service",
    "job_seekr_app.backend.api.export",
)

# Short names accepted in MODULE_LOG_LEVELS besides full logger names
LOGGER_GROUPS = {
    "repositories": REPOSITORY_LOGGERS,
    "export": EXPORT_LOGGERS,
}


def resolve_level(level: str) -> int:
    """Map a level name to its numeric value, falling back to INFO."""
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.INFO


def _expand_module_levels(module_levels: Mapping[str, str]) -> Dict[str, int]:
    levels = {}
    for name, level in module_levels.items():
        for logger_name in LOGGER_GROUPS.get(name, (name,)):
            levels[logger_name] = resolve_level(level)
    return levels


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    module_levels: Optional[Mapping[str, str]] = None,
) -> Dict[str, int]:
    """
    Install the root handlers and per-logger levels.

    Args:
        level: Root level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file that receives the same records as stdout
        module_levels: Logger name, or "repositories" / "export", to level name

    Returns:
        The per-logger levels that were applied, library loggers included
    """
    root_level = resolve_level(level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(root_level)

    applied = dict(LIBRARY_LOG_LEVELS)
    applied.update(_expand_module_levels(module_levels or {}))
    for name, logger_level in applied.items():
        logging.getLogger(name).setLevel(logger_level)
    return applied


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
