"""
Application startup validation and initialization.

Checks run once before the application serves requests. Errors abort a
production start; in other environments they are logged and startup goes on.
"""

import logging
import sys
from typing import List, Tuple

from sqlalchemy import text

from core.config import DEFAULT_JWT_SECRET, settings
from core.database import engine, init_db

logger = logging.getLogger(__name__)


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_environment_config(self) -> bool:
        if settings.jwt_secret_key == DEFAULT_JWT_SECRET:
            self.warnings.append("Using development JWT_SECRET_KEY - change for production")
        if not settings.feedback_rate_limit_enabled:
            self.warnings.append(
                "Feedback rate limiting is disabled - every public submission is accepted"
            )
        return True

    def check_database_connection(self) -> bool:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except Exception as e:
            self.errors.append(f"Database connection failed: {str(e)}")
            return False

    def check_keyword_lexicon(self) -> bool:
        """The critical keyword lexicon must load; an empty one only warns"""
        from modules.feedback.services.keyword_service import get_default_lexicon

        try:
            lexicon = get_default_lexicon()
        except (OSError, ValueError) as e:
            self.errors.append(f"Critical keyword lexicon could not be loaded: {str(e)}")
            return False

        if not len(lexicon):
            self.warnings.append("Critical keyword lexicon is empty - no keyword alerts")
        return True

    def validate_all(self) -> Tuple[bool, List[str], List[str]]:
        """Run all validation checks"""
        checks = [
            ("Environment Configuration", self.check_environment_config),
            ("Database Connection", self.check_database_connection),
            ("Keyword Lexicon", self.check_keyword_lexicon),
        ]

        all_passed = True

        for check_name, check_func in checks:
            logger.info(f"Running check: {check_name}")
            try:
                if not check_func():
                    all_passed = False
            except Exception as e:
                self.errors.append(f"{check_name} check failed with error: {str(e)}")
                all_passed = False

        return all_passed, self.errors, self.warnings


def run_startup_checks() -> Tuple[bool, List[str]]:
    """Run all startup validation checks and create missing tables"""
    logger.info("Starting feedback intake backend")
    logger.info(f"Environment: {settings.environment}")

    validator = StartupValidator()
    passed, errors, warnings = validator.validate_all()

    for warning in warnings:
        logger.warning(f"Startup warning: {warning}")
    for error in errors:
        logger.error(f"Startup error: {error}")

    if not passed and settings.is_production:
        logger.error("Cannot start in production with errors!")
        sys.exit(1)
    elif not passed:
        logger.warning("Starting in development mode despite errors")
    else:
        logger.info("All startup checks passed")

    init_db()
    return passed, warnings


def configure_startup_logging():
    """Configure logging for the application"""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
