"""
Migration utilities for the application
"""
from pathlib import Path
from typing import Optional
from alembic.config import Config
from alembic import command
import logging

logger = logging.getLogger(__name__)

def get_alembic_config(db_url: Optional[str] = None) -> Config:
    """Get Alembic configuration"""
    alembic_ini_path = Path(__file__).parent.parent.parent / "alembic.ini"

    config = Config(str(alembic_ini_path))

    if db_url:
        config.set_main_option("sqlalchemy.url", db_url)

    return config

def run_migrations(db_url: Optional[str] = None) -> None:
    """Upgrade the database to the latest revision"""
    config = get_alembic_config(db_url)
    command.upgrade(config, "head")
    logger.info("Database migrations completed successfully")

def create_migration(message: str, autogenerate: bool = True) -> None:
    """Create a new migration"""
    config = get_alembic_config()
    command.revision(config, message=message, autogenerate=autogenerate)
    logger.info(f"Created migration: {message}")

def downgrade_migration(revision: str) -> None:
    """Downgrade to a specific revision"""
    config = get_alembic_config()
    command.downgrade(config, revision)
    logger.info(f"Downgraded to revision: {revision}")

def show_migrations() -> None:
    """Show migration history"""
    config = get_alembic_config()
    command.history(config)
