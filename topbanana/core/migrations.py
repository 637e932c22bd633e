import logging
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy import create_engine

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class MigrationRunner:
    """
    Apply Alembic migrations to one database.

    The target URL and script location are passed in explicitly; nothing is
    read from process-wide state, so several runners can coexist (e.g. in tests).
    """

    def __init__(self, database_url: str, script_location: str = "alembic"):
        location = Path(script_location)
        if not location.is_absolute():
            location = PROJECT_ROOT / location
        self.database_url = database_url
        self.script_location = str(location)

    def _config(self) -> Config:
        config = Config()
        config.set_main_option("script_location", self.script_location)
        # ConfigParser interpolation would choke on % in URL-encoded passwords
        config.set_main_option("sqlalchemy.url", self.database_url.replace("%", "%%"))
        return config

    def upgrade(self, revision: str = "head") -> None:
        logger.info(f"⬆️ Upgrading database schema to {revision}")
        command.upgrade(self._config(), revision)

    def downgrade(self, revision: str) -> None:
        logger.info(f"⬇️ Downgrading database schema to {revision}")
        command.downgrade(self._config(), revision)

    def current(self) -> Optional[str]:
        """Revision the database is at, None when no migration has run"""
        engine = create_engine(self.database_url)
        try:
            with engine.connect() as connection:
                return MigrationContext.configure(connection).get_current_revision()
        finally:
            engine.dispose()
