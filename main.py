#!/usr/bin/env python3
"""
topbanana bootstrap

Applies database migrations, checks the store is reachable and optionally
seeds the demo quizzes. Run before starting the web server.
"""

import argparse
import logging
import sys

from topbanana.core.config import settings
from topbanana.core.database import SessionLocal
from topbanana.core.exceptions import StoreError
from topbanana.core.logging_config import setup_logging
from topbanana.core.migrations import MigrationRunner
from topbanana.domain.seed_quiz import seed_quizzes
from topbanana.repositories.quiz_repository import QuizRepository

logger = logging.getLogger("topbanana.main")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--seed", action="store_true", help="create the demo quizzes")
    args = parser.parse_args(argv)

    setup_logging(settings.LOG_LEVEL)
    logger.info(f"🚀 Starting {settings.PROJECT_NAME} ({settings.ENVIRONMENT})")

    MigrationRunner(settings.DATABASE_URL, settings.MIGRATIONS_PATH).upgrade()

    repository = QuizRepository(SessionLocal)
    try:
        repository.ping()
        if args.seed:
            seed_quizzes(repository)
    except StoreError as e:
        logger.error(f"❌ {e}")
        return 1

    logger.info("✅ Database ready")
    return 0


if __name__ == "__main__":
    sys.exit(main())
