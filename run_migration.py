#!/usr/bin/env python3
"""
Script to create the organizations table
"""
import logging
import sys

from sqlalchemy import inspect

from Database.database import engine, init_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> int:
    logger.info("Connecting to database...")

    try:
        init_db(engine)
    except Exception as e:
        logger.error(f"Migration failed with error: {e}")
        return 1

    tables = inspect(engine).get_table_names()
    logger.info(f"✅ Migration completed successfully! Tables: {', '.join(tables)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
