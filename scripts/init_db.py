# scripts/init_db.py
"""
Create the point-of-sale tables and sample data.

    python -m scripts.init_db          # create missing tables, seed empty ones
    python -m scripts.init_db --reset  # drop everything first
"""

import argparse
import logging

from pos_api.config import get_settings
from pos_api.db.bootstrap import drop_schema, init_database
from pos_api.db.engine import Database

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--reset", action="store_true", help="drop all tables first")
    parser.add_argument("--no-seed", action="store_true", help="skip sample data")
    args = parser.parse_args(argv)

    settings = get_settings()
    with Database(settings.DATABASE_URL, echo=settings.SQL_ECHO) as db:
        if args.reset:
            drop_schema(db)
        init_database(db, seed=not args.no_seed)

    logger.info("DB schema created.")


if __name__ == "__main__":
    main()
