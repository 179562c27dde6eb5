#!/usr/bin/env python3
"""
Standalone database initialization script.
Creates the indexes the API relies on (unique user email, one request per
user and meal, unique payment intent) without starting the server.
"""

import sys
import logging
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from adapters.mongo_adapter import MongoStore
from app.config import settings

logging.basicConfig(level=logging.INFO, format=settings.log_format)
logger = logging.getLogger("hostelmeals.init_db")


def main() -> int:
    store = MongoStore(
        settings.mongo_uri,
        settings.mongo_db_name,
        settings.mongo_server_selection_timeout_ms,
    )
    try:
        # connect() pings and ensures indexes
        store.connect()
    except Exception:
        logger.exception("Database initialization failed")
        return 1
    finally:
        store.close()
    logger.info(f"Database '{settings.mongo_db_name}' is ready")
    return 0


if __name__ == "__main__":
    sys.exit(main())
