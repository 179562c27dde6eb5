#!/usr/bin/env python3
"""
Repair derived state left behind by interrupted writes.

  * payments recorded without their badge upgrade are re-applied
  * meal reviewCount values are recounted from the reviews collection

Usage:
    python scripts/reconcile.py                 # payments only
    python scripts/reconcile.py --review-counts # payments and review counts
"""

import sys
import logging
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from adapters.mongo_adapter import MongoStore
from app.config import settings
from services.meal_service import MealService
from services.payment_service import PaymentService

logging.basicConfig(level=logging.INFO, format=settings.log_format)
logger = logging.getLogger("hostelmeals.reconcile")


def reconcile(review_counts: bool = False) -> int:
    store = MongoStore(
        settings.mongo_uri,
        settings.mongo_db_name,
        settings.mongo_server_selection_timeout_ms,
    )
    logger.info("Connecting to MongoDB...")
    store.connect()
    try:
        repaired = PaymentService.replay_pending(store)
        logger.info(f"payments_repaired count={repaired}")
        if review_counts:
            drifted = MealService.recount_all_review_counts(store)
            logger.info(f"review_counts_repaired count={drifted}")
    finally:
        store.close()
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Re-apply pending payment badges and optionally recount reviews"
    )
    parser.add_argument(
        "--review-counts",
        action="store_true",
        help="Also recount reviewCount for every meal",
    )
    args = parser.parse_args()
    sys.exit(reconcile(review_counts=args.review_counts))
