"""
Payment Repository - immutable purchase records plus the tier outbox flag
"""

from datetime import datetime
from typing import List

from bson import ObjectId
from pymongo.collection import Collection

from repositories.base import BaseRepository


class PaymentRepository(BaseRepository):
    """Repository for payments.

    A payment is inserted with ``tierApplied=False`` and flipped to True once
    the user's badge reflects it; unflipped payments are the reconciliation
    backlog.
    """

    def __init__(self, collection: Collection):
        super().__init__(collection)

    def mark_applied(self, payment_id: ObjectId, now: datetime) -> bool:
        result = self.collection.update_one(
            {"_id": payment_id, "tierApplied": False},
            {"$set": {"tierApplied": True, "tierAppliedAt": now}},
        )
        return result.modified_count > 0

    def pending_tier(self) -> List[dict]:
        """Payments recorded without their badge change, oldest first"""
        return self.find_page({"tierApplied": False}, sort=[("recordedAt", 1)])

    def history(self, user_email: str) -> List[dict]:
        return self.find_page({"userEmail": user_email}, sort=[("purchasedAt", -1)])
