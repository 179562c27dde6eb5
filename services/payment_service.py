from typing import Any, Dict, List, Mapping
import logging

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from adapters.mongo_adapter import MongoStore
from adapters.payment_adapter import StripeGateway
from app.exceptions import ConflictError
from domain.enums import Tier
from domain.rules import coerce_tier, tier_for_package, validate_payment
from repositories import PaymentRepository, UserRepository
from services.common import require_admin, require_user, utcnow

logger = logging.getLogger("hostelmeals.payments")


class PaymentService:
    """Membership purchases and the badge upgrades they grant"""

    @staticmethod
    def create_payment_intent(
        gateway: StripeGateway, amount: float, package_name: str, user_email: str
    ) -> str:
        """Start a purchase with the payment processor. Returns the client secret."""
        tier = tier_for_package(package_name)
        secret = gateway.create_payment_intent(
            int(round(amount)),
            {"packageName": tier.value, "userEmail": user_email},
        )
        logger.info(f"payment_intent_started email={user_email} package={tier.value}")
        return secret

    @staticmethod
    def save_payment(store: MongoStore, payment: Mapping[str, Any]) -> Tier:
        """
        Record a completed payment and grant the purchased badge.

        The payment is written first with ``tierApplied=False`` and flagged once
        the badge is updated, so a crash in between is visible to
        replay_pending rather than silently lost.

        Returns:
            The user's badge after the payment (never lower than before)

        Raises:
            InvalidPaymentError: missing fields or unknown package
            NotFoundError: no such user
            ConflictError: the payment intent was already recorded
        """
        tier = validate_payment(payment)
        email = payment["userEmail"]
        require_user(store, email)

        now = utcnow()
        doc = {
            "userEmail": email,
            "packageName": payment["packageName"],
            "paymentIntentId": payment["paymentIntentId"],
            "amount": payment["amount"],
            "status": payment["status"],
            "purchasedAt": payment["purchasedAt"],
            "badge": tier.value,
            "tierApplied": False,
            "recordedAt": now,
        }
        try:
            payment_id = PaymentRepository(store.payments).insert(doc)
        except DuplicateKeyError:
            raise ConflictError(
                "Payment already recorded",
                details={"paymentIntentId": payment["paymentIntentId"]},
            )
        logger.info(f"payment_recorded payment_id={payment_id} email={email} package={tier.value}")
        return PaymentService._apply_tier(store, payment_id, email, tier)

    @staticmethod
    def _apply_tier(store: MongoStore, payment_id: ObjectId, email: str, tier: Tier) -> Tier:
        users = UserRepository(store.users)
        upgraded = users.upgrade_badge(email, tier)
        PaymentRepository(store.payments).mark_applied(payment_id, utcnow())
        user = users.get_by_email(email) or {}
        badge = coerce_tier(user.get("badge"))
        logger.info(
            f"payment_tier_applied payment_id={payment_id} email={email} "
            f"purchased={tier.value} badge={badge.value} upgraded={upgraded}"
        )
        return badge

    @staticmethod
    def replay_pending(store: MongoStore) -> int:
        """Apply the badge for every payment recorded without it. Returns how many were repaired."""
        repaired = 0
        for payment in PaymentRepository(store.payments).pending_tier():
            logger.warning(
                f"payment_tier_missing payment_id={payment['_id']} email={payment.get('userEmail')}"
            )
            PaymentService._apply_tier(
                store, payment["_id"], payment["userEmail"], coerce_tier(payment.get("badge"))
            )
            repaired += 1
        return repaired

    @staticmethod
    def reconcile_payments(store: MongoStore, acting_email: str) -> int:
        require_admin(store, acting_email, "reconcile payments")
        repaired = PaymentService.replay_pending(store)
        logger.info(f"payments_reconciled repaired={repaired} by={acting_email}")
        return repaired

    @staticmethod
    def get_history(store: MongoStore, user_email: str) -> List[Dict[str, Any]]:
        return PaymentRepository(store.payments).history(user_email)
