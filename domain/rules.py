"""
Membership and engagement rules.

Pure decision functions with no I/O. Repositories express the same rules as
atomic conditional updates against the store; services call both.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from app.exceptions import InvalidPaymentError
from domain.enums import Role, Tier

TIER_ORDER = (Tier.BRONZE, Tier.SILVER, Tier.GOLD, Tier.PLATINUM)
DEFAULT_TIER = Tier.BRONZE
PREMIUM_TIERS = frozenset({Tier.SILVER, Tier.GOLD, Tier.PLATINUM})

ALREADY_ENGAGED = "already_engaged"

REQUIRED_PAYMENT_FIELDS = (
    "userEmail",
    "packageName",
    "paymentIntentId",
    "amount",
    "status",
    "purchasedAt",
)


# ------------------ Access tiers ------------------
def parse_tier(value: Any) -> Optional[Tier]:
    """Return the Tier named by ``value`` or None when it names no tier."""
    if isinstance(value, Tier):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return Tier(value)
    except ValueError:
        return None


def coerce_tier(value: Any) -> Tier:
    """Stored badge to Tier. Missing or unknown badges count as the free tier."""
    return parse_tier(value) or DEFAULT_TIER


def tier_rank(tier: Any) -> int:
    return TIER_ORDER.index(coerce_tier(tier))


def tiers_at_or_above(tier: Any) -> List[str]:
    """Badge values ranked at or above ``tier``."""
    return [t.value for t in TIER_ORDER[tier_rank(tier):]]


def is_upgrade(current: Any, new: Any) -> bool:
    return tier_rank(new) > tier_rank(current)


def can_request_meal(tier: Any) -> bool:
    """Bronze is the free tier and cannot request curated meals."""
    return coerce_tier(tier) in PREMIUM_TIERS


def can_like_upcoming(tier: Any) -> bool:
    return coerce_tier(tier) in PREMIUM_TIERS


# ------------------ Engagement ------------------
@dataclass(frozen=True)
class EngagementOutcome:
    """Result of an at-most-once engagement attempt."""

    applied: bool
    reason: Optional[str] = None


def evaluate_like(liked_by: Optional[Iterable[str]], actor_email: str) -> EngagementOutcome:
    """Decide whether ``actor_email`` may like an entity whose actor set is ``liked_by``.

    The persisted equivalent is MealRepository.add_like, which applies the same
    check and the counter change as one conditional update.
    """
    if actor_email in set(liked_by or ()):
        return EngagementOutcome(applied=False, reason=ALREADY_ENGAGED)
    return EngagementOutcome(applied=True)


def can_publish(likes: Optional[int], min_likes: int) -> bool:
    """An upcoming meal becomes publishable once it has ``min_likes`` likes."""
    return (likes or 0) >= min_likes


# ------------------ Admin ------------------
def is_admin(user: Optional[Mapping[str, Any]]) -> bool:
    """Fails closed: a missing user record is never an admin."""
    if not user:
        return False
    return user.get("role") == Role.ADMIN.value


# ------------------ Payments ------------------
def tier_for_package(package_name: Optional[str]) -> Tier:
    """Map a purchased package name onto a tier, case-insensitively.

    Raises:
        InvalidPaymentError: the package does not name a known tier
    """
    label = (package_name or "").strip().capitalize()
    tier = parse_tier(label)
    if tier is None:
        raise InvalidPaymentError(
            f"Unknown package '{package_name}'",
            details={"allowed": [t.value for t in TIER_ORDER]},
        )
    return tier


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_payment(payment: Mapping[str, Any]) -> Tier:
    """Check a payment confirmation payload and return the tier it buys.

    Raises:
        InvalidPaymentError: a required field is missing, the amount is not
            positive, or the package is unknown
    """
    missing = [f for f in REQUIRED_PAYMENT_FIELDS if _is_missing(payment.get(f))]
    if missing:
        raise InvalidPaymentError("Missing payment info", details={"missing": missing})

    amount = payment["amount"]
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
        raise InvalidPaymentError("Payment amount must be positive", details={"amount": amount})

    return tier_for_package(payment["packageName"])
