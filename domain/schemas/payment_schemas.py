from pydantic import EmailStr, Field
from datetime import datetime
from typing import Optional

from domain.schemas.base import CamelModel


class PaymentIntentCreate(CamelModel):
    amount: float = Field(..., gt=0, description="Amount in minor currency units (cents)")
    package_name: str = Field(..., min_length=1)
    user_email: EmailStr


class PaymentIntentResponse(CamelModel):
    client_secret: str


class PaymentSave(CamelModel):
    """Payment confirmation as reported by the client after the processor succeeded.

    Fields are optional here so that ``domain.rules.validate_payment`` owns the
    missing-field check and reports every missing field at once.
    """

    user_email: Optional[str] = None
    package_name: Optional[str] = None
    payment_intent_id: Optional[str] = None
    amount: Optional[float] = None
    status: Optional[str] = None
    purchased_at: Optional[datetime] = None
