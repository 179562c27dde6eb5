from pydantic import EmailStr, Field
from typing import Optional

from domain.enums import Tier
from domain.schemas.base import CamelModel


class UserUpsert(CamelModel):
    """Sent by the client after every login/registration."""

    email: EmailStr
    display_name: Optional[str] = None
    photo_url: Optional[str] = Field(None, alias="photoURL")


class BadgeUpdate(CamelModel):
    badge: Tier


class UserProfileResponse(CamelModel):
    name: str = ""
    image: str = ""
    email: str
    badge: Tier = Tier.BRONZE


class AdminProfileResponse(CamelModel):
    name: str = ""
    image: str = ""
    email: str
    meals_added_count: int = 0
