from pydantic import EmailStr, Field, field_validator
from typing import List
from datetime import datetime

from domain.schemas.base import CamelModel


class MealBase(CamelModel):
    title: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1)
    ingredients: List[str] = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0, description="Price in major currency units")
    distributor_name: str = Field(..., min_length=1)

    @field_validator("ingredients", mode="before")
    @classmethod
    def split_ingredients(cls, v):
        """The web client sends either a list or a comma separated string."""
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v


class MealCreate(MealBase):
    """Body for POST/PUT /meals. ``addedByEmail`` is the acting admin."""

    post_time: datetime
    added_by_email: EmailStr


class UpcomingMealCreate(MealBase):
    publish_date: datetime
    added_by_email: EmailStr


class PublishRequest(CamelModel):
    meal_id: str = Field(..., min_length=1)
    added_by_email: EmailStr
