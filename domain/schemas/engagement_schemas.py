from pydantic import EmailStr, Field, field_validator

from domain.schemas.base import CamelModel


def _non_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Comment cannot be empty")
    return v


class LikeRequest(CamelModel):
    user_email: EmailStr


class MealRequestCreate(CamelModel):
    meal_id: str = Field(..., min_length=1)
    user_email: EmailStr
    user_name: str = Field(..., min_length=1)


class ReviewCreate(CamelModel):
    meal_id: str = Field(..., min_length=1)
    user_email: EmailStr
    user_name: str = Field(..., min_length=1)
    comment: str

    @field_validator("comment")
    @classmethod
    def strip_comment(cls, v: str) -> str:
        return _non_blank(v)


class ReviewUpdate(CamelModel):
    comment: str

    @field_validator("comment")
    @classmethod
    def strip_comment(cls, v: str) -> str:
        return _non_blank(v)
