from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Dish(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    price: float = Field(..., ge=0.0)
    category: str = ""
    dietary_tags: list[str] = Field(default_factory=list)
    stock: int = Field(default=0, ge=0)
    is_popular: bool = False
    description: str | None = None
    created_at: datetime | None = None

    @field_validator("price")
    @classmethod
    def _round_price(cls, value: float) -> float:
        return round(value, 2)

    @property
    def in_stock(self) -> bool:
        return self.stock > 0


class OrderLineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    dish_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(..., ge=0.0)
    completed_at: datetime
    status: str = "delivered"

    @field_validator("unit_price")
    @classmethod
    def _round_unit_price(cls, value: float) -> float:
        return round(value, 2)


class Favorite(BaseModel):
    model_config = ConfigDict(frozen=True)

    dish_id: str = Field(..., min_length=1)
    category: str = ""


class UserHistory(BaseModel):
    """Behavioral snapshot of one authenticated user."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    orders: list[OrderLineItem] = Field(default_factory=list)
    favorites: list[Favorite] = Field(default_factory=list)
    dietary_preferences: list[str] = Field(default_factory=list)


class RankedDish(Dish):
    recommendation_score: float | None = None
    recommendation_reasons: list[str] = Field(default_factory=list)


class SimilarDish(Dish):
    similarity_score: float


class Suggestions(BaseModel):
    suggestions: list[RankedDish]
    has_personalized_suggestions: bool
    # how many trailing suggestions came from the popular backfill
    backfilled: int = Field(default=0, ge=0)


# ── API responses ────────────────────────────────────────────────────────


class SuggestionsResponse(Suggestions):
    limit: int


class HistoryPicksResponse(BaseModel):
    recommendations: list[RankedDish]


class SimilarDishesResponse(BaseModel):
    dish_id: str
    similar: list[SimilarDish]


class DishListResponse(BaseModel):
    dishes: list[Dish]


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
