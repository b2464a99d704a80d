from __future__ import annotations

import logging
import os
import time
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events, record_event
from .auth.dependencies import get_current_user, require_admin, require_user
from .auth.users import authenticate
from .catalogue.data_store import get_catalogue, get_dish
from .errors import DataAccessError
from .history.store import get_delivered_line_items, get_user_history
from .recommendations.config import DEFAULT_RECOMMENDATION_CONFIG as CONFIG
from .recommendations.history_picks import history_picks
from .recommendations.models import (
    Dish,
    DishListResponse,
    HistoryPicksResponse,
    LoginRequest,
    SimilarDishesResponse,
    SuggestionsResponse,
    UserHistory,
)
from .recommendations.scoring import personalized_suggestions
from .recommendations.similarity import similar_dishes
from .recommendations.trending import new_arrivals, trending_dishes

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

app = FastAPI(title="Dish Recommendation API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "storefront-secret-change-in-production"),
)


def _catalogue() -> list[Dish]:
    try:
        return get_catalogue()
    except DataAccessError as exc:
        logger.error("Catalogue unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Catalogue unavailable") from exc


def _history(user: dict | None) -> UserHistory | None:
    if not user or not user.get("user_id"):
        return None
    try:
        return get_user_history(user["user_id"])
    except DataAccessError as exc:
        logger.error("Order history unavailable for %s: %s", user["user_id"], exc)
        raise HTTPException(status_code=503, detail="Order history unavailable") from exc


def _record(kind: str, start_time: float, dishes: list[Dish], **data: Any) -> None:
    record_event(kind, {
        "results_returned": len(dishes),
        "dish_ids": [d.id for d in dishes],
        "response_time_ms": round((time.time() - start_time) * 1000, 1),
        **data,
    })


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    dishes = _catalogue()
    categories = sorted({d.category for d in dishes if d.category})
    tags = sorted({t for d in dishes for t in d.dietary_tags})
    return {"categories": categories, "dietary_tags": tags, "dish_count": len(dishes)}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Recommendation endpoints ─────────────────────────────────────────────


@app.get("/recommendations/for-you", response_model=SuggestionsResponse)
def for_you(
    limit: int = Query(default=CONFIG.default_limit, ge=1, le=50),
    user: dict | None = Depends(get_current_user),
) -> SuggestionsResponse:
    start_time = time.time()

    catalogue = _catalogue()
    history = _history(user)
    result = personalized_suggestions(catalogue, history, limit)

    _record(
        "for_you",
        start_time,
        result.suggestions,
        user=history.user_id if history else None,
        personalized=result.has_personalized_suggestions,
        backfilled=result.backfilled,
    )
    return SuggestionsResponse(
        suggestions=result.suggestions,
        has_personalized_suggestions=result.has_personalized_suggestions,
        backfilled=result.backfilled,
        limit=limit,
    )


@app.get("/recommendations/history", response_model=HistoryPicksResponse)
def order_history_picks(
    limit: int = Query(default=CONFIG.history_limit, ge=1, le=50),
    user: dict = Depends(require_user),
) -> HistoryPicksResponse:
    start_time = time.time()

    picks = history_picks(_catalogue(), _history(user), limit)

    _record("history", start_time, picks, user=user["user_id"])
    return HistoryPicksResponse(recommendations=picks)


@app.get("/dishes/trending", response_model=DishListResponse)
def trending(
    limit: int = Query(default=CONFIG.trending_limit, ge=1, le=50),
    window_days: int = Query(default=CONFIG.trending_window_days, ge=1, le=90),
) -> DishListResponse:
    start_time = time.time()

    catalogue = _catalogue()
    try:
        line_items = get_delivered_line_items()
    except DataAccessError as exc:
        logger.error("Order history unavailable for trending: %s", exc)
        raise HTTPException(status_code=503, detail="Order history unavailable") from exc

    dishes = trending_dishes(catalogue, line_items, limit, window_days)

    _record("trending", start_time, dishes, window_days=window_days)
    return DishListResponse(dishes=dishes)


@app.get("/dishes/new", response_model=DishListResponse)
def new_dishes(
    limit: int = Query(default=CONFIG.new_limit, ge=1, le=50),
) -> DishListResponse:
    start_time = time.time()

    dishes = new_arrivals(_catalogue(), limit)

    _record("new", start_time, dishes)
    return DishListResponse(dishes=dishes)


@app.get("/dishes/{dish_id}/similar", response_model=SimilarDishesResponse)
def similar(
    dish_id: str,
    limit: int = Query(default=CONFIG.similar_limit, ge=1, le=50),
    same_category: bool = True,
) -> SimilarDishesResponse:
    start_time = time.time()

    catalogue = _catalogue()
    if get_dish(dish_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown dish {dish_id}")

    dishes = similar_dishes(dish_id, catalogue, limit, same_category)

    _record("similar", start_time, dishes, target=dish_id)
    return SimilarDishesResponse(dish_id=dish_id, similar=dishes)


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())
