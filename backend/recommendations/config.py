from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "processed"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


@dataclass(frozen=True)
class RecommendationConfig:
    default_limit: int = field(default_factory=lambda: _env_int("RECS_DEFAULT_LIMIT", 8))
    similar_limit: int = field(default_factory=lambda: _env_int("RECS_SIMILAR_LIMIT", 4))
    trending_limit: int = field(default_factory=lambda: _env_int("RECS_TRENDING_LIMIT", 8))
    trending_window_days: int = field(
        default_factory=lambda: _env_int("RECS_TRENDING_WINDOW_DAYS", 7)
    )
    new_limit: int = field(default_factory=lambda: _env_int("RECS_NEW_LIMIT", 6))
    history_limit: int = field(default_factory=lambda: _env_int("RECS_HISTORY_LIMIT", 12))
    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("RECS_DATA_DIR", str(_DEFAULT_DATA_DIR)))
    )

    @property
    def dishes_path(self) -> Path:
        return self.data_dir / "dishes.csv"

    @property
    def orders_path(self) -> Path:
        return self.data_dir / "orders.csv"

    @property
    def favorites_path(self) -> Path:
        return self.data_dir / "favorites.csv"

    @property
    def profiles_path(self) -> Path:
        return self.data_dir / "profiles.csv"


DEFAULT_RECOMMENDATION_CONFIG = RecommendationConfig()
