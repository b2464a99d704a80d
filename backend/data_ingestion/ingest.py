from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from ..catalogue.adapter import CANONICAL_COLUMNS, dish_to_row, normalize_dish_record
from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig

logger = logging.getLogger(__name__)


def _load_category_map(path: Path) -> dict[str, str]:
    """Map category id -> slug from the raw categories table, if present."""
    if not path.is_file():
        return {}
    categories = pd.read_json(path, dtype={"id": str})
    if categories.empty:
        return {}
    slug_col = "slug" if "slug" in categories.columns else "name"
    return {
        str(row["id"]): str(row[slug_col]).strip().lower()
        for row in categories.to_dict(orient="records")
    }


def run_ingestion(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> Path:
    """
    Execute the catalogue ingestion pipeline.

    Steps:
    - Read the raw dishes and categories export.
    - Map raw fields into the canonical Dish schema.
    - Persist cleaned data as CSV for the catalogue accessor.
    """

    config.processed_data_dir.mkdir(parents=True, exist_ok=True)

    raw = pd.read_json(config.dishes_path, dtype={"id": str, "category_id": str})
    category_map = _load_category_map(config.categories_path)

    rows = []
    for record in raw.to_dict(orient="records"):
        try:
            rows.append(dish_to_row(normalize_dish_record(record, category_map)))
        except (ValueError, ValidationError):
            logger.warning("Dropping raw dish %r", record.get("id"), exc_info=True)

    canonical = pd.DataFrame(rows, columns=CANONICAL_COLUMNS)

    output_path = config.processed_path
    canonical.to_csv(output_path, index=False)
    logger.info("Wrote %d of %d dishes to %s", len(canonical), len(raw), output_path)
    return output_path


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    path = run_ingestion()
    print(f"Ingestion complete. Processed data saved to: {path}")
