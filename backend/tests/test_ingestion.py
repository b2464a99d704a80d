import json
from pathlib import Path

import pandas as pd

from backend.catalogue.adapter import CANONICAL_COLUMNS
from backend.catalogue.data_store import load_catalogue
from backend.data_ingestion.config import IngestionConfig
from backend.data_ingestion.ingest import run_ingestion

RAW_DIR = Path(__file__).resolve().parent.parent / "data" / "raw"


def test_run_ingestion_normalizes_shipped_export(tmp_path: Path):
    """
    End-to-end test for catalogue ingestion.

    Uses a temporary output directory so we don't pollute real data directories.
    """
    cfg = IngestionConfig(raw_data_dir=RAW_DIR, processed_data_dir=tmp_path / "processed")

    output_path = run_ingestion(config=cfg)

    assert output_path.is_file(), "Processed CSV should be created"

    df = pd.read_csv(output_path)
    assert not df.empty, "Processed dataset should not be empty"
    assert list(df.columns) == CANONICAL_COLUMNS

    dishes = {d.id: d for d in load_catalogue(output_path)}
    assert dishes["d02"].category == "starters"
    assert dishes["d02"].dietary_tags == ["gluten-free"]
    assert dishes["d04"].dietary_tags == ["vegetarian", "gluten-free"]
    assert dishes["d12"].stock == 0
    assert dishes["d01"].is_popular is True


def test_run_ingestion_drops_unusable_records(tmp_path: Path):
    raw = tmp_path / "raw"
    raw.mkdir()
    (raw / "dishes.json").write_text(json.dumps([
        {"id": "x1", "name": "Soup", "price": 4.5, "category": "starters", "stock": 2},
        {"id": "x2", "name": "No price", "category": "starters", "stock": 2},
    ]))
    cfg = IngestionConfig(raw_data_dir=raw, processed_data_dir=tmp_path / "processed")

    df = pd.read_csv(run_ingestion(config=cfg))

    assert df["id"].tolist() == ["x1"]
