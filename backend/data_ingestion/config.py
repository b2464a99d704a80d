from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class IngestionConfig:
    """
    Configuration for the catalogue ingestion pipeline.
    """

    raw_data_dir: Path = Path("backend/data/raw")
    processed_data_dir: Path = Path("backend/data/processed")
    dishes_filename: str = "dishes.json"
    categories_filename: str = "categories.json"
    processed_filename: str = "dishes.csv"

    @property
    def dishes_path(self) -> Path:
        return self.raw_data_dir / self.dishes_filename

    @property
    def categories_path(self) -> Path:
        return self.raw_data_dir / self.categories_filename

    @property
    def processed_path(self) -> Path:
        return self.processed_data_dir / self.processed_filename


DEFAULT_INGESTION_CONFIG = IngestionConfig()
