"""
Catalogue ingestion package.

Responsibilities:
- Read a raw storefront export (dishes and categories tables).
- Normalize it into the canonical Dish schema through the catalogue adapter.
- Persist the processed catalogue locally for the catalogue accessor.
"""
