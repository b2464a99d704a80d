"""
Catalogue accessor.

Responsibilities:
- Load the processed dish snapshot from disk.
- Normalise legacy field names into the canonical ``Dish`` schema.
- Serve read-only lookups to the ranking engines.
"""
