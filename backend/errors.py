from __future__ import annotations


class DataAccessError(RuntimeError):
    """A catalogue or history snapshot could not be retrieved."""
