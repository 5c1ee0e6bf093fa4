"""In-memory grant dataset with derived classification fields."""

from src.repository.grants import DATASET_COLUMNS, GrantRepository, build_grant, grants_to_frame

__all__ = ["DATASET_COLUMNS", "GrantRepository", "build_grant", "grants_to_frame"]
