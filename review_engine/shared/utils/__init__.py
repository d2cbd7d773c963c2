"""Shared utilities: UTC datetime helpers and ID generators."""

from review_engine.shared.utils.datetime import ensure_utc, utc_now
from review_engine.shared.utils.generators import generate_cuid

__all__ = ["ensure_utc", "generate_cuid", "utc_now"]
