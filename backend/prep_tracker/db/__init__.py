"""Database utilities and models."""

from prep_tracker.db.base import Base
from prep_tracker.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
