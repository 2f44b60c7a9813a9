"""pacing_db: shared database library (SQLAlchemy/Alembic).

Public exports
--------------
- ``Base`` and ``metadata`` for Alembic autogenerate/targeting
- ORM models in ``pacing_db.models.pacing`` (re-exported for convenience)
- Engine/session helpers in ``pacing_db.client``
"""

from __future__ import annotations

from .models.pacing import (
    Base,
    PacingAlert,
    PacingBreakdown,
    PacingInactiveStreak,
    PacingMissingPeriod,
    PacingPeriod,
    PacingProjection,
    PacingSnapshot,
    PacingTarget,
)

# Re-export SQLAlchemy metadata for Alembic's env.py
metadata = Base.metadata

__all__ = [
    "Base",
    "metadata",
    "PacingAlert",
    "PacingBreakdown",
    "PacingInactiveStreak",
    "PacingMissingPeriod",
    "PacingPeriod",
    "PacingProjection",
    "PacingSnapshot",
    "PacingTarget",
]
