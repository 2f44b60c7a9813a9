"""Shared SQLAlchemy models registry for the pacing database.

Currently includes the snapshot tables written by ``award_pacing``.
"""

from .pacing import (
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

__all__ = [
    "Base",
    "PacingAlert",
    "PacingBreakdown",
    "PacingInactiveStreak",
    "PacingMissingPeriod",
    "PacingPeriod",
    "PacingProjection",
    "PacingSnapshot",
    "PacingTarget",
]
