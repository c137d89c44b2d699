"""
Cross-entity checks.

Tracking data is tied to design model activities by array position only, so
every session record list and every entry data list must be exactly as long as
the owning design model's activity list. Entity IDs must also be unique within
one document.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from DesignAwareness.errors import ErrorKind, Violation


def activity_count(design_model: Any) -> Optional[int]:
    """Number of activities in a raw design model, or None if it has no usable list."""
    if not isinstance(design_model, dict):
        return None
    activities = design_model.get("activities")
    if not isinstance(activities, list):
        return None
    return len(activities)


def check_activity_correspondence(data: Any, expected: Optional[int], path: str) -> Optional[Violation]:
    if expected is None or not isinstance(data, list):
        return None
    if len(data) != expected:
        return Violation(
            ErrorKind.REFERENTIAL,
            path,
            f"has {len(data)} element(s) but the design model has {expected} activit"
            f"{'y' if expected == 1 else 'ies'}",
        )
    return None


class IdRegistry:
    """Remembers where each entity ID was first seen in a document."""

    def __init__(self) -> None:
        self._seen: Dict[str, str] = {}

    def register(self, entity_id: str, path: str) -> Optional[Violation]:
        first = self._seen.get(entity_id)
        if first is not None:
            return Violation(ErrorKind.REFERENTIAL, path,
                             f"duplicate ID '{entity_id}' (first used at {first or '<root>'})")
        self._seen[entity_id] = path
        return None
