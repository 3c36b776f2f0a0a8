"""Sequential unlocking of track steps.

A step is unlocked when it is the first step, when the step right before it
is completed, or when it is already completed itself. The rule only guides
the learner; marking progress never consults it.
"""

from typing import Any, List, Optional, Sequence

from amc.schemas.tracks import TrackProgress


def compute_unlocked(items: Sequence[Any]) -> List[bool]:
    """Unlock flags aligned with ``items`` (anything with a ``completed`` flag)."""
    unlocked: List[bool] = []
    for index, item in enumerate(items):
        if index == 0:
            unlocked.append(True)
        else:
            unlocked.append(bool(item.completed or items[index - 1].completed))
    return unlocked


def next_item(items: Sequence[Any]) -> Optional[Any]:
    """First unlocked step that is not completed yet."""
    for item, unlocked in zip(items, compute_unlocked(items)):
        if unlocked and not item.completed:
            return item
    return None


def summarize_progress(items: Sequence[Any]) -> TrackProgress:
    total = len(items)
    completed = sum(1 for item in items if item.completed)
    upcoming = next_item(items)
    return TrackProgress(
        total=total,
        completed=completed,
        percent=round(completed * 100 / total) if total else 0,
        next_item_id=upcoming.id if upcoming is not None else None,
    )
