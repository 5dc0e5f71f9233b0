"""Hourly song numbering and the per-song hashing namespace."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

_MS_PER_HOUR = 3600 * 1000


def _epoch_ms(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def get_song_number(
    first_signup_ts: Optional[int], now: Optional[datetime] = None
) -> int:
    """Return the current song number.

    Song 1 is the UTC hour containing the first signup and the number grows by
    one every hour after that. Missing or non-positive timestamps, and a
    ``now`` earlier than the first signup, all give song 1.
    """
    if first_signup_ts is None or first_signup_ts <= 0:
        return 1
    if now is None:
        now = datetime.now(timezone.utc)
    first_hour = first_signup_ts // _MS_PER_HOUR
    current_hour = _epoch_ms(now) // _MS_PER_HOUR
    return max(1, current_hour - first_hour + 1)


def get_song_slot(form_title: str, song_number: int) -> str:
    """Build the seed string that namespaces every hashed decision of a song."""
    return f"{form_title}\0song{song_number}"
