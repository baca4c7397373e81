"""Small display helpers for playback state."""

import math


def format_time(seconds):
    """
    Format a position as m:ss.

    Args:
        seconds: Position in seconds

    Returns:
        String like "3:07"; "0:00" for negative or non-finite input
    """
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return "0:00"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"
