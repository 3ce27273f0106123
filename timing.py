"""
SongForge Studio - Timing
Generation time estimates for progress display.
"""

import math

# Roughly 1-2 seconds of wall time per second of audio, plus overhead
SECONDS_PER_AUDIO_SECOND = 1.5
OVERHEAD_SECONDS = 10


def estimate_generation_time(duration_seconds: int) -> int:
    """Estimate how long a track of the given length takes to generate."""
    return math.ceil(duration_seconds * SECONDS_PER_AUDIO_SECOND) + OVERHEAD_SECONDS
