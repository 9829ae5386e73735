from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from ..models import LunchType, ShiftCandidate, ProcessingConfig

SHORT_LUNCH = "short lunch break"
LUNCH_CAPPED = "lunch exceeds maximum, capped"

WINDOW_MARGIN = timedelta(seconds=1)


@dataclass(frozen=True)
class LunchDecision:
    lunch_type: LunchType
    lunch_start: Optional[datetime] = None
    lunch_end: Optional[datetime] = None
    warnings: tuple[str, ...] = ()

    @property
    def observed(self) -> timedelta:
        if self.lunch_start is None or self.lunch_end is None:
            return timedelta(0)
        return self.lunch_end - self.lunch_start


def classify_lunch(candidate: ShiftCandidate, config: ProcessingConfig) -> LunchDecision:
    """Decide which punch pair of a shift, if any, is the lunch break.

    Punch counts:
        1, 2     -> no lunch
        4        -> punches[1] / punches[2] are lunch out / lunch in
        3, 5+    -> irregular; a default lunch is synthesized at the midpoint
    """
    punches = candidate.punches
    n = len(punches)

    if n <= 2:
        return LunchDecision(LunchType.NONE)

    if n == 4:
        lunch_start = punches[1].timestamp
        lunch_end = punches[2].timestamp
        duration = lunch_end - lunch_start
        if duration > config.lunch_max:
            return LunchDecision(LunchType.EXTENDED_CAPPED, lunch_start, lunch_end, (LUNCH_CAPPED,))
        if duration < config.lunch_min:
            return LunchDecision(LunchType.NORMAL, lunch_start, lunch_end, (SHORT_LUNCH,))
        return LunchDecision(LunchType.NORMAL, lunch_start, lunch_end)

    lunch_start, lunch_end = artificial_window(
        punches[0].timestamp, punches[-1].timestamp, config.default_lunch,
    )
    warning = f"irregular punch count ({n}); inserted default lunch"
    return LunchDecision(LunchType.ARTIFICIAL, lunch_start, lunch_end, (warning,))


def artificial_window(start: datetime, end: datetime, length: timedelta) -> tuple[datetime, datetime]:
    """Centre a window of `length` on the midpoint of (start, end).

    The window stays at least WINDOW_MARGIN inside both ends; a shift too
    short for that gets a zero-length window at its midpoint.
    """
    midpoint = start + (end - start) / 2
    lower = start + WINDOW_MARGIN
    upper = end - WINDOW_MARGIN
    if lower >= upper:
        return midpoint, midpoint
    half = length / 2
    return max(midpoint - half, lower), min(midpoint + half, upper)
