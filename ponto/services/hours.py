from datetime import datetime, timedelta
from ..models import LunchType, ProcessingConfig
from .lunch_classifier import LunchDecision

NEGATIVE_WORKED = "negative worked time; floored at zero"


def lunch_deduction(decision: LunchDecision, config: ProcessingConfig) -> timedelta:
    """Time charged against the worker for the classified lunch."""
    match decision.lunch_type:
        case LunchType.NONE:
            return timedelta(0)
        case LunchType.NORMAL:
            return decision.observed
        case LunchType.EXTENDED_CAPPED:
            return config.lunch_max
        case LunchType.ARTIFICIAL:
            return config.default_lunch
        case _:
            raise ValueError(f"Unknown lunch type: {decision.lunch_type!r}")


def compute_worked(start: datetime, end: datetime, deducted: timedelta) -> tuple[timedelta, tuple]:
    worked = (end - start) - deducted
    if worked < timedelta(0):
        return timedelta(0), (NEGATIVE_WORKED,)
    return worked, ()


def to_hours(duration: timedelta) -> float:
    return duration.total_seconds() / 3600


def format_duration(duration: timedelta) -> str:
    """Render a duration as zero-padded HH:MM:SS, truncating to whole seconds."""
    total = max(0, int(duration.total_seconds()))
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
