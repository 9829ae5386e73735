import logging
import uuid
from ..models import (
    LunchType, RawRecord, ShiftCandidate, ProcessedShift, ProcessingConfig, ProcessingResult,
)
from .normalizer import normalize
from .segmenter import segment
from .lunch_classifier import classify_lunch
from .hours import lunch_deduction, compute_worked, to_hours, format_duration
from .warning_collector import WarningCollector

logger = logging.getLogger(__name__)

SHIFT_NAMESPACE = uuid.UUID('6f1c7a52-3d2b-4a8e-9c1e-2f7d0b4e5a91')


def record_id(person: str, anchor) -> str:
    """Deterministic id so reruns on the same input give identical output."""
    return str(uuid.uuid5(SHIFT_NAMESPACE, f"{person}|{anchor.isoformat()}"))


def process_records(records: list[RawRecord], config: ProcessingConfig | None = None) -> ProcessingResult:
    """Run the full pipeline: normalize, segment, classify, compute."""
    config = config or ProcessingConfig()
    normalized = normalize(records)
    shifts, sources = process_punches(normalized.by_person, config)

    logger.info(
        "Processed %d shifts for %d persons (%d rows dropped)",
        len(shifts), len(normalized.by_person), normalized.dropped,
    )
    return ProcessingResult(
        shifts=shifts,
        sources=sources,
        extras=normalized.extras,
        dropped=normalized.dropped,
    )


def process_punches(by_person: dict, config: ProcessingConfig) -> tuple[list[ProcessedShift], dict]:
    """Build shifts for every person independently.

    Returns the shifts ordered by person then start time, and the side table
    mapping each shift id to the source rows of its punches.
    """
    shifts = []
    sources = {}
    for person in sorted(by_person):
        for candidate in segment(by_person[person], config):
            shift = build_shift(candidate, config)
            shifts.append(shift)
            sources[shift.id] = tuple(p.row for p in candidate.punches)
    return shifts, sources


def build_shift(candidate: ShiftCandidate, config: ProcessingConfig) -> ProcessedShift:
    punches = candidate.punches
    start = punches[0].timestamp
    end = punches[-1].timestamp

    warnings = WarningCollector(candidate.warnings)
    decision = classify_lunch(candidate, config)
    warnings.extend(decision.warnings)

    worked, worked_warnings = compute_worked(start, end, lunch_deduction(decision, config))
    warnings.extend(worked_warnings)

    group = next((p.group for p in punches if p.group), None)

    return ProcessedShift(
        id=record_id(candidate.person, start),
        person=candidate.person,
        date=start.date(),
        start_time=start,
        lunch_start=decision.lunch_start,
        lunch_end=decision.lunch_end,
        end_time=end,
        worked_hours=to_hours(worked),
        worked_time_str=format_duration(worked),
        lunch_type=decision.lunch_type,
        warnings=warnings.as_tuple(),
        group=group,
    )


def summarize(shifts: list[ProcessedShift]) -> dict:
    """Preview statistics: record count, total hours, inserted lunches."""
    return {
        'total_records': len(shifts),
        'total_hours': round(sum(s.worked_hours for s in shifts), 2),
        'artificial_lunches': sum(1 for s in shifts if s.lunch_type == LunchType.ARTIFICIAL),
    }
