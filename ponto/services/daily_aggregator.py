import logging
from collections import defaultdict
from ..models import RawRecord, DailyWorkerRecord
from .normalizer import normalize
from .hours import format_duration
from .shift_processor import record_id

logger = logging.getLogger(__name__)


def aggregate_daily(records: list[RawRecord]) -> list[DailyWorkerRecord]:
    """Build one record per person and calendar day for daily workers.

    Arrival is the earliest punch of the day and departure the latest one.
    No lunch is deducted.
    """
    normalized = normalize(records)
    by_row = {r.row: r for r in records}

    result = []
    for person in sorted(normalized.by_person):
        by_day = defaultdict(list)
        for punch in normalized.by_person[person]:
            by_day[punch.timestamp.date()].append(punch)

        for day in sorted(by_day):
            punches = by_day[day]
            arrival = punches[0].timestamp
            departure = punches[-1].timestamp
            rows = [by_row[p.row] for p in punches if p.row in by_row]
            result.append(DailyWorkerRecord(
                id=record_id(person, day),
                name=person,
                tax_id=_first_value(r.tax_id for r in rows),
                date=day,
                arrival=arrival,
                departure=departure,
                total_time_str=format_duration(departure - arrival),
                category=_first_value(r.category for r in rows),
                group=_first_value(p.group for p in punches),
            ))

    logger.info("Aggregated %d daily records for %d persons", len(result), len(normalized.by_person))
    return result


def _first_value(values) -> str:
    for value in values:
        if value is not None and str(value).strip():
            return str(value).strip()
    return ''
