import logging
from collections import defaultdict
from datetime import date, datetime, timezone
from openpyxl.utils.datetime import from_excel
from ..models import RawRecord, Punch, NormalizedPunches

logger = logging.getLogger(__name__)

TIMESTAMP_FORMATS = (
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%d %H:%M',
    '%d/%m/%Y %H:%M:%S',
    '%d/%m/%Y %H:%M',
    '%d/%m/%y %H:%M',
    '%Y-%m-%dT%H:%M:%S',
)


def parse_timestamp(value) -> datetime | None:
    """Parse a raw cell value into a naive wall-clock datetime.

    Aware datetimes are converted to UTC before dropping tzinfo.
    Bare dates carry no time of day and are treated as unparsable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return None
    if isinstance(value, (int, float)):
        try:
            result = from_excel(value)
        except (ValueError, OverflowError, TypeError):
            return None
        return result if isinstance(result, datetime) else None

    text = str(value).strip()
    if not text:
        return None
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return parse_timestamp(datetime.fromisoformat(text))
    except ValueError:
        return None


def _clean_person(value) -> str:
    if value is None:
        return ''
    return str(value).strip()


def _clean_group(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize(records: list[RawRecord]) -> NormalizedPunches:
    """Group raw records by person and sort each person's punches.

    Records without a person or with an unparsable timestamp are dropped;
    they are counted but never reach segmentation.
    """
    by_person = defaultdict(list)
    extras = {}
    dropped = 0

    for record in records:
        person = _clean_person(record.person)
        timestamp = parse_timestamp(record.timestamp)
        if not person or timestamp is None:
            dropped += 1
            logger.debug("Dropping row %s: person=%r timestamp=%r", record.row, record.person, record.timestamp)
            continue
        by_person[person].append(Punch(
            person=person,
            timestamp=timestamp,
            group=_clean_group(record.group),
            row=record.row,
        ))
        if record.extra:
            extras[record.row] = dict(record.extra)

    # equal timestamps fall back to source row order
    sorted_by_person = {
        person: sorted(punches, key=lambda p: (p.timestamp, p.row))
        for person, punches in by_person.items()
    }

    if dropped:
        logger.info("Dropped %d of %d rows with missing person or timestamp", dropped, len(records))

    return NormalizedPunches(by_person=sorted_by_person, extras=extras, dropped=dropped)
