import logging
from dataclasses import replace
from ..models import RawRecord
from .normalizer import parse_timestamp

logger = logging.getLogger(__name__)


def merge_records(*streams: list[RawRecord]) -> list[RawRecord]:
    """Concatenate punch streams, dropping repeated punches.

    Two records are the same punch when person and parsed timestamp match;
    the first occurrence wins. Rows with an unparsable timestamp are kept
    as-is so the normalizer can account for them. Rows are renumbered in
    output order.
    """
    seen = set()
    merged = []
    duplicates = 0
    for stream in streams:
        for record in stream:
            timestamp = parse_timestamp(record.timestamp)
            person = str(record.person).strip() if record.person is not None else ''
            if timestamp is not None and person:
                key = (person, timestamp)
                if key in seen:
                    duplicates += 1
                    continue
                seen.add(key)
            merged.append(replace(record, row=len(merged) + 2))

    logger.info("Merged %d streams into %d rows (%d duplicates removed)", len(streams), len(merged), duplicates)
    return merged
