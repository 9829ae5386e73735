import logging
from collections import defaultdict

logger = logging.getLogger(__name__)


def _key(value) -> str:
    if value is None:
        return ''
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return ' '.join(str(value).split()).casefold()


def cross_reference(
    left: list[dict],
    right: list[dict],
    left_key: str,
    right_key: str,
    columns: list[str] | None = None,
) -> tuple[list[dict], int]:
    """Join two header-keyed tables on a shared key.

    Every left row is kept; the columns of the first right row with the same
    normalized key are added to it (all right columns except the key unless
    `columns` names a subset). Left values win on a column name clash.

    Returns the joined rows and the number of left rows without a match.
    """
    if left and left_key not in left[0]:
        raise ValueError(f"Column {left_key!r} not found in the first table")
    if right and right_key not in right[0]:
        raise ValueError(f"Column {right_key!r} not found in the second table")

    index = defaultdict(list)
    for row in right:
        key = _key(row.get(right_key))
        if key:
            index[key].append(row)

    if columns is None:
        columns = []
        for row in right:
            for col in row:
                if col != right_key and col not in columns:
                    columns.append(col)

    joined = []
    unmatched = 0
    for row in left:
        matches = index.get(_key(row.get(left_key)))
        merged = dict(row)
        if matches:
            for col in columns:
                merged.setdefault(col, matches[0].get(col))
        else:
            unmatched += 1
            for col in columns:
                merged.setdefault(col, None)
        joined.append(merged)

    logger.info("Crossed %d rows against %d reference rows (%d unmatched)", len(left), len(right), unmatched)
    return joined, unmatched
