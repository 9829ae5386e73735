from ..models import RawRecord


def _norm(value) -> str:
    return str(value).strip().casefold() if value is not None else ''


def list_groups(records: list[RawRecord]) -> list[str]:
    """Return sorted list of unique group names present in the records."""
    groups: set[str] = set()
    for record in records:
        if record.group is not None:
            val = str(record.group).strip()
            if val:
                groups.add(val)
    return sorted(groups)


def filter_by_groups(records: list[RawRecord], groups, exclude: bool = False) -> list[RawRecord]:
    """Keep records whose group is in `groups` (or not in it, with `exclude`).

    Matching ignores case and surrounding whitespace.
    """
    wanted = {_norm(g) for g in groups if _norm(g)}
    return [r for r in records if (_norm(r.group) in wanted) != exclude]
