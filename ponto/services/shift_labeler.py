from datetime import datetime, time
from ..models import ProcessedShift, ShiftBand

DEFAULT_BANDS = (
    ShiftBand('1st shift', time(5, 0)),
    ShiftBand('2nd shift', time(13, 0)),
    ShiftBand('3rd shift', time(21, 0)),
)


def parse_bands(value: str) -> tuple[ShiftBand, ...]:
    """Parse "label=HH:MM,label=HH:MM" into bands sorted by start time."""
    bands = []
    for item in value.split(','):
        item = item.strip()
        if not item:
            continue
        label, sep, start = item.rpartition('=')
        if not sep or not label.strip():
            raise ValueError(f"Invalid shift band: {item!r}. Use label=HH:MM")
        try:
            start_time = datetime.strptime(start.strip(), '%H:%M').time()
        except ValueError:
            raise ValueError(f"Invalid start time in shift band: {item!r}")
        bands.append(ShiftBand(label.strip(), start_time))
    if not bands:
        raise ValueError("At least one shift band is required")
    return tuple(sorted(bands, key=lambda b: b.start))


def label_for(start_time: datetime, bands=DEFAULT_BANDS) -> str:
    """Return the band whose start is the latest one not after `start_time`.

    Lower bounds are inclusive. A time before the first band belongs to the
    last band, which runs across midnight.
    """
    if not bands:
        raise ValueError("At least one shift band is required")
    ordered = sorted(bands, key=lambda b: b.start)
    moment = start_time.time()
    label = ordered[-1].label
    for band in ordered:
        if band.start <= moment:
            label = band.label
    return label


def label_shifts(shifts: list[ProcessedShift], bands=DEFAULT_BANDS) -> dict[str, list[ProcessedShift]]:
    """Bucket shifts by band, keeping band order and input order within a band."""
    ordered = sorted(bands, key=lambda b: b.start)
    labeled = {band.label: [] for band in ordered}
    for shift in shifts:
        labeled[label_for(shift.start_time, ordered)].append(shift)
    return labeled
