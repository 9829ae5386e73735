from datetime import timedelta
from ..models import Punch, ShiftCandidate, ProcessingConfig

OUT_OF_ORDER = "out-of-order punches"
INCOMPLETE_SHIFT = "incomplete shift: missing clock-out"


def segment(punches: list[Punch], config: ProcessingConfig) -> list[ShiftCandidate]:
    """Split one person's chronologically sorted punches into shifts.

    A gap strictly greater than the configured threshold closes the current
    shift when it follows a clock-out (even punch count so far). A gap after
    an unpaired clock-in is the worked stretch itself, so the punch still
    joins the shift unless that would stretch it past `max_shift_hours`.

    Adjacent punches with a non-positive gap are collapsed, keeping the
    later-arriving punch, so every candidate is strictly increasing.
    """
    if not punches:
        return []

    shifts = []
    current = [punches[0]]
    out_of_order = False

    for punch in punches[1:]:
        gap = punch.timestamp - current[-1].timestamp
        if gap <= timedelta(0):
            out_of_order = True
            while current and current[-1].timestamp >= punch.timestamp:
                current.pop()
            current.append(punch)
            continue
        if _splits(current, punch, gap, config):
            shifts.append(_close(current, out_of_order))
            current = [punch]
            out_of_order = False
        else:
            current.append(punch)

    shifts.append(_close(current, out_of_order))
    return shifts


def _splits(current: list[Punch], punch: Punch, gap: timedelta, config: ProcessingConfig) -> bool:
    if gap <= config.shift_threshold:
        return False
    clocked_in = len(current) % 2 == 1
    if clocked_in:
        return punch.timestamp - current[0].timestamp > config.max_shift
    return True


def _close(punches: list[Punch], out_of_order: bool) -> ShiftCandidate:
    warnings = []
    if out_of_order:
        warnings.append(OUT_OF_ORDER)
    if len(punches) == 1:
        warnings.append(INCOMPLETE_SHIFT)
    return ShiftCandidate(
        person=punches[0].person,
        punches=tuple(punches),
        warnings=tuple(warnings),
    )
