from datetime import timedelta

import pytest

from ponto.models import LunchType, ProcessingConfig
from ponto.services.hours import compute_worked, format_duration, lunch_deduction, NEGATIVE_WORKED
from ponto.services.lunch_classifier import LunchDecision

from conftest import at


@pytest.mark.parametrize('duration, expected', [
    (timedelta(0), '00:00:00'),
    (timedelta(hours=8), '08:00:00'),
    (timedelta(hours=7, minutes=45), '07:45:00'),
    (timedelta(seconds=59, microseconds=999999), '00:00:59'),
    (timedelta(hours=26, minutes=3, seconds=4), '26:03:04'),
])
def test_format_duration(duration, expected):
    assert format_duration(duration) == expected


def test_deductions_per_lunch_type():
    config = ProcessingConfig()
    observed = LunchDecision(LunchType.NORMAL, at('12:00'), at('12:50'))
    assert lunch_deduction(observed, config) == timedelta(minutes=50)
    capped = LunchDecision(LunchType.EXTENDED_CAPPED, at('12:00'), at('14:00'))
    assert lunch_deduction(capped, config) == timedelta(minutes=75)
    artificial = LunchDecision(LunchType.ARTIFICIAL, at('12:10'), at('12:40'))
    assert lunch_deduction(artificial, config) == timedelta(minutes=60)
    assert lunch_deduction(LunchDecision(LunchType.NONE), config) == timedelta(0)


def test_every_lunch_type_has_a_deduction():
    config = ProcessingConfig()
    for lunch_type in LunchType:
        deducted = lunch_deduction(LunchDecision(lunch_type, at('12:00'), at('13:00')), config)
        assert isinstance(deducted, timedelta)


def test_unknown_lunch_type_is_rejected():
    with pytest.raises(ValueError):
        lunch_deduction(LunchDecision('LONG', at('12:00'), at('13:00')), ProcessingConfig())


def test_negative_worked_time_is_floored():
    worked, warnings = compute_worked(at('08:00'), at('08:30'), timedelta(minutes=60))
    assert worked == timedelta(0)
    assert warnings == (NEGATIVE_WORKED,)


def test_worked_time():
    worked, warnings = compute_worked(at('08:00'), at('17:00'), timedelta(hours=1))
    assert worked == timedelta(hours=8)
    assert warnings == ()
