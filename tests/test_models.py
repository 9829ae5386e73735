from datetime import timedelta
from typing import Any, get_type_hints

import pytest

from ponto.models import ProcessedShift, ProcessingConfig, ProcessingResult, Punch, RawRecord, ShiftCandidate


def test_defaults():
    config = ProcessingConfig()
    assert config.shift_threshold == timedelta(hours=5)
    assert config.max_shift == timedelta(hours=16)
    assert (config.lunch_min, config.lunch_max) == (timedelta(minutes=45), timedelta(minutes=75))
    assert config.default_lunch == timedelta(minutes=60)


@pytest.mark.parametrize('field', [
    'shift_threshold_hours', 'lunch_min_duration', 'lunch_max_duration',
    'default_lunch_duration', 'max_shift_hours',
])
def test_non_finite_values_rejected(field):
    with pytest.raises(ValueError):
        ProcessingConfig(**{field: float('inf')})
    with pytest.raises(ValueError):
        ProcessingConfig(**{field: float('nan')})


def test_huge_threshold_rejected():
    with pytest.raises(ValueError):
        ProcessingConfig(shift_threshold_hours=1e300)


def test_min_above_max_rejected():
    with pytest.raises(ValueError):
        ProcessingConfig(lunch_min_duration=80)


def test_from_mapping_reads_uppercase_and_lowercase_keys():
    config = ProcessingConfig.from_mapping({'SHIFT_THRESHOLD_HOURS': '6', 'lunch_max_minutes': '90,5'})
    assert config.shift_threshold_hours == 6
    assert config.lunch_max_duration == 90.5


def test_from_mapping_blank_keeps_defaults():
    defaults = ProcessingConfig(max_shift_hours=12)
    config = ProcessingConfig.from_mapping({'MAX_SHIFT_HOURS': ' '}, defaults=defaults)
    assert config.max_shift_hours == 12


@pytest.mark.parametrize('raw', ['inf', '-inf', 'nan', 'abc'])
def test_from_mapping_rejects_bad_numbers(raw):
    with pytest.raises(ValueError, match='SHIFT_THRESHOLD_HOURS'):
        ProcessingConfig.from_mapping({'SHIFT_THRESHOLD_HOURS': raw})


def test_containers_declare_element_types():
    assert get_type_hints(ShiftCandidate)['punches'] == tuple[Punch, ...]
    assert get_type_hints(ShiftCandidate)['warnings'] == tuple[str, ...]
    assert get_type_hints(RawRecord)['extra'] == dict[str, Any]
    assert get_type_hints(ProcessingResult)['shifts'] == list[ProcessedShift]
