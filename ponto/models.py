import math
from dataclasses import dataclass, field
from datetime import date, time, datetime, timedelta
from typing import Any, Optional
from enum import Enum


class LunchType(Enum):
    NORMAL = "NORMAL"
    EXTENDED_CAPPED = "EXTENDED_CAPPED"
    ARTIFICIAL = "ARTIFICIAL"
    NONE = "NONE"


@dataclass
class RawRecord:
    row: int
    person: Any
    timestamp: Any
    group: Optional[str] = None
    tax_id: str = ''
    category: str = ''
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Punch:
    person: str
    timestamp: datetime
    group: Optional[str] = None
    row: int = 0


@dataclass(frozen=True)
class ShiftCandidate:
    person: str
    punches: tuple[Punch, ...]  # strictly increasing
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProcessedShift:
    id: str
    person: str
    date: date
    start_time: datetime
    lunch_start: Optional[datetime]
    lunch_end: Optional[datetime]
    end_time: datetime
    worked_hours: float
    worked_time_str: str
    lunch_type: LunchType
    warnings: tuple[str, ...] = ()
    group: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'person': self.person,
            'date': self.date.isoformat(),
            'start_time': self.start_time.isoformat(),
            'lunch_start': self.lunch_start.isoformat() if self.lunch_start else None,
            'lunch_end': self.lunch_end.isoformat() if self.lunch_end else None,
            'end_time': self.end_time.isoformat(),
            'worked_hours': self.worked_hours,
            'worked_time_str': self.worked_time_str,
            'lunch_type': self.lunch_type.value,
            'warnings': list(self.warnings),
            'group': self.group,
        }


@dataclass(frozen=True)
class DailyWorkerRecord:
    id: str
    name: str
    tax_id: str
    date: date
    arrival: datetime
    departure: datetime
    total_time_str: str
    category: str
    group: str

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'tax_id': self.tax_id,
            'date': self.date.isoformat(),
            'arrival': self.arrival.isoformat(),
            'departure': self.departure.isoformat(),
            'total_time_str': self.total_time_str,
            'category': self.category,
            'group': self.group,
        }


@dataclass(frozen=True)
class ProcessingConfig:
    """Parameters for one processing run. Durations are in minutes."""
    shift_threshold_hours: float = 5
    lunch_min_duration: float = 45
    lunch_max_duration: float = 75
    default_lunch_duration: float = 60
    max_shift_hours: float = 16

    def __post_init__(self):
        for name in ('shift_threshold_hours', 'lunch_min_duration', 'lunch_max_duration',
                     'default_lunch_duration', 'max_shift_hours'):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be a finite number")
        if self.shift_threshold_hours <= 0:
            raise ValueError("shift_threshold_hours must be positive")
        if self.max_shift_hours <= 0:
            raise ValueError("max_shift_hours must be positive")
        for name in ('lunch_min_duration', 'lunch_max_duration', 'default_lunch_duration'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.lunch_min_duration > self.lunch_max_duration:
            raise ValueError("lunch_min_duration must not exceed lunch_max_duration")
        try:
            self.shift_threshold, self.max_shift, self.lunch_max, self.default_lunch
        except OverflowError:
            raise ValueError("Processing durations are out of range")

    @property
    def shift_threshold(self) -> timedelta:
        return timedelta(hours=self.shift_threshold_hours)

    @property
    def max_shift(self) -> timedelta:
        return timedelta(hours=self.max_shift_hours)

    @property
    def lunch_min(self) -> timedelta:
        return timedelta(minutes=self.lunch_min_duration)

    @property
    def lunch_max(self) -> timedelta:
        return timedelta(minutes=self.lunch_max_duration)

    @property
    def default_lunch(self) -> timedelta:
        return timedelta(minutes=self.default_lunch_duration)

    @classmethod
    def from_mapping(cls, values, defaults: Optional['ProcessingConfig'] = None) -> 'ProcessingConfig':
        """Build a config from a Flask config or form mapping.

        Recognized keys: SHIFT_THRESHOLD_HOURS, LUNCH_MIN_MINUTES,
        LUNCH_MAX_MINUTES, DEFAULT_LUNCH_MINUTES, MAX_SHIFT_HOURS (lowercase
        accepted too). Missing or blank keys fall back to `defaults`.
        """
        base = defaults or cls()
        keys = {
            'shift_threshold_hours': 'SHIFT_THRESHOLD_HOURS',
            'lunch_min_duration': 'LUNCH_MIN_MINUTES',
            'lunch_max_duration': 'LUNCH_MAX_MINUTES',
            'default_lunch_duration': 'DEFAULT_LUNCH_MINUTES',
            'max_shift_hours': 'MAX_SHIFT_HOURS',
        }
        kwargs = {}
        for attr, key in keys.items():
            raw = values.get(key)
            if raw is None:
                raw = values.get(key.lower())
            if raw is None or str(raw).strip() == '':
                kwargs[attr] = getattr(base, attr)
                continue
            try:
                number = float(str(raw).replace(',', '.'))
            except ValueError:
                raise ValueError(f"Invalid value for {key}: {raw!r}")
            if not math.isfinite(number):
                raise ValueError(f"Invalid value for {key}: {raw!r}")
            kwargs[attr] = number
        return cls(**kwargs)


@dataclass(frozen=True)
class ShiftBand:
    label: str
    start: time


@dataclass
class NormalizedPunches:
    by_person: dict[str, list[Punch]]  # chronologically sorted
    extras: dict[int, dict[str, Any]] = field(default_factory=dict)
    dropped: int = 0


@dataclass
class ProcessingResult:
    shifts: list[ProcessedShift]
    sources: dict[str, tuple[int, ...]] = field(default_factory=dict)
    extras: dict[int, dict[str, Any]] = field(default_factory=dict)
    dropped: int = 0
