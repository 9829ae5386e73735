from datetime import date

from ponto.models import RawRecord
from ponto.services.daily_aggregator import aggregate_daily

from conftest import at


def record(row, person, timestamp, **kwargs):
    return RawRecord(row=row, person=person, timestamp=timestamp, **kwargs)


def test_arrival_and_departure_without_lunch_deduction():
    records = [
        record(2, 'Ana', at('08:00'), tax_id='123.456.789-00', category='Diarista', group='Obra A'),
        record(3, 'Ana', at('12:00')),
        record(4, 'Ana', at('13:00')),
        record(5, 'Ana', at('17:30')),
    ]
    (daily,) = aggregate_daily(records)
    assert daily.name == 'Ana'
    assert daily.date == date(2025, 1, 6)
    assert daily.arrival == at('08:00')
    assert daily.departure == at('17:30')
    assert daily.total_time_str == '09:30:00'
    assert daily.tax_id == '123.456.789-00'
    assert daily.category == 'Diarista'
    assert daily.group == 'Obra A'


def test_groups_by_calendar_day():
    records = [
        record(2, 'Ana', at('08:00', day=6)),
        record(3, 'Ana', at('17:00', day=6)),
        record(4, 'Ana', at('09:00', day=7)),
        record(5, 'Ana', at('15:00', day=7)),
        record(6, 'Bruno', at('07:00', day=6)),
    ]
    result = aggregate_daily(records)
    assert [(r.name, r.date.day, r.total_time_str) for r in result] == [
        ('Ana', 6, '09:00:00'),
        ('Ana', 7, '06:00:00'),
        ('Bruno', 6, '00:00:00'),
    ]


def test_values_come_from_first_row_carrying_them():
    records = [
        record(2, 'Ana', at('08:00')),
        record(3, 'Ana', at('17:00'), category='Diarista', group='Obra B'),
    ]
    (daily,) = aggregate_daily(records)
    assert daily.category == 'Diarista'
    assert daily.group == 'Obra B'
    assert daily.tax_id == ''


def test_unsorted_input_and_bad_rows():
    records = [
        record(2, 'Ana', at('17:00')),
        record(3, None, at('05:00')),
        record(4, 'Ana', 'bad'),
        record(5, 'Ana', at('08:00')),
    ]
    (daily,) = aggregate_daily(records)
    assert daily.arrival == at('08:00')
    assert daily.departure == at('17:00')


def test_ids_are_deterministic():
    records = [record(2, 'Ana', at('08:00')), record(3, 'Ana', at('17:00'))]
    assert aggregate_daily(records)[0].id == aggregate_daily(records)[0].id
