from datetime import datetime, date, time
from io import BytesIO

import pytest

from ponto.services.punch_parser import MissingColumnsError, parse_punch_workbook, read_table

from conftest import make_workbook


def test_combined_datetime_column():
    data = make_workbook(
        ['Pessoa', 'Data/Hora', 'Grupo', 'CPF', 'Categoria', 'Dispositivo'],
        [
            ['Ana', datetime(2025, 1, 6, 8, 0), 'Loja 1', '111', 'CLT', 'REP-01'],
            ['Ana', '06/01/2025 17:00', 'Loja 1', None, None, None],
        ],
    )
    records = parse_punch_workbook(BytesIO(data))
    assert len(records) == 2
    first = records[0]
    assert first.row == 2
    assert first.person == 'Ana'
    assert first.timestamp == datetime(2025, 1, 6, 8, 0)
    assert first.group == 'Loja 1'
    assert first.tax_id == '111'
    assert first.category == 'CLT'
    assert first.extra == {'Dispositivo': 'REP-01'}
    assert records[1].timestamp == '06/01/2025 17:00'


def test_separate_date_and_time_columns():
    data = make_workbook(
        ['Person', 'Date', 'Time'],
        [
            ['Ana', date(2025, 1, 6), time(8, 0)],
            ['Ana', '2025-01-06', '17:00:00'],
        ],
    )
    records = parse_punch_workbook(BytesIO(data))
    assert records[0].timestamp == datetime(2025, 1, 6, 8, 0)
    assert records[1].timestamp == '2025-01-06 17:00:00'


def test_header_found_below_title_rows():
    data = make_workbook(
        ['Nome', 'Data/Hora'],
        [['Ana', datetime(2025, 1, 6, 8, 0)]],
        title_rows=[['Relatório de Ponto'], []],
    )
    records = parse_punch_workbook(BytesIO(data))
    assert len(records) == 1
    assert records[0].row == 4


def test_blank_rows_skipped_but_partial_rows_kept():
    data = make_workbook(
        ['Pessoa', 'Data/Hora'],
        [
            ['Ana', datetime(2025, 1, 6, 8, 0)],
            [None, None],
            [None, datetime(2025, 1, 6, 9, 0)],
        ],
    )
    records = parse_punch_workbook(BytesIO(data))
    assert len(records) == 2
    assert records[1].person is None


def test_missing_columns_is_fatal():
    data = make_workbook(['Funcionário', 'Quando'], [['Ana', '2025-01-06 08:00']])
    with pytest.raises(MissingColumnsError):
        parse_punch_workbook(BytesIO(data))


def test_missing_time_column_is_fatal():
    data = make_workbook(['Pessoa', 'Data', 'Grupo'], [['Ana', '2025-01-06', 'A']])
    with pytest.raises(MissingColumnsError):
        parse_punch_workbook(BytesIO(data))


def test_read_table():
    data = make_workbook(['Nome', 'Cargo'], [['Ana', 'Caixa'], [None, None], ['Bruno', 'Gerente']])
    assert read_table(BytesIO(data)) == [
        {'Nome': 'Ana', 'Cargo': 'Caixa'},
        {'Nome': 'Bruno', 'Cargo': 'Gerente'},
    ]
