from datetime import datetime
from io import BytesIO

import pytest
from openpyxl import Workbook

from ponto import create_app
from ponto.config import Config
from ponto.models import Punch, RawRecord


def at(hhmm: str, day: int = 6) -> datetime:
    """Timestamp on 2025-01-<day> at HH:MM[:SS]."""
    parts = [int(p) for p in hhmm.split(':')]
    while len(parts) < 3:
        parts.append(0)
    return datetime(2025, 1, day, *parts)


def make_punches(person: str, *times: datetime) -> list[Punch]:
    return [Punch(person=person, timestamp=t, row=i + 2) for i, t in enumerate(times)]


def make_records(rows) -> list[RawRecord]:
    """rows: iterable of (person, timestamp[, group])."""
    records = []
    for i, row in enumerate(rows):
        person, timestamp = row[0], row[1]
        group = row[2] if len(row) > 2 else None
        records.append(RawRecord(row=i + 2, person=person, timestamp=timestamp, group=group))
    return records


def make_workbook(headers, rows, title_rows=()) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in title_rows:
        ws.append(row)
    ws.append(headers)
    for row in rows:
        ws.append(list(row))
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        SECRET_KEY = 'test'
        LOGIN_USERNAME = 'admin'
        LOGIN_PASSWORD = 'secret'
        UPLOAD_FOLDER = str(tmp_path / 'uploads')
        SHIFT_THRESHOLD_HOURS = 5
        LUNCH_MIN_MINUTES = 45
        LUNCH_MAX_MINUTES = 75
        DEFAULT_LUNCH_MINUTES = 60
        MAX_SHIFT_HOURS = 16
        SHIFT_BANDS = '1st shift=05:00,2nd shift=13:00,3rd shift=21:00'

    return create_app(TestConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    client.post('/login', data={'username': 'admin', 'password': 'secret'})
    return client
