"""Shared test fixtures."""

import io
from pathlib import Path

import pytest
from openpyxl import Workbook

from pairgen import Entity


DATA_DIR = Path(__file__).resolve().parent.parent / 'data'


@pytest.fixture(scope='session')
def data_dir() -> Path:
    """Path to the data directory."""
    return DATA_DIR


@pytest.fixture
def make_xlsx():
    """Build spreadsheet bytes from a list of rows."""
    def _make(rows) -> bytes:
        wb = Workbook()
        ws = wb.active
        for row in rows:
            ws.append(row)
        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()
    return _make


@pytest.fixture
def example_entities() -> list[Entity]:
    """Alice/Bob/Carol/Dan roster with class and department tags."""
    return [
        Entity('Alice', 'female', ('A', 'X')),
        Entity('Bob', 'male', ('B', 'Y')),
        Entity('Carol', 'female', ('B', 'X')),
        Entity('Dan', 'male', ('A', 'Y')),
    ]
