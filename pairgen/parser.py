"""Tabular parser for roster uploads (CSV and spreadsheet files)."""

import csv
import io
import logging
import zipfile
from pathlib import Path

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

log = logging.getLogger(__name__)

FORMAT_CSV = 'csv'
FORMAT_SPREADSHEET = 'spreadsheet'
FORMATS = (FORMAT_CSV, FORMAT_SPREADSHEET)

SUFFIX_FORMATS = {
    '.csv': FORMAT_CSV,
    '.tsv': FORMAT_CSV,
    '.txt': FORMAT_CSV,
    '.xlsx': FORMAT_SPREADSHEET,
    '.xlsm': FORMAT_SPREADSHEET,
}

_SNIFF_DELIMITERS = ',;\t'
_SNIFF_SAMPLE_SIZE = 4096


class ParseError(ValueError):
    """Raised when an uploaded file cannot be decoded into rows."""

    def __init__(self, message: str):
        super().__init__(f"{message}. Bitte Dateiformat pruefen.")


def detect_encoding(data: bytes) -> str:
    """Detect text encoding by checking for BOM bytes.

    Args:
        data: Raw file content.

    Returns:
        Encoding string suitable for bytes.decode().
    """
    if data[:2] == b'\xff\xfe':
        return 'utf-16-le'
    return 'utf-8-sig'


def format_for_path(path: str | Path) -> str:
    """Infer the upload format from a file suffix.

    Raises:
        ParseError: If the suffix is not a supported roster format.
    """
    suffix = Path(path).suffix.lower()
    try:
        return SUFFIX_FORMATS[suffix]
    except KeyError:
        raise ParseError(f"Unbekannter Dateityp '{suffix}' fuer {path}") from None


def _is_blank(row: list[str]) -> bool:
    return all(not cell.strip() for cell in row)


def _sniff_dialect(text: str):
    try:
        return csv.Sniffer().sniff(text[:_SNIFF_SAMPLE_SIZE], delimiters=_SNIFF_DELIMITERS)
    except csv.Error:
        # Single-column files give the sniffer nothing to work with
        return csv.excel


def _parse_csv(data: bytes) -> list[list[str]]:
    encoding = detect_encoding(data)
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as exc:
        raise ParseError(f"Datei ist nicht als {encoding} lesbar: {exc.reason}") from exc

    text = text.lstrip('\ufeff')
    if '\x00' in text:
        raise ParseError("Datei enthaelt Binaerdaten")

    dialect = _sniff_dialect(text)
    try:
        return list(csv.reader(io.StringIO(text), dialect))
    except csv.Error as exc:
        raise ParseError(f"CSV-Fehler: {exc}") from exc


def _cell_to_str(value) -> str:
    if value is None:
        return ''
    if isinstance(value, float) and value.is_integer():
        # Spreadsheets store numeric class labels such as 3 as 3.0
        return str(int(value))
    return str(value)


def _parse_spreadsheet(data: bytes) -> list[list[str]]:
    try:
        workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise ParseError(f"Keine gueltige Tabellendatei: {exc}") from exc

    try:
        sheet = workbook.worksheets[0]
        rows: list[list[str]] = []
        for values in sheet.iter_rows(values_only=True):
            row = [_cell_to_str(v) for v in values]
            while row and not row[-1].strip():
                row.pop()
            rows.append(row)
    finally:
        workbook.close()
    return rows


def parse_rows(data: bytes, fmt: str) -> list[list[str]]:
    """Decode an uploaded file into rows of raw string fields.

    Row 0 is treated as data; no header is skipped. Rows consisting only
    of blank cells are removed.

    Args:
        data: Raw file content.
        fmt: 'csv' or 'spreadsheet'.

    Returns:
        List of rows, each a list of field strings.

    Raises:
        ParseError: If the content cannot be decoded in the given format.
    """
    if fmt == FORMAT_CSV:
        rows = _parse_csv(data)
    elif fmt == FORMAT_SPREADSHEET:
        rows = _parse_spreadsheet(data)
    else:
        raise ParseError(f"Unbekanntes Format '{fmt}' (erlaubt: {', '.join(FORMATS)})")

    rows = [row for row in rows if not _is_blank(row)]
    log.info("%d Zeilen gelesen (%s)", len(rows), fmt)
    return rows


def read_rows(path: str | Path, fmt: str | None = None) -> list[list[str]]:
    """Read and parse a roster file from disk.

    Args:
        path: Path to the roster file.
        fmt: Explicit format; inferred from the suffix if omitted.

    Raises:
        FileNotFoundError: If the file does not exist.
        ParseError: If the file cannot be parsed.
    """
    path = Path(path)
    if fmt is None:
        fmt = format_for_path(path)
    return parse_rows(path.read_bytes(), fmt)
