"""Tests for pairgen.reporter module."""

import csv

from pairgen import Entity, Pair, PairingResult
from pairgen.reporter import (
    CSV_COLUMNS,
    format_pair,
    print_summary,
    write_csv_report,
    write_html_report,
)


def _result() -> PairingResult:
    return PairingResult(
        pairs=[
            Pair(Entity('Bob', 'male', ('B', 'Y')), Entity('Alice', 'female', ('A', 'X')), score=4.5),
            Pair(Entity('Dan', 'male', ('A', 'X')), Entity('Erin', 'female', ('A', 'X')), score=0.3),
        ],
        unmatched=[Entity('Frank', 'male', ('C', 'Z'))],
    )


def _read_report(path) -> list[dict]:
    with open(path, encoding='utf-8-sig', newline='') as f:
        return list(csv.DictReader(f, delimiter=';'))


class TestFormatPair:
    """Display format of pairs."""

    def test_complete_pair(self):
        assert format_pair(Pair(Entity('Alice'), Entity('Bob'))) == 'Alice & Bob'

    def test_unpaired(self):
        assert format_pair(Pair(Entity('Eve'))) == 'Eve (unpaired)'


class TestCsvReport:
    """Tests for the CSV report."""

    def test_header_and_rows(self, tmp_path):
        out = tmp_path / 'sub' / 'pairs.csv'
        write_csv_report(_result(), out)
        rows = _read_report(out)
        assert list(rows[0].keys()) == CSV_COLUMNS
        assert len(rows) == 3

    def test_pair_row(self, tmp_path):
        out = tmp_path / 'pairs.csv'
        write_csv_report(_result(), out)
        row = _read_report(out)[0]
        assert row['Pair_No'] == '1'
        assert row['Status'] == 'PAIRED'
        assert row['Person1_Name'] == 'Bob'
        assert row['Person2_Name'] == 'Alice'
        assert row['Person2_Tags'] == 'A / X'
        assert row['Score'] == '4.5000'

    def test_unmatched_row(self, tmp_path):
        out = tmp_path / 'pairs.csv'
        write_csv_report(_result(), out)
        row = _read_report(out)[-1]
        assert row['Pair_No'] == ''
        assert row['Status'] == 'UNMATCHED'
        assert row['Person1_Name'] == 'Frank'
        assert row['Person2_Name'] == ''

    def test_unpaired_row(self, tmp_path):
        out = tmp_path / 'pairs.csv'
        result = PairingResult(pairs=[Pair(Entity('Alice'), Entity('Bob')), Pair(Entity('Eve'))])
        write_csv_report(result, out)
        rows = _read_report(out)
        assert rows[1]['Status'] == 'UNPAIRED'
        assert rows[1]['Score'] == ''

    def test_empty_result(self, tmp_path):
        out = tmp_path / 'pairs.csv'
        write_csv_report(PairingResult(), out)
        assert _read_report(out) == []


class TestHtmlReport:
    """Tests for the HTML report."""

    def test_contains_pairs_and_stats(self, tmp_path):
        out = tmp_path / 'pairs.html'
        write_html_report(_result(), out, 'kurs')
        html = out.read_text(encoding='utf-8')
        assert 'Paare: kurs' in html
        assert 'Bob &amp; Alice' in html
        assert 'UNMATCHED' in html
        assert 'Paare ohne Unterschied' in html

    def test_names_escaped(self, tmp_path):
        out = tmp_path / 'pairs.html'
        result = PairingResult(pairs=[Pair(Entity('<b>Eve</b>'))])
        write_html_report(result, out)
        html = out.read_text(encoding='utf-8')
        assert '<b>Eve</b>' not in html
        assert '&lt;b&gt;Eve&lt;/b&gt;' in html


class TestPrintSummary:
    """Tests for the console summary."""

    def test_summary_counts(self, capsys):
        print_summary(_result(), 'kurs.csv')
        out = capsys.readouterr().out
        assert '=== Paare: kurs.csv ===' in out
        assert 'Bob & Alice' in out
        assert 'Frank (ohne Partner)' in out
        assert 'Paare ohne Unterschied:        1' in out

    def test_unpaired_shown(self, capsys):
        result = PairingResult(pairs=[Pair(Entity('Alice'), Entity('Bob')), Pair(Entity('Eve'))])
        print_summary(result)
        out = capsys.readouterr().out
        assert 'Eve (unpaired)' in out
        assert 'Mittlerer Score' not in out
