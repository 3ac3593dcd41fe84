"""Tests for the generate_pairs command line entry point."""

import csv

import pytest

from generate_pairs import main


class TestMain:
    """End-to-end runs of the CLI."""

    def test_shuffle_summary(self, data_dir, capsys):
        assert main(['--roster', str(data_dir / 'names.csv'), '--seed', '1']) == 0
        out = capsys.readouterr().out
        assert 'Personen gesamt:               5' in out
        assert '(unpaired)' in out

    def test_scored_report(self, data_dir, tmp_path):
        out = tmp_path / 'pairs.csv'
        code = main([
            '--roster', str(data_dir / 'scored.csv'), '--mode', 'scored',
            '--seed', '3', '--output', str(out), '--html',
        ])
        assert code == 0
        with open(out, encoding='utf-8-sig', newline='') as f:
            rows = list(csv.DictReader(f, delimiter=';'))
        assert {(r['Person1_Name'], r['Person2_Name']) for r in rows} == {
            ('Bob', 'Alice'), ('Dan', 'Carol'),
        }
        assert out.with_suffix('.html').exists()

    def test_parse_error_exit_code(self, tmp_path, caplog):
        bad = tmp_path / 'roster.xlsx'
        bad.write_bytes(b'not a workbook')
        assert main(['--roster', str(bad)]) == 1
        assert 'Bitte Dateiformat pruefen' in caplog.text

    def test_missing_file_exit_code(self, tmp_path):
        assert main(['--roster', str(tmp_path / 'missing.csv')]) == 1

    def test_duplicate_warning(self, tmp_path, caplog):
        roster = tmp_path / 'roster.csv'
        roster.write_text('Anna\nAnna\nBen\n', encoding='utf-8')
        assert main(['--roster', str(roster), '--seed', '0']) == 0
        assert 'Moegliches Duplikat' in caplog.text

    def test_html_requires_output(self, data_dir):
        with pytest.raises(SystemExit):
            main(['--roster', str(data_dir / 'names.csv'), '--html'])

    def test_flatten_requires_shuffle(self, data_dir):
        with pytest.raises(SystemExit):
            main(['--roster', str(data_dir / 'couples.csv'), '--mode', 'two-pool', '--flatten'])

    def test_invalid_categories(self, data_dir):
        with pytest.raises(SystemExit):
            main(['--roster', str(data_dir / 'couples.csv'), '--mode', 'two-pool',
                  '--categories', 'male'])
