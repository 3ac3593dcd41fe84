"""Report generation for pairing results (CSV, HTML, summary)."""

import csv
import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from pairgen import Entity, Pair, PairingResult
from pairgen.scoring import is_homogeneous

log = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / 'templates'

STATUS_PAIRED = 'PAIRED'
STATUS_UNPAIRED = 'UNPAIRED'
STATUS_UNMATCHED = 'UNMATCHED'

CSV_COLUMNS = [
    'Pair_No',
    'Status',
    'Person1_Name',
    'Person1_Category',
    'Person1_Tags',
    'Person2_Name',
    'Person2_Category',
    'Person2_Tags',
    'Score',
]


def _person_cells(prefix: str, entity: Entity | None) -> dict:
    return {
        f'{prefix}_Name': entity.name if entity else '',
        f'{prefix}_Category': (entity.category or '') if entity else '',
        f'{prefix}_Tags': ' / '.join(entity.tags) if entity else '',
    }


def _result_to_rows(result: PairingResult) -> list[dict]:
    """Flatten a PairingResult into dicts for CSV/HTML output.

    Pairs come first, numbered from 1, followed by unmatched entities
    without a pair number.
    """
    rows: list[dict] = []
    for number, pair in enumerate(result.pairs, start=1):
        row = {
            'Pair_No': str(number),
            'Status': STATUS_PAIRED if pair.is_complete else STATUS_UNPAIRED,
            'Score': f'{pair.score:.4f}' if pair.score is not None else '',
        }
        row.update(_person_cells('Person1', pair.first))
        row.update(_person_cells('Person2', pair.second))
        rows.append(row)

    for entity in result.unmatched:
        row = {'Pair_No': '', 'Status': STATUS_UNMATCHED, 'Score': ''}
        row.update(_person_cells('Person1', entity))
        row.update(_person_cells('Person2', None))
        rows.append(row)
    return rows


def format_pair(pair: Pair) -> str:
    """Render a pair the way it is shown to users: 'A & B' or 'A (unpaired)'."""
    if pair.second is None:
        return f'{pair.first.name} (unpaired)'
    return f'{pair.first.name} & {pair.second.name}'


def write_csv_report(result: PairingResult, output_path: Path) -> None:
    """Write pairing results as a CSV report.

    Uses UTF-8 with BOM (utf-8-sig) and semicolon delimiter for
    compatibility with German Excel.

    Args:
        result: Pairing result to write.
        output_path: Path for the output CSV file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    rows = _result_to_rows(result)
    with open(output_path, 'w', newline='', encoding='utf-8-sig') as f:
        writer = csv.DictWriter(
            f, fieldnames=CSV_COLUMNS, delimiter=';', extrasaction='ignore',
        )
        writer.writeheader()
        writer.writerows(rows)

    log.info("CSV-Report geschrieben: %s (%d Zeilen)", output_path, len(rows))


def _compute_stats(result: PairingResult) -> dict:
    """Compute summary statistics from a pairing result."""
    mean_score = result.mean_score
    scored = [p for p in result.completed_pairs if p.score is not None]
    return {
        'total': result.entity_count,
        'pairs': len(result.completed_pairs),
        'unpaired': len(result.unpaired),
        'unmatched': len(result.unmatched),
        'mean_score': f'{mean_score:.2f}' if mean_score is not None else '',
        'homogeneous': sum(
            1 for p in scored if is_homogeneous(p.first, p.second, len(p.first.tags))
        ),
    }


def write_html_report(
    result: PairingResult,
    output_path: Path,
    title: str = '',
) -> None:
    """Write pairing results as an HTML report using Jinja2.

    Args:
        result: Pairing result to write.
        output_path: Path for the output HTML file.
        title: Name of the roster (for the report title).
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
    )
    template = env.get_template('report.html')

    html = template.render(
        title=title,
        pairs=[format_pair(p) for p in result.pairs],
        rows=_result_to_rows(result),
        stats=_compute_stats(result),
        columns=CSV_COLUMNS,
    )

    output_path.write_text(html, encoding='utf-8')
    log.info("HTML-Report geschrieben: %s", output_path)


def print_summary(result: PairingResult, title: str = '') -> None:
    """Print the pairs and a short summary to stdout.

    Args:
        result: Pairing result to print.
        title: Name of the roster file.
    """
    stats = _compute_stats(result)

    print(f"\n=== Paare: {title} ===")
    for number, pair in enumerate(result.pairs, start=1):
        print(f"{number:>4}. {format_pair(pair)}")
    for entity in result.unmatched:
        print(f"   -  {entity.name} (ohne Partner)")
    print("---")
    print(f"Personen gesamt:           {stats['total']:>5}")
    print(f"Paare gebildet:            {stats['pairs']:>5}")
    print(f"Einzeln (ungerade Anzahl): {stats['unpaired']:>5}")
    print(f"Ohne Partner:              {stats['unmatched']:>5}")
    if stats['mean_score']:
        print(f"Mittlerer Score:           {stats['mean_score']:>5}")
        print(f"Paare ohne Unterschied:    {stats['homogeneous']:>5}")
    print()
