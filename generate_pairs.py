"""pairgen – CLI-Tool zum Auslosen zufaelliger Paare aus einer Namensliste."""

import argparse
import logging
import random
import sys
from pathlib import Path

from pairgen import DEFAULT_CATEGORIES, DEFAULT_TAGS, STRATEGY_NAMES, build_strategy
from pairgen.duplicates import DEFAULT_SIMILARITY_THRESHOLD, find_similar_names
from pairgen.parser import FORMATS, ParseError
from pairgen.reporter import print_summary, write_csv_report, write_html_report
from pairgen.session import PairingSession

log = logging.getLogger(__name__)


def _csv_list(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(',') if part.strip())


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        description='Zufaellige Paare aus einer CSV- oder Excel-Namensliste bilden.',
        prog='generate_pairs.py',
    )
    parser.add_argument(
        '--roster', required=True, type=Path,
        help='Pfad zur Namensliste (CSV oder XLSX, ohne Header-Zeile)',
    )
    parser.add_argument(
        '--format', choices=FORMATS,
        help='Dateiformat (Standard: aus der Dateiendung abgeleitet)',
    )
    parser.add_argument(
        '--mode', choices=STRATEGY_NAMES, default=STRATEGY_NAMES[0],
        help='Paarungsmodus: shuffle (Name), two-pool (Name, Geschlecht), '
             'scored (Name, Geschlecht, Klasse, Abteilung). Standard: shuffle',
    )
    parser.add_argument(
        '--categories', type=_csv_list, default=DEFAULT_CATEGORIES,
        help='Die zwei Kategorien, kommagetrennt (Standard: male,female)',
    )
    parser.add_argument(
        '--tags', type=_csv_list, default=DEFAULT_TAGS,
        help='Namen der Merkmalsspalten im Modus scored (Standard: class,department)',
    )
    parser.add_argument(
        '--seed', type=int,
        help='Startwert fuer den Zufallsgenerator (reproduzierbare Paare)',
    )
    parser.add_argument(
        '--flatten', action='store_true',
        help='Jede nicht-leere Zelle als Namen werten (nur Modus shuffle)',
    )
    parser.add_argument(
        '--output', type=Path,
        help='Pfad fuer die Report-Ausgabe (CSV)',
    )
    parser.add_argument(
        '--html', action='store_true',
        help='Zusaetzlich einen HTML-Report erzeugen (benoetigt --output)',
    )
    parser.add_argument(
        '--summary', action='store_true',
        help='Paare und Zusammenfassung auf stdout ausgeben',
    )
    parser.add_argument(
        '--duplicate-threshold', type=float, default=DEFAULT_SIMILARITY_THRESHOLD,
        help='Schwellenwert fuer Hinweise auf doppelte Namen (Standard: 0.92)',
    )
    parser.add_argument(
        '--verbose', action='store_true',
        help='Uebersprungene Zeilen einzeln protokollieren',
    )
    return parser


def warn_similar_names(session: PairingSession, threshold: float) -> None:
    """Log a warning for every pair of suspiciously similar roster names."""
    for a, b, similarity in find_similar_names(session.roster, threshold):
        log.warning(
            "Moegliches Duplikat: '%s' / '%s' (Aehnlichkeit %.2f)",
            a.name, b.name, similarity,
        )


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s: %(message)s',
    )

    if args.html and not args.output:
        parser.error('--output ist erforderlich bei Verwendung von --html.')

    try:
        strategy = build_strategy(args.mode, args.categories, args.tags)
    except ValueError as exc:
        parser.error(str(exc))
    if args.flatten and args.mode != STRATEGY_NAMES[0]:
        parser.error(f"--flatten ist nur im Modus '{STRATEGY_NAMES[0]}' moeglich.")

    rng = random.Random(args.seed)
    session = PairingSession(strategy, rng=rng, flatten=args.flatten)

    try:
        session.upload_file(args.roster, args.format)
    except FileNotFoundError:
        log.error("Datei nicht gefunden: %s", args.roster)
        return 1
    except ParseError as exc:
        log.error("Datei konnte nicht gelesen werden: %s", exc)
        return 1

    view = session.view()
    if view.category_counts:
        log.info(
            "Personen je Kategorie: %s",
            ', '.join(f'{c}={n}' for c, n in view.category_counts.items()),
        )
    warn_similar_names(session, args.duplicate_threshold)

    result = session.generate()

    if args.output:
        write_csv_report(result, args.output)
        if args.html:
            write_html_report(result, args.output.with_suffix('.html'), args.roster.stem)

    if args.summary or not args.output:
        print_summary(result, args.roster.name)
    return 0


if __name__ == '__main__':
    sys.exit(main())
