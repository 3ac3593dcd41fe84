"""Roster loader: turns raw tabular rows into validated entities."""

import logging
import re
from collections.abc import Iterable, Sequence

from pairgen import Entity, ScoredTwoPool, Strategy, Unconstrained

log = logging.getLogger(__name__)

# Matches any sequence of whitespace (including Unicode whitespace like U+2006)
_WHITESPACE_RE = re.compile(r'\s+')


def normalize_whitespace(value) -> str:
    """Normalize whitespace in a raw field value.

    Converts the value to a string, collapses any sequence of whitespace
    (including Unicode whitespace) into a single space and strips
    leading/trailing whitespace. ``None`` becomes the empty string.

    Args:
        value: Raw field value from the parser.

    Returns:
        Normalized string.
    """
    if value is None:
        return ''
    return _WHITESPACE_RE.sub(' ', str(value)).strip()


def _entity_from_row(row: Sequence, strategy: Strategy) -> Entity | None:
    """Build an entity from one row, or None if the row must be skipped."""
    if len(row) < strategy.required_fields:
        return None

    name = normalize_whitespace(row[0])
    if not name:
        return None

    if isinstance(strategy, Unconstrained):
        return Entity(name=name)

    category = normalize_whitespace(row[1]).lower()
    if category not in strategy.categories:
        return None

    if isinstance(strategy, ScoredTwoPool):
        tags = tuple(normalize_whitespace(v) for v in row[2:2 + len(strategy.tags)])
        if not all(tags):
            return None
        return Entity(name=name, category=category, tags=tags)
    return Entity(name=name, category=category)


def _flatten_names(rows: Iterable[Sequence]) -> list[Entity]:
    entities: list[Entity] = []
    for row in rows:
        for value in row:
            name = normalize_whitespace(value)
            if name:
                entities.append(Entity(name=name))
    return entities


def load_entities(
    rows: Iterable[Sequence],
    strategy: Strategy,
    flatten: bool = False,
) -> list[Entity]:
    """Convert raw rows into validated roster entities.

    Rows with too few fields, an empty name or (in category modes) an
    unrecognized category are skipped silently. Output keeps row order;
    duplicate names are kept as distinct entities.

    Args:
        rows: Raw rows, each a sequence of field values.
        strategy: Pairing strategy deciding which fields are required.
        flatten: Treat every non-empty cell as a name (shuffle mode only).

    Returns:
        List of Entity objects (possibly empty).

    Raises:
        ValueError: If ``flatten`` is requested for a category mode.
    """
    if flatten:
        if not isinstance(strategy, Unconstrained):
            raise ValueError(
                f"--flatten ist nur im Modus '{Unconstrained.name}' moeglich"
            )
        entities = _flatten_names(rows)
        log.info("%d Namen geladen (alle Zellen)", len(entities))
        return entities

    entities: list[Entity] = []
    skipped = 0
    for row_num, row in enumerate(rows, start=1):
        entity = _entity_from_row(row, strategy)
        if entity is None:
            skipped += 1
            log.debug("Zeile %d uebersprungen: %r", row_num, list(row))
            continue
        entities.append(entity)

    if skipped:
        log.info("%d Zeilen uebersprungen (fehlende oder ungueltige Felder)", skipped)
    log.info("%d Personen geladen (Modus %s)", len(entities), strategy.name)
    return entities
