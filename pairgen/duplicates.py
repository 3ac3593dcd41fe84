"""Hints for roster entries that look like the same person entered twice."""

import logging
import unicodedata
from collections.abc import Sequence

from rapidfuzz.distance import JaroWinkler

from pairgen import Entity

log = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.92


def normalize_for_tolerant_comparison(text: str) -> str:
    """Reduce a roster name to the key used for duplicate hints.

    'José-María' and 'jose maria' both become 'JOSEMARIA': combining
    marks left by NFD decomposition are dropped, as are separators
    (space, hyphen, dot, comma, semicolon), and the rest is uppercased.
    """
    decomposed = unicodedata.normalize('NFD', text)
    stripped = ''.join(ch for ch in decomposed if unicodedata.category(ch) != 'Mn')
    for ch in (' ', '-', '.', ',', ';'):
        stripped = stripped.replace(ch, '')
    return stripped.upper()


def find_similar_names(
    entities: Sequence[Entity],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[tuple[Entity, Entity, float]]:
    """Find roster entries whose names are suspiciously similar.

    Duplicates are allowed in a roster; this only produces hints so a
    user can spot typos or double entries before pairing.

    Args:
        entities: Loaded roster.
        threshold: Minimum similarity (0-1) for a hint.

    Returns:
        List of (first, second, similarity) in roster order.
    """
    normalized = [normalize_for_tolerant_comparison(e.name) for e in entities]
    hints: list[tuple[Entity, Entity, float]] = []

    for i, a in enumerate(entities):
        for j in range(i + 1, len(entities)):
            if normalized[i] == normalized[j]:
                similarity = 1.0
            else:
                similarity = JaroWinkler.similarity(normalized[i], normalized[j])
            if similarity >= threshold:
                hints.append((a, entities[j], round(similarity, 4)))

    log.debug("%d aehnliche Namen gefunden", len(hints))
    return hints
