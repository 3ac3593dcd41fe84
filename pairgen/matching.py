"""Pairing engine: shuffle, two-pool and scored two-pool strategies."""

import logging
import random
from collections.abc import Callable, Sequence

from pairgen import (
    Entity,
    Pair,
    PairingResult,
    ScoredTwoPool,
    SimpleTwoPool,
    Strategy,
    Unconstrained,
)
from pairgen.scoring import compatibility_score

log = logging.getLogger(__name__)


def _shuffled(entities: Sequence[Entity], rng: random.Random) -> list[Entity]:
    """Return a uniformly shuffled copy (Fisher-Yates via Random.shuffle)."""
    pool = list(entities)
    rng.shuffle(pool)
    return pool


def _partition(
    entities: Sequence[Entity],
    categories: tuple[str, str],
) -> tuple[list[Entity], list[Entity]]:
    """Split entities into the two category pools, keeping input order.

    Entities with any other category belong to neither pool.
    """
    pools: dict[str, list[Entity]] = {c: [] for c in categories}
    for entity in entities:
        if entity.category in pools:
            pools[entity.category].append(entity)
    return pools[categories[0]], pools[categories[1]]


def _pair_shuffle(entities: Sequence[Entity], rng: random.Random) -> PairingResult:
    shuffled = _shuffled(entities, rng)
    pairs: list[Pair] = []
    for i in range(0, len(shuffled), 2):
        if i + 1 < len(shuffled):
            pairs.append(Pair(shuffled[i], shuffled[i + 1]))
        else:
            # Odd person out stays visible as a one-member pair
            pairs.append(Pair(shuffled[i]))
    return PairingResult(pairs=pairs)


def _pair_by_index(pool1: list[Entity], pool2: list[Entity]) -> PairingResult:
    n = min(len(pool1), len(pool2))
    pairs = [Pair(a, b) for a, b in zip(pool1[:n], pool2[:n])]
    return PairingResult(pairs=pairs, unmatched=pool1[n:] + pool2[n:])


def _pair_scored(
    pool1: list[Entity],
    pool2: list[Entity],
    tag_count: int,
    jitter: Callable[[], float],
) -> PairingResult:
    """Greedily match each pool-1 member to its best unused pool-2 member.

    Candidates are scanned in pool order; only a strictly higher score
    replaces the current best, so the first candidate wins exact ties.
    """
    used = [False] * len(pool2)
    pairs: list[Pair] = []
    leftover1: list[Entity] = []

    for a in pool1:
        best_index: int | None = None
        best_score = -1.0
        for j, b in enumerate(pool2):
            if used[j]:
                continue
            score = compatibility_score(a, b, tag_count, jitter)
            if score > best_score:
                best_score = score
                best_index = j

        if best_index is None:
            leftover1.append(a)
            continue
        used[best_index] = True
        pairs.append(Pair(a, pool2[best_index], score=best_score))

    leftover2 = [b for j, b in enumerate(pool2) if not used[j]]
    return PairingResult(pairs=pairs, unmatched=leftover1 + leftover2)


def generate(
    entities: Sequence[Entity],
    strategy: Strategy,
    rng: random.Random | None = None,
    jitter: Callable[[], float] | None = None,
) -> PairingResult:
    """Generate randomized pairs for a roster.

    Strategies:
    1. Unconstrained: shuffle once, pair neighbours; an odd leftover
       becomes a one-member pair.
    2. SimpleTwoPool: shuffle each category pool, pair by index; the
       longer pool's tail is unmatched.
    3. ScoredTwoPool: shuffle each pool, then greedily pair by tag
       heterogeneity plus random jitter.

    Args:
        entities: Roster entities; the sequence is not modified.
        strategy: The configured pairing strategy.
        rng: Random source for shuffling (fresh unseeded one if omitted).
        jitter: Zero-argument callable returning a float in [0, 1) for
            scored tie-breaking; defaults to ``rng.random``.

    Returns:
        PairingResult in which every input entity appears exactly once.

    Raises:
        TypeError: If ``strategy`` is not a known strategy type.
    """
    if rng is None:
        rng = random.Random()

    if isinstance(strategy, Unconstrained):
        result = _pair_shuffle(entities, rng)
    elif isinstance(strategy, (SimpleTwoPool, ScoredTwoPool)):
        pool1, pool2 = _partition(entities, strategy.categories)
        if not pool1 or not pool2:
            log.warning(
                "Leerer Pool (%s: %d, %s: %d) - keine Paare moeglich",
                strategy.categories[0], len(pool1),
                strategy.categories[1], len(pool2),
            )
        pool1 = _shuffled(pool1, rng)
        pool2 = _shuffled(pool2, rng)
        if isinstance(strategy, ScoredTwoPool):
            result = _pair_scored(
                pool1, pool2, len(strategy.tags),
                jitter if jitter is not None else rng.random,
            )
        else:
            result = _pair_by_index(pool1, pool2)
        # Entities outside both pools still have to show up somewhere
        outsiders = [e for e in entities if e.category not in strategy.categories]
        result.unmatched.extend(outsiders)
    else:
        raise TypeError(f"Unbekannte Strategie: {strategy!r}")

    log.info(
        "Paarbildung abgeschlossen (%s): %d Paare, %d ohne Partner",
        strategy.name, len(result.completed_pairs),
        len(result.unpaired) + len(result.unmatched),
    )
    return result
