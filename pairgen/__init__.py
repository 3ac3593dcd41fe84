"""Core module for the random pair generator."""

from dataclasses import dataclass, field
from typing import Optional, Union

DEFAULT_CATEGORIES = ('male', 'female')
DEFAULT_TAGS = ('class', 'department')


@dataclass(eq=False)
class Entity:
    """A roster member loaded from one row of the input file.

    Entities compare by identity: two people with the same name are
    distinct individuals.
    """

    name: str
    category: Optional[str] = None
    tags: tuple[str, ...] = ()

    def tag(self, position: int) -> str:
        """Return the tag at ``position``, or '' if the row had none."""
        if position < len(self.tags):
            return self.tags[position]
        return ''


@dataclass
class Pair:
    """A completed match, or a lone entity if ``second`` is None."""

    first: Entity
    second: Optional[Entity] = None
    score: Optional[float] = None  # Only set by scored pairing

    @property
    def is_complete(self) -> bool:
        return self.second is not None

    @property
    def members(self) -> tuple[Entity, ...]:
        if self.second is None:
            return (self.first,)
        return (self.first, self.second)


@dataclass
class PairingResult:
    """Output of one pairing run."""

    pairs: list[Pair] = field(default_factory=list)
    unmatched: list[Entity] = field(default_factory=list)

    @property
    def completed_pairs(self) -> list[Pair]:
        return [p for p in self.pairs if p.is_complete]

    @property
    def unpaired(self) -> list[Entity]:
        """Entities left alone in a one-member pair (odd shuffle count)."""
        return [p.first for p in self.pairs if not p.is_complete]

    @property
    def entity_count(self) -> int:
        return sum(len(p.members) for p in self.pairs) + len(self.unmatched)

    @property
    def mean_score(self) -> Optional[float]:
        scores = [p.score for p in self.pairs if p.score is not None]
        if not scores:
            return None
        return sum(scores) / len(scores)


def _check_categories(categories: tuple[str, ...]) -> None:
    if len(categories) != 2:
        raise ValueError(
            f"Genau zwei Kategorien erwartet, erhalten: {len(categories)}"
        )
    if categories[0] == categories[1]:
        raise ValueError(f"Kategorien muessen verschieden sein: {categories[0]}")
    if any(c != c.strip().lower() or not c for c in categories):
        raise ValueError(
            f"Kategorien muessen kleingeschrieben und nicht leer sein: {categories}"
        )


@dataclass(frozen=True)
class Unconstrained:
    """Single pool, consecutive pairs after one shuffle."""

    name = 'shuffle'
    required_fields = 1


@dataclass(frozen=True)
class SimpleTwoPool:
    """Two category pools paired index by index after shuffling."""

    categories: tuple[str, str] = DEFAULT_CATEGORIES

    name = 'two-pool'
    required_fields = 2

    def __post_init__(self):
        _check_categories(self.categories)


@dataclass(frozen=True)
class ScoredTwoPool:
    """Two category pools paired greedily by tag heterogeneity.

    ``tags`` names the tag columns that follow the category column; each
    name is an accessor into ``Entity.tags`` by position.
    """

    categories: tuple[str, str] = DEFAULT_CATEGORIES
    tags: tuple[str, ...] = DEFAULT_TAGS

    name = 'scored'

    def __post_init__(self):
        _check_categories(self.categories)

    @property
    def required_fields(self) -> int:
        return 2 + len(self.tags)


Strategy = Union[Unconstrained, SimpleTwoPool, ScoredTwoPool]

STRATEGY_NAMES = (Unconstrained.name, SimpleTwoPool.name, ScoredTwoPool.name)


def build_strategy(
    mode: str,
    categories: tuple[str, ...] = DEFAULT_CATEGORIES,
    tags: tuple[str, ...] = DEFAULT_TAGS,
) -> Strategy:
    """Build a pairing strategy from its configuration name.

    Args:
        mode: One of 'shuffle', 'two-pool', 'scored'.
        categories: The two recognized category tokens (two-pool modes).
        tags: Tag column names (scored mode only).

    Returns:
        The configured strategy.

    Raises:
        ValueError: If the mode is unknown or the categories are invalid.
    """
    categories = tuple(c.strip().lower() for c in categories)
    if mode == Unconstrained.name:
        return Unconstrained()
    if mode == SimpleTwoPool.name:
        return SimpleTwoPool(categories=categories)
    if mode == ScoredTwoPool.name:
        return ScoredTwoPool(categories=categories, tags=tuple(tags))
    raise ValueError(
        f"Unbekannter Modus: {mode} (erlaubt: {', '.join(STRATEGY_NAMES)})"
    )
