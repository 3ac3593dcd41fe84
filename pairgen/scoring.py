"""Compatibility scoring for scored two-pool pairing."""

from collections.abc import Callable

from pairgen import Entity

# Added once per tag position whose values differ
TAG_MISMATCH_WEIGHT = 2.0


def tag_difference_score(a: Entity, b: Entity, tag_count: int) -> float:
    """Score how heterogeneous two entities are across their tags.

    Each of the first ``tag_count`` tag positions contributes
    TAG_MISMATCH_WEIGHT when the values differ. Missing tags compare as
    the empty string.

    Args:
        a: Entity from the first pool.
        b: Entity from the second pool.
        tag_count: Number of tracked tag positions.

    Returns:
        Score between 0.0 and TAG_MISMATCH_WEIGHT * tag_count.
    """
    return sum(
        TAG_MISMATCH_WEIGHT
        for position in range(tag_count)
        if a.tag(position) != b.tag(position)
    )


def compatibility_score(
    a: Entity,
    b: Entity,
    tag_count: int,
    jitter: Callable[[], float],
) -> float:
    """Score a candidate pair: tag heterogeneity plus one jitter draw.

    The jitter is expected in [0, 1), so it only reorders candidates with
    the same tag score and never lifts a homogeneous pair above one that
    differs in any tag.
    """
    return tag_difference_score(a, b, tag_count) + jitter()


def is_homogeneous(a: Entity, b: Entity, tag_count: int) -> bool:
    """True if the two entities share every tracked tag."""
    return tag_difference_score(a, b, tag_count) == 0.0
