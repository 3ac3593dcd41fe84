"""Upload/generate/reset lifecycle around the loader and pairing engine."""

import enum
import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from pairgen import Entity, PairingResult, SimpleTwoPool, ScoredTwoPool, Strategy
from pairgen.matching import generate
from pairgen.parser import format_for_path, parse_rows
from pairgen.reader import load_entities

log = logging.getLogger(__name__)


class SessionState(enum.Enum):
    EMPTY = 'empty'
    LOADED = 'loaded'
    PAIRED = 'paired'


@dataclass(frozen=True)
class RosterView:
    """Read-only snapshot of a session for display."""

    state: SessionState
    roster: tuple[Entity, ...]
    result: PairingResult | None
    category_counts: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({}),
    )

    @property
    def total(self) -> int:
        return len(self.roster)

    @property
    def pair_count(self) -> int:
        if self.result is None:
            return 0
        return len(self.result.completed_pairs)

    @property
    def unmatched_count(self) -> int:
        if self.result is None:
            return 0
        return len(self.result.unmatched) + len(self.result.unpaired)


class PairingSession:
    """Holds one roster and its latest pairing result.

    State machine: EMPTY -> LOADED -> PAIRED. A new upload from any state
    replaces the roster and returns to LOADED; regenerating stays in
    PAIRED; reset returns to EMPTY. A failed upload leaves everything
    as it was.
    """

    def __init__(
        self,
        strategy: Strategy,
        rng: random.Random | None = None,
        flatten: bool = False,
    ):
        self.strategy = strategy
        self.flatten = flatten
        self._rng = rng if rng is not None else random.Random()
        self._roster: list[Entity] = []
        self._result: PairingResult | None = None
        self._state = SessionState.EMPTY

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def roster(self) -> tuple[Entity, ...]:
        return tuple(self._roster)

    @property
    def result(self) -> PairingResult | None:
        return self._result

    def upload(self, data: bytes, fmt: str) -> int:
        """Replace the roster with the content of an uploaded file.

        Args:
            data: Raw file content.
            fmt: 'csv' or 'spreadsheet'.

        Returns:
            Number of entities loaded.

        Raises:
            ParseError: If the file cannot be parsed; the session is unchanged.
        """
        rows = parse_rows(data, fmt)
        self._roster = load_entities(rows, self.strategy, flatten=self.flatten)
        self._result = None
        self._state = SessionState.LOADED
        return len(self._roster)

    def upload_file(self, path: str | Path, fmt: str | None = None) -> int:
        """Upload a roster file from disk, inferring the format from its suffix."""
        path = Path(path)
        if fmt is None:
            fmt = format_for_path(path)
        log.info("Lade %s ...", path.name)
        return self.upload(path.read_bytes(), fmt)

    def generate(self) -> PairingResult:
        """Pair the current roster, replacing any previous result.

        Without a loaded roster this is a no-op returning an empty result.
        """
        if self._state is SessionState.EMPTY:
            log.info("Keine Personen geladen - nichts zu paaren")
            return PairingResult()
        self._result = generate(self._roster, self.strategy, rng=self._rng)
        self._state = SessionState.PAIRED
        return self._result

    def reset(self) -> None:
        self._roster = []
        self._result = None
        self._state = SessionState.EMPTY

    def category_counts(self) -> dict[str, int]:
        """Count roster members per category token (empty in shuffle mode)."""
        if not isinstance(self.strategy, (SimpleTwoPool, ScoredTwoPool)):
            return {}
        counts = {c: 0 for c in self.strategy.categories}
        for entity in self._roster:
            if entity.category in counts:
                counts[entity.category] += 1
        return counts

    def view(self) -> RosterView:
        return RosterView(
            state=self._state,
            roster=self.roster,
            result=self._result,
            category_counts=MappingProxyType(self.category_counts()),
        )
