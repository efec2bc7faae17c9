# metarmap/board.py
"""
The displayed airport set.

Cycles may finish out of order. Each cycle takes a sequence number when
it starts; a result older than what is already displayed is dropped, so
the newest request always wins regardless of completion order.
"""

import itertools
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from .logging import get_logger
from .observations.category import FlightCategory
from .observations.normalize import MetarObservation

logger = get_logger(__name__)

UNKNOWN_CATEGORY = "Unknown"
CATEGORY_KEYS = [c.value for c in FlightCategory] + [UNKNOWN_CATEGORY]

# Automatic refresh interval
REFRESH_INTERVAL = timedelta(minutes=5)


def category_key(obs: MetarObservation) -> str:
    return obs.flight_category.value if obs.flight_category else UNKNOWN_CATEGORY


class AirportBoard:
    """
    Owns the last rendered result set and the category filters.

    Usage:
        board = AirportBoard()
        seq = board.begin_cycle()
        board.commit(seq, service.run(query).observations)
    """

    def __init__(self, clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self._clock = clock
        self._lock = threading.Lock()
        self._sequence = itertools.count(1)
        self._displayed_seq = 0
        self._airports: List[MetarObservation] = []
        self.selected: Optional[MetarObservation] = None
        self.last_updated: Optional[datetime] = None
        self.filters: Dict[str, bool] = {key: True for key in CATEGORY_KEYS}

    @property
    def airports(self) -> List[MetarObservation]:
        return list(self._airports)

    @property
    def displayed_sequence(self) -> int:
        return self._displayed_seq

    def begin_cycle(self) -> int:
        """Reserve the next sequence number for a starting cycle."""
        with self._lock:
            return next(self._sequence)

    def commit(self, seq: int, observations: List[MetarObservation], search: bool = False) -> bool:
        """
        Apply a finished cycle.

        A full query replaces the set. A search merges new identifiers into
        it and selects the first result.

        Returns:
            False if the result was older than the displayed one and dropped
        """
        with self._lock:
            if seq <= self._displayed_seq:
                logger.info(
                    "metar_cycle_discarded",
                    sequence=seq,
                    displayed_sequence=self._displayed_seq,
                )
                return False
            self._displayed_seq = seq

            if search:
                shown = {a.icao for a in self._airports}
                self._airports = self._airports + [o for o in observations if o.icao not in shown]
                if observations:
                    self.selected = observations[0]
            else:
                self._airports = list(observations)
                if self.selected is not None:
                    refreshed = {o.icao: o for o in observations}
                    self.selected = refreshed.get(self.selected.icao, self.selected)

            self.last_updated = self._clock()
            return True

    def select(self, icao: Optional[str]) -> Optional[MetarObservation]:
        """Select a displayed airport by identifier; None clears the selection."""
        if icao is None:
            self.selected = None
            return None
        icao = icao.upper()
        self.selected = next((a for a in self._airports if a.icao == icao), None)
        return self.selected

    def toggle_filter(self, category: str) -> bool:
        """Flip a category's visibility and return the new state."""
        if category not in self.filters:
            raise KeyError(f"Unknown category: {category}")
        self.filters[category] = not self.filters[category]
        return self.filters[category]

    def category_counts(self) -> Dict[str, int]:
        counts = {key: 0 for key in CATEGORY_KEYS}
        for obs in self._airports:
            counts[category_key(obs)] += 1
        return counts

    def visible(self) -> List[MetarObservation]:
        return [a for a in self._airports if self.filters.get(category_key(a), True)]

    @property
    def visible_count(self) -> int:
        return len(self.visible())

    def needs_refresh(self, now: Optional[datetime] = None) -> bool:
        """True before the first cycle and once the refresh interval has passed."""
        if self.last_updated is None:
            return True
        now = now or self._clock()
        return now - self.last_updated >= REFRESH_INTERVAL
