# metarmap/ingestion/batch.py
"""
Chunking and per-chunk outcome accumulation for batched upstream calls.

A failed chunk never aborts the batch: its outcome is recorded with the
reason and its records count as empty.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

# Upstream limit on identifiers per call
MAX_IDS_PER_REQUEST = 50


def chunk_ids(ids: Sequence[str], size: int = MAX_IDS_PER_REQUEST) -> List[Tuple[str, ...]]:
    """
    Split identifiers into consecutive chunks of at most `size`.

    Example:
        120 ids with size 50 -> chunks of 50, 50, 20
    """
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    count = math.ceil(len(ids) / size)
    return [tuple(ids[i * size:(i + 1) * size]) for i in range(count)]


@dataclass
class ChunkOutcome:
    """Result of one upstream call."""
    index: int
    ids: Tuple[str, ...]
    success: bool
    records: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None
    status_code: Optional[int] = None
    retrieved_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class BatchResult:
    """Collected chunk outcomes, kept in chunk order."""
    outcomes: List[ChunkOutcome] = field(default_factory=list)

    def add(self, outcome: ChunkOutcome) -> None:
        self.outcomes.append(outcome)
        self.outcomes.sort(key=lambda o: o.index)

    @property
    def records(self) -> List[Dict[str, Any]]:
        """Records of successful chunks concatenated in chunk order."""
        merged: List[Dict[str, Any]] = []
        for outcome in self.outcomes:
            if outcome.success:
                merged.extend(outcome.records)
        return merged

    @property
    def failures(self) -> List[ChunkOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def chunk_count(self) -> int:
        return len(self.outcomes)

    @property
    def all_failed(self) -> bool:
        """True when there was at least one chunk and none succeeded."""
        return bool(self.outcomes) and len(self.failures) == len(self.outcomes)

    def failure_summary(self) -> str:
        return "; ".join(f"chunk {o.index}: {o.error}" for o in self.failures)
