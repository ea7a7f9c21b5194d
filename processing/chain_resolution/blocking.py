"""
Candidate blocking for large batches.

Buckets records by cheap exact keys so that expensive name scoring only
runs between records that already share something: a phone prefix, a
website domain, the first word of the canonical name, or a nearby
geographic grid cell.
"""

import math
from collections import defaultdict
from typing import Iterable, Optional

from processing.chain_resolution.canonicalizer import canonicalize
from processing.chain_resolution.models import BusinessRecord
from processing.chain_resolution.signals import extract_domain, phone_prefix

# ~50 miles of latitude per cell
DEFAULT_CELL_DEGREES = 0.75


class CandidateIndex:
    """
    Index of records by blocking key.

    Lookups return records in their original pool order so downstream
    scoring stays deterministic.
    """

    def __init__(
        self,
        records: Iterable[BusinessRecord],
        phone_prefix_length: int = 7,
        cell_degrees: float = DEFAULT_CELL_DEGREES,
    ):
        self.records = list(records)
        self.phone_prefix_length = phone_prefix_length
        self.cell_degrees = cell_degrees
        self._buckets: dict[tuple, list[int]] = defaultdict(list)

        for position, record in enumerate(self.records):
            for key in self._record_keys(record):
                self._buckets[key].append(position)

    def __len__(self) -> int:
        return len(self.records)

    def phone_key(self, record: BusinessRecord) -> Optional[tuple]:
        prefix = phone_prefix(record.phone, self.phone_prefix_length)
        return ("phone", prefix) if prefix else None

    def domain_key(self, record: BusinessRecord) -> Optional[tuple]:
        domain = extract_domain(record.website)
        return ("domain", domain) if domain else None

    def name_key(self, record: BusinessRecord) -> Optional[tuple]:
        tokens = canonicalize(record.name).split()
        return ("name", tokens[0]) if tokens else None

    def cell(self, record: BusinessRecord) -> Optional[tuple[int, int]]:
        if record.coordinates is None:
            return None
        return (
            math.floor(record.coordinates.lat / self.cell_degrees),
            math.floor(record.coordinates.lng / self.cell_degrees),
        )

    def _record_keys(self, record: BusinessRecord) -> list[tuple]:
        keys = [self.phone_key(record), self.domain_key(record), self.name_key(record)]
        cell = self.cell(record)
        if cell is not None:
            keys.append(("cell",) + cell)
        return [k for k in keys if k is not None]

    def lookup(self, key: Optional[tuple]) -> list[BusinessRecord]:
        """Records sharing an exact key, in pool order."""
        if key is None:
            return []
        return [self.records[p] for p in self._buckets.get(key, [])]

    def candidates_for(self, subject: BusinessRecord) -> list[BusinessRecord]:
        """All records sharing at least one blocking key with `subject`."""
        positions: set[int] = set()

        for key in (self.phone_key(subject), self.domain_key(subject), self.name_key(subject)):
            if key is not None:
                positions.update(self._buckets.get(key, []))

        cell = self.cell(subject)
        if cell is not None:
            row, col = cell
            for d_row in (-1, 0, 1):
                for d_col in (-1, 0, 1):
                    positions.update(self._buckets.get(("cell", row + d_row, col + d_col), []))

        return [self.records[p] for p in sorted(positions)]
