"""Order-preserving de-duplication and accrual primitives.

Both structures remember the order in which each address was first admitted.
Membership is exact address equality; callers normalise case beforehand if
they need case-insensitive matching.
"""
from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from .models import ParticipantRecord


class OrderedAddressSet:
    """Insertion-ordered set of addresses with an optional admission cap."""

    def __init__(self, capacity: Optional[int] = None):
        if capacity is not None and capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        self._seen: Dict[str, None] = {}

    def __contains__(self, address: object) -> bool:
        return address in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    def __iter__(self) -> Iterator[str]:
        return iter(self._seen)

    @property
    def full(self) -> bool:
        return self.capacity is not None and len(self._seen) >= self.capacity

    def add(self, address: str) -> bool:
        """Admit ``address`` if unseen and capacity allows. Returns True if newly added."""
        if address in self._seen or self.full:
            return False
        self._seen[address] = None
        return True

    def to_list(self) -> List[str]:
        return list(self._seen)


class ParticipantLedger:
    """Per-address argument count and stake totals.

    Once ``capacity`` distinct participants are tracked, new addresses are
    refused but already tracked ones keep accruing.
    """

    def __init__(self, capacity: Optional[int] = None):
        self._order = OrderedAddressSet(capacity)
        self._totals: Dict[str, Tuple[int, int]] = {}

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, address: object) -> bool:
        return address in self._order

    def record(self, author: str, amount: int) -> bool:
        """Fold one argument in. Returns False when the author was refused."""
        if author not in self._order and not self._order.add(author):
            return False
        count, staked = self._totals.get(author, (0, 0))
        self._totals[author] = (count + 1, staked + int(amount))
        return True

    def records(self) -> List[ParticipantRecord]:
        out: List[ParticipantRecord] = []
        for address in self._order:
            count, staked = self._totals[address]
            out.append(ParticipantRecord(participant=address, total_arguments_written=count, total_amount_staked=staked))
        return out
