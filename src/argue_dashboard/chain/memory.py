from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .base import Argument, DebateInfo, DebateSource, FactorySource, MintLogSource, UserStats


def make_info(creator: str, *, end_date: int = 0, locked_a: int = 0, unlocked_a: int = 0, locked_b: int = 0,
              unlocked_b: int = 0, bounty: int = 0, statement: str = "") -> DebateInfo:
    return DebateInfo(
        creator=creator,
        statement=statement,
        description="",
        side_a_name="A",
        side_b_name="B",
        creation_date=0,
        end_date=end_date,
        is_resolved=False,
        is_side_a_winner=False,
        locked_a=locked_a,
        unlocked_a=unlocked_a,
        locked_b=locked_b,
        unlocked_b=unlocked_b,
        winner_reasoning="",
        content_bytes=0,
        max_content_bytes=0,
        bounty=bounty,
    )


def make_arguments(pairs: Iterable[Tuple[str, int]]) -> List[Argument]:
    return [Argument(author=a, content="", timestamp=i, amount=amt) for i, (a, amt) in enumerate(pairs)]


@dataclass
class MemoryDebate:
    info: DebateInfo
    status: int = 0
    side_a: List[Argument] = field(default_factory=list)
    side_b: List[Argument] = field(default_factory=list)


class MemoryChain(FactorySource, DebateSource, MintLogSource):
    """Deterministic in-memory factory + debates.

    Every read is tallied in ``reads`` keyed by ``(call, address)`` so tests can
    assert which contracts were touched. Addresses listed in ``broken`` raise on
    any debate read, the way a reverting contract would.
    """

    name = "memory"

    def __init__(
        self,
        debates: Optional[Dict[str, MemoryDebate]] = None,
        *,
        users: Optional[Dict[str, UserStats]] = None,
        minted: Sequence[str] = (),
        broken: Iterable[str] = (),
    ):
        self.debates: Dict[str, MemoryDebate] = dict(debates or {})
        self.users: Dict[str, UserStats] = dict(users or {})
        self.minted = list(minted)
        self.broken = set(broken)
        self.reads: Counter = Counter()

    def add_debate(self, address: str, creator: str, *, side_a: Iterable[Tuple[str, int]] = (),
                   side_b: Iterable[Tuple[str, int]] = (), status: int = 0, **info_kwargs) -> None:
        self.debates[address] = MemoryDebate(
            info=make_info(creator, **info_kwargs),
            status=status,
            side_a=make_arguments(side_a),
            side_b=make_arguments(side_b),
        )

    def set_status(self, address: str, status: int) -> None:
        self.debates[address] = replace(self.debates[address], status=status)

    def _debate(self, call: str, address: str) -> MemoryDebate:
        self.reads[(call, address)] += 1
        if address in self.broken or address not in self.debates:
            raise RuntimeError(f"execution reverted: {call} on {address}")
        return self.debates[address]

    def _count_status(self, status: int) -> int:
        return sum(1 for d in self.debates.values() if d.status == status)

    # factory
    def debate_count(self) -> int:
        self.reads[("debateCount", "")] += 1
        return len(self.debates)

    def active_count(self) -> int:
        return self._count_status(0)

    def resolving_count(self) -> int:
        return self._count_status(1)

    def resolved_count(self) -> int:
        return self._count_status(2)

    def undetermined_count(self) -> int:
        return self._count_status(3)

    def all_debates(self) -> List[str]:
        return list(self.debates)

    def active_debates(self) -> List[str]:
        return [a for a, d in self.debates.items() if d.status == 0]

    def user_stats(self, user: str) -> UserStats:
        self.reads[("userStats", user)] += 1
        return self.users.get(user, UserStats(0, 0, 0, 0, 0, 0, 0))

    # debates
    def info(self, debate: str) -> DebateInfo:
        return self._debate("info", debate).info

    def status(self, debate: str) -> int:
        return self._debate("status", debate).status

    def arguments_side_a(self, debate: str) -> List[Argument]:
        return list(self._debate("argumentsSideA", debate).side_a)

    def arguments_side_b(self, debate: str) -> List[Argument]:
        return list(self._debate("argumentsSideB", debate).side_b)

    # mint logs
    def minted_recipients(self) -> List[str]:
        return list(self.minted)
