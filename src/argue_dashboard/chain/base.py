from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Argument:
    author: str
    content: str
    timestamp: int
    amount: int


@dataclass(frozen=True)
class DebateInfo:
    creator: str
    statement: str
    description: str
    side_a_name: str
    side_b_name: str
    creation_date: int
    end_date: int
    is_resolved: bool
    is_side_a_winner: bool
    locked_a: int
    unlocked_a: int
    locked_b: int
    unlocked_b: int
    winner_reasoning: str
    content_bytes: int
    max_content_bytes: int
    bounty: int

    @property
    def total_side_a(self) -> int:
        return self.locked_a + self.unlocked_a

    @property
    def total_side_b(self) -> int:
        return self.locked_b + self.unlocked_b


@dataclass(frozen=True)
class UserStats:
    total_winnings: int
    total_bets: int
    debates_participated: int
    debates_won: int
    total_claimed: int
    net_profit: int
    win_rate_bps: int


class FactorySource:
    """Read-only view of the debate factory (registry + per-user ledger)."""

    name: str = "base"

    def debate_count(self) -> int:
        raise NotImplementedError

    def active_count(self) -> int:
        raise NotImplementedError

    def resolving_count(self) -> int:
        raise NotImplementedError

    def resolved_count(self) -> int:
        raise NotImplementedError

    def undetermined_count(self) -> int:
        raise NotImplementedError

    def all_debates(self) -> List[str]:
        raise NotImplementedError

    def active_debates(self) -> List[str]:
        raise NotImplementedError

    def user_stats(self, user: str) -> UserStats:
        raise NotImplementedError


class DebateSource:
    """Read-only access to individual debate contracts, addressed per call."""

    name: str = "base"

    def info(self, debate: str) -> DebateInfo:
        raise NotImplementedError

    def status(self, debate: str) -> int:
        raise NotImplementedError

    def arguments_side_a(self, debate: str) -> List[Argument]:
        raise NotImplementedError

    def arguments_side_b(self, debate: str) -> List[Argument]:
        raise NotImplementedError


class MintLogSource:
    """Recipients of token mints, used to count registered users."""

    name: str = "base"

    def minted_recipients(self) -> List[str]:
        raise NotImplementedError
