from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class DebateStatus(IntEnum):
    ACTIVE = 0
    RESOLVING = 1
    RESOLVED = 2
    UNDETERMINED = 3


@dataclass(frozen=True)
class PlatformStats:
    total_debates: int
    active_debates: int
    resolving_debates: int
    resolved_debates: int
    undetermined_debates: int


@dataclass(frozen=True)
class DebateSummary:
    address: str
    creator: str
    end_date: int
    status: DebateStatus
    total_side_a: int
    total_side_b: int
    total_bounty: int
    argument_count_a: int
    argument_count_b: int


@dataclass(frozen=True)
class AgentStats:
    agent: str
    total_winnings: int
    total_bets: int
    debates_participated: int
    debates_won: int
    net_profit: int
    win_rate_bps: int


@dataclass(frozen=True)
class ParticipantRecord:
    participant: str
    total_arguments_written: int
    total_amount_staked: int


@dataclass(frozen=True)
class AggregateStats:
    total_volume: int
    total_bounties: int
    total_arguments: int
    unique_participants: int
