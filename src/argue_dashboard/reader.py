"""Stateless batch reader over the debate factory and its debate contracts.

Every operation recomputes from the sources on each call. Lists come back in
scan order: debates in input order, side A before side B, arguments in the
order the debate stores them. Nothing here sorts.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Sequence

from .accumulate import OrderedAddressSet, ParticipantLedger
from .chain.base import Argument, DebateInfo, DebateSource, FactorySource
from .models import AgentStats, AggregateStats, DebateStatus, DebateSummary, ParticipantRecord, PlatformStats

LOGGER = logging.getLogger(__name__)

_SIDES = ("argumentsSideA", "argumentsSideB")


class UpstreamReadError(RuntimeError):
    """A factory or debate read failed; the enclosing operation is abandoned."""


class MalformedResponseError(UpstreamReadError):
    """A read succeeded but returned a value outside its domain. Retrying will not help."""


def _check_max_results(max_results: int) -> int:
    n = int(max_results)
    if n < 0:
        raise ValueError(f"max_results must be >= 0, got {max_results}")
    return n


class BatchReader:
    def __init__(self, factory_address: str, factory: FactorySource, debates: DebateSource):
        self._factory_address = factory_address
        self._factory = factory
        self._debates = debates

    @property
    def factory_address(self) -> str:
        return self._factory_address

    # -- upstream access -------------------------------------------------

    def _read(self, call: str, target: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        except Exception as e:
            raise UpstreamReadError(f"{call} failed for {target}: {e}") from e

    def _info(self, debate: str) -> DebateInfo:
        return self._read("info", debate, self._debates.info, debate)

    def _status(self, debate: str) -> DebateStatus:
        raw = self._read("status", debate, self._debates.status, debate)
        try:
            return DebateStatus(int(raw))
        except (TypeError, ValueError) as e:
            raise MalformedResponseError(f"status failed for {debate}: unknown status value {raw!r}") from e

    def _arguments(self, debate: str, side: str) -> List[Argument]:
        fn = self._debates.arguments_side_a if side == "argumentsSideA" else self._debates.arguments_side_b
        return list(self._read(side, debate, fn, debate))

    # -- operations ------------------------------------------------------

    def platform_stats(self) -> PlatformStats:
        f = self._factory
        target = self._factory_address
        return PlatformStats(
            total_debates=int(self._read("debateCount", target, f.debate_count)),
            active_debates=int(self._read("activeCount", target, f.active_count)),
            resolving_debates=int(self._read("resolvingCount", target, f.resolving_count)),
            resolved_debates=int(self._read("resolvedCount", target, f.resolved_count)),
            undetermined_debates=int(self._read("undeterminedCount", target, f.undetermined_count)),
        )

    def debate_summaries(self, debate_addresses: Sequence[str]) -> List[DebateSummary]:
        """One summary per input address, same order, duplicates included."""
        LOGGER.debug("debate_summaries: %d debates", len(debate_addresses))
        out: List[DebateSummary] = []
        for debate in debate_addresses:
            info = self._info(debate)
            status = self._status(debate)
            side_a = self._arguments(debate, "argumentsSideA")
            side_b = self._arguments(debate, "argumentsSideB")
            out.append(
                DebateSummary(
                    address=debate,
                    creator=info.creator,
                    end_date=int(info.end_date),
                    status=status,
                    total_side_a=info.total_side_a,
                    total_side_b=info.total_side_b,
                    total_bounty=int(info.bounty),
                    argument_count_a=len(side_a),
                    argument_count_b=len(side_b),
                )
            )
        return out

    def agent_stats_batch(self, agent_addresses: Sequence[str]) -> List[AgentStats]:
        """Factory ledger rows, one per input address. No de-duplication."""
        out: List[AgentStats] = []
        for agent in agent_addresses:
            s = self._read("userStats", agent, self._factory.user_stats, agent)
            out.append(
                AgentStats(
                    agent=agent,
                    total_winnings=int(s.total_winnings),
                    total_bets=int(s.total_bets),
                    debates_participated=int(s.debates_participated),
                    debates_won=int(s.debates_won),
                    net_profit=int(s.net_profit),
                    win_rate_bps=int(s.win_rate_bps),
                )
            )
        return out

    def argument_authors(self, debate_addresses: Sequence[str], max_results: int) -> List[str]:
        """Distinct argument authors, stopping as soon as ``max_results`` are found.

        Sides and debates past the stopping point are never read.
        """
        authors = OrderedAddressSet(_check_max_results(max_results))
        if authors.full:
            return []
        for debate in debate_addresses:
            for side in _SIDES:
                for arg in self._arguments(debate, side):
                    authors.add(arg.author)
                    if authors.full:
                        LOGGER.debug("argument_authors: cap %d reached in %s %s", max_results, debate, side)
                        return authors.to_list()
        return authors.to_list()

    def participant_details(self, debate_addresses: Sequence[str], max_results: int) -> List[ParticipantRecord]:
        """Per-author argument counts and stake totals.

        At most ``max_results`` distinct authors are admitted. Authors admitted
        before the cap was hit keep accruing for the rest of the scan; authors
        first seen afterwards are left out entirely.
        """
        ledger = ParticipantLedger(_check_max_results(max_results))
        refused = 0
        for debate in debate_addresses:
            for side in _SIDES:
                for arg in self._arguments(debate, side):
                    if not ledger.record(arg.author, arg.amount):
                        refused += 1
        if refused:
            LOGGER.debug("participant_details: %d arguments from untracked authors skipped", refused)
        return ledger.records()

    def debate_creators(self, debate_addresses: Sequence[str]) -> List[str]:
        creators = OrderedAddressSet(len(debate_addresses))
        for debate in debate_addresses:
            creators.add(self._info(debate).creator)
        return creators.to_list()

    def aggregate_stats(self, debate_addresses: Sequence[str]) -> AggregateStats:
        # single pass; the seen-author set grows with the data, it has no fixed bound
        volume = 0
        bounties = 0
        arguments = 0
        authors = OrderedAddressSet()
        for debate in debate_addresses:
            info = self._info(debate)
            volume += info.total_side_a + info.total_side_b
            bounties += int(info.bounty)
            for side in _SIDES:
                args = self._arguments(debate, side)
                arguments += len(args)
                for arg in args:
                    authors.add(arg.author)
        return AggregateStats(
            total_volume=volume,
            total_bounties=bounties,
            total_arguments=arguments,
            unique_participants=len(authors),
        )
