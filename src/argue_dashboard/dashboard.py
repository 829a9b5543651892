"""Client-side aggregation: fetch reader views concurrently and merge for display."""
from __future__ import annotations

import asyncio
import functools
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence, Set, Tuple

from .chain.base import FactorySource, MintLogSource
from .chain.web3_source import ContractBatchReader, Web3Debates, Web3Factory, Web3MintLogs
from .config import AppConfig, HttpConfig
from .formatting import format_units, status_label, timestamp_to_datetime, win_rate_percent
from .http import call_with_retries, create_web3
from .models import AgentStats, AggregateStats, DebateSummary, ParticipantRecord, PlatformStats
from .reader import BatchReader, MalformedResponseError

LOGGER = logging.getLogger(__name__)

_MAX_WORKERS = 6


@dataclass
class DashboardStats:
    total_debates: int
    active_debates: int
    resolving_debates: int
    resolved_debates: int
    undetermined_debates: int
    total_volume: str
    total_bounties: str
    total_arguments: int
    unique_participants: int
    registered_users: int
    registered_not_bet: int


@dataclass
class DebateRow:
    address: str
    creator: str
    end_date: datetime
    status: int
    status_label: str
    total_side_a: str
    total_side_b: str
    total_bounty: str
    argument_count_a: int
    argument_count_b: int


@dataclass
class AgentRow:
    address: str
    total_winnings: str
    total_bets: str
    debates_participated: int
    debates_won: int
    net_profit: str
    win_rate: float
    total_arguments_written: int
    total_amount_bet: str


@dataclass
class DashboardData:
    stats: DashboardStats
    debates: List[DebateRow] = field(default_factory=list)
    agents: List[AgentRow] = field(default_factory=list)


def build_dashboard(
    platform: PlatformStats,
    aggregate: AggregateStats,
    summaries: Sequence[DebateSummary],
    participants: Sequence[ParticipantRecord],
    agent_stats: Sequence[AgentStats],
    registered: Set[str],
) -> DashboardData:
    """Merge raw reader output into display rows. Address matching is case-insensitive."""
    bettors = {p.participant.lower() for p in participants}
    registered_lc = {a.lower() for a in registered}

    stats = DashboardStats(
        total_debates=platform.total_debates,
        active_debates=platform.active_debates,
        resolving_debates=platform.resolving_debates,
        resolved_debates=platform.resolved_debates,
        undetermined_debates=platform.undetermined_debates,
        total_volume=format_units(aggregate.total_volume),
        total_bounties=format_units(aggregate.total_bounties),
        total_arguments=aggregate.total_arguments,
        unique_participants=aggregate.unique_participants,
        registered_users=len(registered_lc),
        registered_not_bet=len(registered_lc - bettors),
    )

    debates = [
        DebateRow(
            address=d.address,
            creator=d.creator,
            end_date=timestamp_to_datetime(d.end_date),
            status=int(d.status),
            status_label=status_label(d.status),
            total_side_a=format_units(d.total_side_a),
            total_side_b=format_units(d.total_side_b),
            total_bounty=format_units(d.total_bounty),
            argument_count_a=d.argument_count_a,
            argument_count_b=d.argument_count_b,
        )
        for d in summaries
    ]

    by_address = {p.participant.lower(): p for p in participants}
    agents: List[AgentRow] = []
    for a in agent_stats:
        extra = by_address.get(a.agent.lower())
        agents.append(
            AgentRow(
                address=a.agent,
                total_winnings=format_units(a.total_winnings),
                total_bets=format_units(a.total_bets),
                debates_participated=a.debates_participated,
                debates_won=a.debates_won,
                net_profit=format_units(a.net_profit),
                win_rate=win_rate_percent(a.win_rate_bps),
                total_arguments_written=extra.total_arguments_written if extra else 0,
                total_amount_bet=format_units(extra.total_amount_staked) if extra else "0",
            )
        )

    return DashboardData(stats=stats, debates=debates, agents=agents)


_NO_RETRY = (MalformedResponseError,)


async def _in_thread(pool: Optional[Executor], fn: Callable[..., Any], cfg: HttpConfig, *args: Any, label: str) -> Any:
    loop = asyncio.get_running_loop()
    call = functools.partial(call_with_retries, fn, cfg, *args, label=label, no_retry=_NO_RETRY)
    return await loop.run_in_executor(pool, call)


async def _registered_users(pool: Optional[Executor], mint_logs: Optional[MintLogSource], cfg: AppConfig) -> Set[str]:
    if mint_logs is None or not cfg.run.include_registrations:
        return set()
    try:
        recipients = await _in_thread(pool, mint_logs.minted_recipients, cfg.http, label="minted_recipients")
    except RuntimeError as e:
        LOGGER.warning("Failed to fetch registered users, counting none: %s", e)
        return set()
    return {r.lower() for r in recipients}


async def gather_dashboard(
    reader: Any,
    factory: FactorySource,
    mint_logs: Optional[MintLogSource],
    cfg: AppConfig,
    pool: Optional[Executor] = None,
) -> DashboardData:
    run = cfg.run
    list_debates = factory.active_debates if run.active_only else factory.all_debates

    platform, listed = await asyncio.gather(
        _in_thread(pool, reader.platform_stats, cfg.http, label="platform_stats"),
        _in_thread(pool, list_debates, cfg.http, label="debate list"),
    )
    debates = list(listed)[: run.debate_limit]
    LOGGER.info("Querying %d of %d debates", len(debates), len(listed))

    aggregate, summaries, participants, registered = await asyncio.gather(
        _in_thread(pool, reader.aggregate_stats, cfg.http, debates, label="aggregate_stats"),
        _in_thread(pool, reader.debate_summaries, cfg.http, debates, label="debate_summaries"),
        _in_thread(pool, reader.participant_details, cfg.http, debates, run.participant_limit, label="participant_details"),
        _registered_users(pool, mint_logs, cfg),
    )

    agent_addresses = [p.participant for p in participants][: run.agent_limit]
    agent_stats: List[AgentStats] = []
    if agent_addresses:
        agent_stats = await _in_thread(pool, reader.agent_stats_batch, cfg.http, agent_addresses, label="agent_stats_batch")
    LOGGER.info("Fetched %d debates, %d participants, %d agents", len(summaries), len(participants), len(agent_stats))

    return build_dashboard(platform, aggregate, summaries, participants, agent_stats, registered)


def fetch_dashboard_data(
    reader: Any,
    factory: FactorySource,
    mint_logs: Optional[MintLogSource],
    cfg: AppConfig,
) -> DashboardData:
    """Fetch and merge everything, giving up after ``fetch_timeout_sec``.

    On timeout the caller gets ``asyncio.TimeoutError`` right away; reads
    already in flight are abandoned and may still finish in the background.
    """
    pool = ThreadPoolExecutor(max_workers=_MAX_WORKERS, thread_name_prefix="argue-read")
    try:
        return asyncio.run(
            asyncio.wait_for(gather_dashboard(reader, factory, mint_logs, cfg, pool), timeout=cfg.run.fetch_timeout_sec)
        )
    finally:
        pool.shutdown(wait=False, cancel_futures=True)


def connect(cfg: AppConfig) -> Tuple[Any, FactorySource, MintLogSource]:
    """Wire web3-backed sources and the configured reader backend."""
    w3 = create_web3(cfg.chain, cfg.http)
    factory = Web3Factory.from_web3(w3, cfg.chain.factory_address)
    mint_logs = Web3MintLogs(w3, cfg.chain.locked_token_address, cfg.chain.registration_from_block)
    if cfg.chain.backend == "contract":
        reader: Any = ContractBatchReader.from_web3(w3, cfg.chain.reader_address, cfg.chain.factory_address)
    else:
        reader = BatchReader(cfg.chain.factory_address, factory, Web3Debates.from_web3(w3))
    LOGGER.info("Connected to %s (backend=%s)", cfg.chain.rpc_url, cfg.chain.backend)
    return reader, factory, mint_logs
