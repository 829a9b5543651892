import asyncio
import threading
import time

import pytest

from argue_dashboard import dashboard
from argue_dashboard.chain.base import MintLogSource, UserStats
from argue_dashboard.chain.memory import MemoryChain
from argue_dashboard.config import AppConfig, HttpConfig, RunConfig
from argue_dashboard.http import call_with_retries
from argue_dashboard.reader import BatchReader, MalformedResponseError

FACTORY = "0x0692eC85325472Db274082165620829930f2c1F9"
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20
STRANGER = "0x" + "99" * 20
D1 = "0x" + "01" * 20
D2 = "0x" + "02" * 20
D3 = "0x" + "03" * 20
ETH = 10 ** 18


def _cfg(**run_kwargs) -> AppConfig:
    return AppConfig(http=HttpConfig(max_retries=2, backoff_sec=0), run=RunConfig(**run_kwargs))


def _chain() -> MemoryChain:
    chain = MemoryChain(
        users={
            ALICE: UserStats(3 * ETH, 2 * ETH, 2, 1, 0, ETH, 5000),
            BOB: UserStats(0, ETH, 1, 0, 0, -ETH // 2, 0),
        },
        minted=[ALICE.upper().replace("0X", "0x"), STRANGER],
    )
    chain.add_debate(D1, ALICE, side_a=[(ALICE, ETH)], side_b=[(BOB, ETH // 4)],
                     locked_a=ETH, unlocked_a=ETH // 2, bounty=ETH, end_date=86_400)
    chain.add_debate(D2, BOB, side_a=[(BOB, ETH)], status=2, locked_b=2 * ETH)
    chain.add_debate(D3, BOB, status=0)
    return chain


def test_fetch_dashboard_merges_reader_and_factory_views():
    chain = _chain()
    reader = BatchReader(FACTORY, chain, chain)

    data = dashboard.fetch_dashboard_data(reader, chain, chain, _cfg())

    s = data.stats
    assert (s.total_debates, s.active_debates, s.resolved_debates) == (3, 2, 1)
    assert s.total_volume == "3.5"
    assert s.total_bounties == "1"
    assert s.total_arguments == 3
    assert s.unique_participants == 2
    assert s.registered_users == 2
    assert s.registered_not_bet == 1

    assert [d.address for d in data.debates] == [D1, D2, D3]
    first = data.debates[0]
    assert first.total_side_a == "1.5"
    assert first.status_label == "Active"
    assert first.end_date.isoformat() == "1970-01-02T00:00:00+00:00"
    assert data.debates[1].status_label == "Resolved"

    alice, bob = data.agents
    assert alice.address == ALICE
    assert alice.win_rate == 50.0
    assert alice.net_profit == "1"
    assert alice.total_arguments_written == 1
    assert alice.total_amount_bet == "1"
    assert bob.net_profit == "-0.5"
    assert bob.total_arguments_written == 2
    assert bob.total_amount_bet == "1.25"


def test_debate_limit_and_active_only():
    chain = _chain()
    reader = BatchReader(FACTORY, chain, chain)

    data = dashboard.fetch_dashboard_data(reader, chain, chain, _cfg(active_only=True, debate_limit=1))

    assert [d.address for d in data.debates] == [D1]
    assert chain.reads[("info", D3)] == 0


def test_agent_limit_and_participant_limit():
    chain = _chain()
    reader = BatchReader(FACTORY, chain, chain)

    data = dashboard.fetch_dashboard_data(reader, chain, chain, _cfg(participant_limit=2, agent_limit=1))

    assert [a.address for a in data.agents] == [ALICE]


def test_no_participants_skips_agent_lookup():
    chain = MemoryChain()
    chain.add_debate(D1, ALICE)
    reader = BatchReader(FACTORY, chain, chain)

    data = dashboard.fetch_dashboard_data(reader, chain, None, _cfg())

    assert data.agents == []
    assert data.stats.registered_users == 0
    assert not [k for k in chain.reads if k[0] == "userStats"]


class BrokenLogs(MintLogSource):
    def __init__(self):
        self.calls = 0

    def minted_recipients(self):
        self.calls += 1
        raise RuntimeError("log range too large")


def test_registration_failure_counts_none():
    chain = _chain()
    logs = BrokenLogs()

    data = dashboard.fetch_dashboard_data(BatchReader(FACTORY, chain, chain), chain, logs, _cfg())

    assert logs.calls == 2
    assert data.stats.registered_users == 0
    assert data.stats.registered_not_bet == 0
    assert len(data.debates) == 3


def test_reader_failure_fails_the_fetch():
    chain = _chain()
    chain.broken.add(D2)

    with pytest.raises(RuntimeError) as exc:
        dashboard.fetch_dashboard_data(BatchReader(FACTORY, chain, chain), chain, chain, _cfg())
    assert "failed after 2 attempts" in str(exc.value)


def test_call_with_retries_recovers_from_transient_error():
    calls = []

    def flaky(x):
        calls.append(x)
        if len(calls) < 2:
            raise ConnectionError("reset")
        return x * 2

    assert call_with_retries(flaky, HttpConfig(max_retries=3, backoff_sec=0), 21) == 42
    assert calls == [21, 21]


def test_call_with_retries_chains_last_error():
    def boom():
        raise ValueError("nope")

    with pytest.raises(RuntimeError) as exc:
        call_with_retries(boom, HttpConfig(max_retries=2, backoff_sec=0), label="boom")
    assert isinstance(exc.value.__cause__, ValueError)
    assert str(exc.value).startswith("boom failed after 2 attempts")


class SlowReader(BatchReader):
    def __init__(self, chain, release):
        super().__init__(FACTORY, chain, chain)
        self.release = release

    def debate_summaries(self, debate_addresses):
        self.release.wait(5)
        return super().debate_summaries(debate_addresses)


def test_fetch_gives_up_at_timeout_without_waiting_for_reads():
    chain = _chain()
    release = threading.Event()
    started = time.monotonic()
    try:
        with pytest.raises(asyncio.TimeoutError):
            dashboard.fetch_dashboard_data(SlowReader(chain, release), chain, chain, _cfg(fetch_timeout_sec=0.3))
        elapsed = time.monotonic() - started
    finally:
        release.set()
    assert elapsed < 2


def test_malformed_status_is_not_retried():
    chain = _chain()
    chain.set_status(D2, 7)

    with pytest.raises(MalformedResponseError):
        dashboard.fetch_dashboard_data(BatchReader(FACTORY, chain, chain), chain, chain, _cfg())
    assert chain.reads[("status", D2)] == 1


def test_call_with_retries_skips_listed_errors():
    calls = []

    def bad_value():
        calls.append(1)
        raise MalformedResponseError("status 9")

    with pytest.raises(MalformedResponseError):
        call_with_retries(bad_value, HttpConfig(max_retries=3, backoff_sec=0), no_retry=(MalformedResponseError,))
    assert calls == [1]
