"""web3.py-backed collaborators and a client for the deployed reader contract."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Sequence

from web3 import Web3

from ..models import AgentStats, AggregateStats, DebateStatus, DebateSummary, ParticipantRecord, PlatformStats
from .abi import DEBATE_ABI, FACTORY_ABI, READER_ABI, TRANSFER_TOPIC, ZERO_TOPIC
from .base import Argument, DebateInfo, DebateSource, FactorySource, MintLogSource, UserStats

LOGGER = logging.getLogger(__name__)


def checksum(address: str) -> str:
    return Web3.to_checksum_address(address)


def decode_argument(raw: Sequence[Any]) -> Argument:
    author, content, timestamp, amount = raw
    return Argument(author=str(author), content=str(content), timestamp=int(timestamp), amount=int(amount))


def decode_info(raw: Sequence[Any]) -> DebateInfo:
    f = list(raw)
    if len(f) != 17:
        raise ValueError(f"debate info tuple has {len(f)} fields, expected 17")
    return DebateInfo(
        creator=str(f[0]),
        statement=str(f[1]),
        description=str(f[2]),
        side_a_name=str(f[3]),
        side_b_name=str(f[4]),
        creation_date=int(f[5]),
        end_date=int(f[6]),
        is_resolved=bool(f[7]),
        is_side_a_winner=bool(f[8]),
        locked_a=int(f[9]),
        unlocked_a=int(f[10]),
        locked_b=int(f[11]),
        unlocked_b=int(f[12]),
        winner_reasoning=str(f[13]),
        content_bytes=int(f[14]),
        max_content_bytes=int(f[15]),
        bounty=int(f[16]),
    )


def decode_user_stats(raw: Sequence[Any]) -> UserStats:
    winnings, bets, participated, won, claimed, net, win_rate = raw
    return UserStats(
        total_winnings=int(winnings),
        total_bets=int(bets),
        debates_participated=int(participated),
        debates_won=int(won),
        total_claimed=int(claimed),
        net_profit=int(net),
        win_rate_bps=int(win_rate),
    )


def topic_to_address(topic: Any) -> str:
    raw = Web3.to_bytes(hexstr=topic) if isinstance(topic, str) else bytes(topic)
    return checksum("0x" + raw[-20:].hex())


class Web3Factory(FactorySource):
    name = "web3"

    def __init__(self, contract: Any):
        self.contract = contract

    @classmethod
    def from_web3(cls, w3: Web3, address: str) -> "Web3Factory":
        return cls(w3.eth.contract(address=checksum(address), abi=FACTORY_ABI))

    def debate_count(self) -> int:
        return int(self.contract.functions.debateCount().call())

    def active_count(self) -> int:
        return int(self.contract.functions.activeCount().call())

    def resolving_count(self) -> int:
        return int(self.contract.functions.resolvingCount().call())

    def resolved_count(self) -> int:
        return int(self.contract.functions.resolvedCount().call())

    def undetermined_count(self) -> int:
        return int(self.contract.functions.undeterminedCount().call())

    def all_debates(self) -> List[str]:
        return [str(a) for a in self.contract.functions.getAllDebates().call()]

    def active_debates(self) -> List[str]:
        return [str(a) for a in self.contract.functions.getActiveDebates().call()]

    def user_stats(self, user: str) -> UserStats:
        return decode_user_stats(self.contract.functions.userStats(checksum(user)).call())


class Web3Debates(DebateSource):
    name = "web3"

    def __init__(self, contract_at: Callable[[str], Any]):
        self._contract_at = contract_at
        self._contracts: Dict[str, Any] = {}

    @classmethod
    def from_web3(cls, w3: Web3) -> "Web3Debates":
        return cls(lambda address: w3.eth.contract(address=checksum(address), abi=DEBATE_ABI))

    def _contract(self, debate: str) -> Any:
        c = self._contracts.get(debate)
        if c is None:
            c = self._contract_at(debate)
            self._contracts[debate] = c
        return c

    def info(self, debate: str) -> DebateInfo:
        return decode_info(self._contract(debate).functions.info().call())

    def status(self, debate: str) -> int:
        return int(self._contract(debate).functions.status().call())

    def arguments_side_a(self, debate: str) -> List[Argument]:
        return [decode_argument(a) for a in self._contract(debate).functions.argumentsSideA().call()]

    def arguments_side_b(self, debate: str) -> List[Argument]:
        return [decode_argument(a) for a in self._contract(debate).functions.argumentsSideB().call()]


class Web3MintLogs(MintLogSource):
    """Recipients of mints (transfers from the zero address) on a token."""

    name = "web3"

    def __init__(self, w3: Web3, token_address: str, from_block: int):
        self.w3 = w3
        self.token_address = checksum(token_address)
        self.from_block = int(from_block)

    def minted_recipients(self) -> List[str]:
        logs = self.w3.eth.get_logs(
            {
                "address": self.token_address,
                "fromBlock": self.from_block,
                "toBlock": "latest",
                "topics": [TRANSFER_TOPIC, ZERO_TOPIC],
            }
        )
        out: List[str] = []
        for log in logs:
            topics = log["topics"]
            if len(topics) >= 3:
                out.append(topic_to_address(topics[2]))
        LOGGER.debug("mint logs: %d entries since block %d", len(out), self.from_block)
        return out


class ContractBatchReader:
    """Same operations as ``BatchReader``, answered by the deployed reader contract."""

    def __init__(self, contract: Any, factory_address: str):
        self.contract = contract
        self._factory_address = factory_address

    @classmethod
    def from_web3(cls, w3: Web3, reader_address: str, factory_address: str) -> "ContractBatchReader":
        return cls(w3.eth.contract(address=checksum(reader_address), abi=READER_ABI), factory_address)

    @property
    def factory_address(self) -> str:
        return self._factory_address

    def platform_stats(self) -> PlatformStats:
        r = self.contract.functions.getPlatformStats().call()
        return PlatformStats(*(int(x) for x in r))

    def debate_summaries(self, debate_addresses: Sequence[str]) -> List[DebateSummary]:
        rows = self.contract.functions.getDebateBasicInfoBatch([checksum(a) for a in debate_addresses]).call()
        return [
            DebateSummary(
                address=str(r[0]),
                creator=str(r[1]),
                end_date=int(r[2]),
                status=DebateStatus(int(r[3])),
                total_side_a=int(r[4]),
                total_side_b=int(r[5]),
                total_bounty=int(r[6]),
                argument_count_a=int(r[7]),
                argument_count_b=int(r[8]),
            )
            for r in rows
        ]

    def agent_stats_batch(self, agent_addresses: Sequence[str]) -> List[AgentStats]:
        rows = self.contract.functions.getBatchAgentStats([checksum(a) for a in agent_addresses]).call()
        return [AgentStats(str(r[0]), *(int(x) for x in r[1:])) for r in rows]

    def argument_authors(self, debate_addresses: Sequence[str], max_results: int) -> List[str]:
        addrs = [checksum(a) for a in debate_addresses]
        return [str(a) for a in self.contract.functions.getArgumentAuthors(addrs, int(max_results)).call()]

    def participant_details(self, debate_addresses: Sequence[str], max_results: int) -> List[ParticipantRecord]:
        addrs = [checksum(a) for a in debate_addresses]
        rows = self.contract.functions.getParticipantDetails(addrs, int(max_results)).call()
        return [ParticipantRecord(str(r[0]), int(r[1]), int(r[2])) for r in rows]

    def debate_creators(self, debate_addresses: Sequence[str]) -> List[str]:
        addrs = [checksum(a) for a in debate_addresses]
        return [str(a) for a in self.contract.functions.getDebateCreators(addrs).call()]

    def aggregate_stats(self, debate_addresses: Sequence[str]) -> AggregateStats:
        r = self.contract.functions.getAggregateStats([checksum(a) for a in debate_addresses]).call()
        return AggregateStats(*(int(x) for x in r))
