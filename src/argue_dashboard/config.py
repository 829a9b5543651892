from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

DEFAULT_RPC_URL = "https://mainnet.base.org"
FACTORY_ADDRESS = "0x0692eC85325472Db274082165620829930f2c1F9"
READER_ADDRESS = "0xeA28C45B8ee9DA8c4343D964dDA9faf5109d478A"
LOCKED_TOKEN_ADDRESS = "0x2FA376c24d5B7cfAC685d3BB6405f1af9Ea8EE40"


@dataclass(frozen=True)
class ChainConfig:
    rpc_url: str = DEFAULT_RPC_URL
    factory_address: str = FACTORY_ADDRESS
    reader_address: str = READER_ADDRESS
    locked_token_address: str = LOCKED_TOKEN_ADDRESS
    registration_from_block: int = 26_000_000
    backend: str = "local"  # "local" | "contract"


@dataclass(frozen=True)
class HttpConfig:
    proxy: Optional[str] = None
    timeout_sec: float = 30.0
    max_retries: int = 3
    backoff_sec: float = 1.5
    user_agent: str = "argue-dashboard/0.1"


@dataclass(frozen=True)
class RunConfig:
    debate_limit: int = 50
    participant_limit: int = 100
    agent_limit: int = 50
    active_only: bool = False

    out_dir: str = "data"
    formats: Tuple[str, ...] = ("csv", "json")

    fetch_timeout_sec: float = 120.0
    include_registrations: bool = True


@dataclass(frozen=True)
class AppConfig:
    chain: ChainConfig = field(default_factory=ChainConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    run: RunConfig = field(default_factory=RunConfig)


def env_config(
    *,
    rpc_url: Optional[str] = None,
    factory_address: Optional[str] = None,
    reader_address: Optional[str] = None,
    backend: str = "local",
    proxy: Optional[str] = None,
    max_retries: int = 3,
    timeout_sec: float = 30.0,
    debate_limit: int = 50,
    participant_limit: int = 100,
    agent_limit: int = 50,
    active_only: bool = False,
    out_dir: str = "data",
    formats: Sequence[str] = ("csv", "json"),
    include_registrations: bool = True,
) -> AppConfig:
    if backend not in ("local", "contract"):
        raise ValueError(f"backend must be 'local' or 'contract', got {backend!r}")

    chain = ChainConfig(
        rpc_url=rpc_url or os.environ.get("ARGUE_RPC_URL") or DEFAULT_RPC_URL,
        factory_address=factory_address or os.environ.get("ARGUE_FACTORY_ADDRESS") or FACTORY_ADDRESS,
        reader_address=reader_address or os.environ.get("ARGUE_READER_ADDRESS") or READER_ADDRESS,
        backend=backend,
    )

    # If not passed, allow ARGUE_PROXY or HTTPS_PROXY/HTTP_PROXY
    p = proxy or os.environ.get("ARGUE_PROXY") or os.environ.get("HTTPS_PROXY") or os.environ.get("HTTP_PROXY")
    http = HttpConfig(proxy=p, max_retries=max_retries, timeout_sec=timeout_sec)

    run = RunConfig(
        debate_limit=debate_limit,
        participant_limit=participant_limit,
        agent_limit=agent_limit,
        active_only=active_only,
        out_dir=out_dir,
        formats=tuple(formats),
        include_registrations=include_registrations,
    )
    return AppConfig(chain=chain, http=http, run=run)
