from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

import requests
from web3 import Web3

from .config import ChainConfig, HttpConfig

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

_DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "Connection": "keep-alive",
}


def create_session(cfg: HttpConfig) -> requests.Session:
    s = requests.Session()
    headers = dict(_DEFAULT_HEADERS)
    headers["User-Agent"] = cfg.user_agent
    s.headers.update(headers)

    # Only set proxies if explicitly provided
    if cfg.proxy:
        s.proxies.update({"http": cfg.proxy, "https": cfg.proxy})

    return s


def create_web3(chain: ChainConfig, cfg: HttpConfig, session: Optional[requests.Session] = None) -> Web3:
    provider = Web3.HTTPProvider(
        chain.rpc_url,
        request_kwargs={"timeout": cfg.timeout_sec},
        session=session or create_session(cfg),
    )
    return Web3(provider)


def call_with_retries(
    fn: Callable[..., T],
    cfg: HttpConfig,
    *args: Any,
    label: str = "",
    no_retry: Tuple[Type[BaseException], ...] = (),
    **kwargs: Any,
) -> T:
    """Run a whole read, retrying it with linear backoff.

    Exceptions matching ``no_retry`` are re-raised on the first attempt.
    """
    name = label or getattr(fn, "__name__", "call")
    last_exc: Optional[Exception] = None

    attempts = max(1, int(cfg.max_retries))
    for attempt in range(1, attempts + 1):
        try:
            return fn(*args, **kwargs)
        except no_retry:
            raise
        except Exception as e:
            last_exc = e
            LOGGER.warning("%s failed (attempt %d/%d): %s", name, attempt, attempts, e)
            if attempt < attempts:
                time.sleep(cfg.backoff_sec * attempt)
            continue

    raise RuntimeError(f"{name} failed after {attempts} attempts: {last_exc}") from last_exc
