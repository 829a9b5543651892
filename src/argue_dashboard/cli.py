from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict, is_dataclass
from datetime import date
from typing import Any, List, Optional

from .config import env_config
from .dashboard import connect, fetch_dashboard_data
from .http import call_with_retries
from .reader import MalformedResponseError
from .report import write_report
from .storage import save_snapshot

LOGGER = logging.getLogger(__name__)

_DEBATE_COMMANDS = ("debates", "participants", "authors", "creators", "aggregate")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="argue-dashboard")
    p.add_argument("--rpc-url", default=None, help="JSON-RPC endpoint (default: $ARGUE_RPC_URL or Base mainnet)")
    p.add_argument("--factory", default=None, help="Factory contract address")
    p.add_argument("--reader", default=None, help="Reader contract address (backend=contract)")
    p.add_argument("--backend", choices=["local", "contract"], default="local")
    p.add_argument("--proxy", default=None, help="HTTP(S) proxy URL")
    p.add_argument("--max-retries", type=int, default=3)
    p.add_argument("--timeout", type=float, default=30.0)
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("snapshot", help="Fetch the full dashboard and save it")
    s.add_argument("--out", dest="out_dir", default="data")
    s.add_argument("--formats", default="csv,json", help="Comma-separated: csv,json,parquet")
    s.add_argument("--debate-limit", type=int, default=50)
    s.add_argument("--participant-limit", type=int, default=100)
    s.add_argument("--agent-limit", type=int, default=50)
    s.add_argument("--active-only", action="store_true")
    s.add_argument("--no-registrations", dest="include_registrations", action="store_false", default=True)

    sub.add_parser("stats", help="Platform status counters")

    for name in _DEBATE_COMMANDS:
        d = sub.add_parser(name, help=f"{name} over a debate list")
        d.add_argument("debates", nargs="*", help="Debate addresses (default: factory list)")
        d.add_argument("--limit", type=int, default=50, help="Max debates taken from the factory list")
        d.add_argument("--active-only", action="store_true")
        if name in ("participants", "authors"):
            d.add_argument("--max", dest="max_results", type=int, default=100)

    a = sub.add_parser("agents", help="Factory ledger stats per agent")
    a.add_argument("agents", nargs="+")

    return p


def _call(fn, cfg, *args):
    return call_with_retries(fn, cfg, *args, no_retry=(MalformedResponseError,))


def _jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


def _print(value: Any) -> None:
    print(json.dumps(_jsonable(value), indent=2, default=str))


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    snapshot = args.cmd == "snapshot"
    run_kwargs: dict = {}
    if snapshot:
        run_kwargs = dict(
            out_dir=args.out_dir,
            formats=[f.strip() for f in args.formats.split(",") if f.strip()],
            debate_limit=args.debate_limit,
            participant_limit=args.participant_limit,
            agent_limit=args.agent_limit,
            include_registrations=args.include_registrations,
        )

    cfg = env_config(
        rpc_url=args.rpc_url,
        factory_address=args.factory,
        reader_address=args.reader,
        backend=args.backend,
        proxy=args.proxy,
        max_retries=args.max_retries,
        timeout_sec=args.timeout,
        active_only=bool(getattr(args, "active_only", False)),
        **run_kwargs,
    )
    reader, factory, mint_logs = connect(cfg)

    if snapshot:
        as_of = date.today()
        data = fetch_dashboard_data(reader, factory, mint_logs, cfg)
        run_dir = save_snapshot(data, cfg.run.out_dir, as_of, cfg.run.formats)
        write_report(data, run_dir, as_of=as_of.isoformat())
        LOGGER.info("Run completed, data in %s", run_dir)
        return

    if args.cmd == "stats":
        _print(_call(reader.platform_stats, cfg.http))
        return

    if args.cmd == "agents":
        _print(_call(reader.agent_stats_batch, cfg.http, list(args.agents)))
        return

    debates = list(args.debates)
    if not debates:
        list_debates = factory.active_debates if cfg.run.active_only else factory.all_debates
        debates = list(_call(list_debates, cfg.http))[: args.limit]

    if args.cmd == "debates":
        _print(_call(reader.debate_summaries, cfg.http, debates))
    elif args.cmd == "participants":
        _print(_call(reader.participant_details, cfg.http, debates, args.max_results))
    elif args.cmd == "authors":
        _print(_call(reader.argument_authors, cfg.http, debates, args.max_results))
    elif args.cmd == "creators":
        _print(_call(reader.debate_creators, cfg.http, debates))
    elif args.cmd == "aggregate":
        _print(_call(reader.aggregate_stats, cfg.http, debates))


if __name__ == "__main__":
    main()
