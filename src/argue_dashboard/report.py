from __future__ import annotations

from dataclasses import asdict
from decimal import Decimal
from pathlib import Path
from typing import List

from .dashboard import AgentRow, DashboardData, DebateRow


def _md_table(rows: List[List[str]], headers: List[str]) -> str:
    if not rows:
        return "_(no rows)_\n"
    widths = [max(len(cell) for cell in column) for column in zip(headers, *rows)]
    lines = [headers, ["-" * w for w in widths]] + rows
    return "".join("| " + " | ".join(c.ljust(w) for c, w in zip(line, widths)) + " |\n" for line in lines)


def _pool(d: DebateRow) -> Decimal:
    return Decimal(d.total_side_a) + Decimal(d.total_side_b)


def _short(address: str) -> str:
    return f"{address[:6]}...{address[-4:]}" if len(address) > 12 else address


def render_report(data: DashboardData, *, as_of: str, top_n: int = 20) -> str:
    md = [f"# Debate market dashboard ({as_of})\n"]
    for key, value in asdict(data.stats).items():
        md.append(f"- {key}: {value}")
    md.append("")

    md.append("\n## Debates by pool size\n")
    debates = sorted(data.debates, key=_pool, reverse=True)[:top_n]
    md.append(
        _md_table(
            [
                [
                    _short(d.address),
                    d.status_label,
                    d.end_date.strftime("%Y-%m-%d %H:%M"),
                    d.total_side_a,
                    d.total_side_b,
                    d.total_bounty,
                    f"{d.argument_count_a}/{d.argument_count_b}",
                ]
                for d in debates
            ],
            ["debate", "status", "ends", "side_a", "side_b", "bounty", "args"],
        )
    )

    md.append("\n## Agents by net profit\n")
    agents: List[AgentRow] = sorted(data.agents, key=lambda a: Decimal(a.net_profit), reverse=True)[:top_n]
    md.append(
        _md_table(
            [
                [
                    str(i + 1),
                    _short(a.address),
                    a.net_profit,
                    a.total_bets,
                    a.total_winnings,
                    f"{a.debates_won}/{a.debates_participated}",
                    f"{a.win_rate:.1f}%",
                    str(a.total_arguments_written),
                ]
                for i, a in enumerate(agents)
            ],
            ["rank", "agent", "net_profit", "bets", "winnings", "won", "win_rate", "arguments"],
        )
    )
    return "\n".join(md)


def write_report(data: DashboardData, run_dir: Path, *, as_of: str, top_n: int = 20) -> Path:
    path = run_dir / "dashboard_report.md"
    path.write_text(render_report(data, as_of=as_of, top_n=top_n), encoding="utf-8")
    return path
