"""
Rent Reclaim CLI
================
Typer + Rich front end over RentReclaimer.

Commands:
    rent-reclaim scan                 read-only scan
    rent-reclaim reclaim --dry-run    show what would be reclaimed
    rent-reclaim reclaim --yes        scan and reclaim without prompting
    rent-reclaim stats                aggregated statistics
    rent-reclaim info                 loaded configuration
    rent-reclaim watch --interval 30  run the full cycle on a timer
"""

import asyncio
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from rent_reclaim.config.settings import ConfigError, ReclaimConfig, Settings
from rent_reclaim.reclaimer.classification import (
    calculate_rent_exemption,
    lamports_to_sol,
    short_address,
)
from rent_reclaim.reclaimer.core import RentReclaimer
from rent_reclaim.reclaimer.models import ReclaimableAccount
from rent_reclaim.reclaimer.scheduler import ReclaimScheduler
from rent_reclaim.shared.system.logging import Logger

app = typer.Typer(
    name="rent-reclaim",
    help="Reclaim rent from sponsored Solana accounts",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def _load_config(require_key: bool = True) -> ReclaimConfig:
    try:
        config = Settings.load(require_key=require_key)
    except ConfigError as e:
        console.print(f"[bold red]❌ {e}[/bold red]")
        raise typer.Exit(1)
    Logger.configure(config.log_dir, config.log_level)
    return config


def build_reclaimer(config: ReclaimConfig) -> RentReclaimer:
    try:
        return RentReclaimer(config)
    except ConfigError as e:
        console.print(f"[bold red]❌ {e}[/bold red]")
        raise typer.Exit(1)


def _sol(lamports: int) -> str:
    return f"{lamports_to_sol(lamports):.6f} SOL"


def _reclaimable_table(reclaimable: List[ReclaimableAccount]) -> Table:
    table = Table(show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Account", style="cyan")
    table.add_column("Reason")
    table.add_column("Rent", justify="right", style="green")
    table.add_column("Rent-exempt min", justify="right", style="dim")
    for i, acct in enumerate(reclaimable, 1):
        table.add_row(
            str(i),
            short_address(acct.address),
            acct.reason.description,
            _sol(acct.estimated_rent),
            _sol(calculate_rent_exemption(acct.account.data_length)),
        )
    return table


async def _scan(reclaimer: RentReclaimer):
    async with reclaimer:
        sponsored = await reclaimer.discover()
        reclaimable = await reclaimer.evaluate(sponsored)
    return sponsored, reclaimable


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: SCAN
# ═══════════════════════════════════════════════════════════════════════════════

@app.command()
def scan():
    """Scan for reclaimable accounts (no transactions sent)."""
    reclaimer = build_reclaimer(_load_config())

    console.print("\n🔍  Scanning …\n")
    sponsored, reclaimable = asyncio.run(_scan(reclaimer))
    console.print(f"📊  {len(sponsored)} sponsored accounts found\n")

    if not reclaimable:
        console.print("[green]✅  Nothing to reclaim right now.[/green]\n")
        return

    console.print(_reclaimable_table(reclaimable))
    total = sum(a.estimated_rent for a in reclaimable)
    console.print(f"\n💰  Total reclaimable : [bold green]{_sol(total)}[/bold green]\n")


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: RECLAIM
# ═══════════════════════════════════════════════════════════════════════════════

@app.command()
def reclaim(
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Print what would happen without sending any transaction",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip the confirmation prompt",
    ),
):
    """
    Scan and reclaim rent from eligible accounts.

    [bold red]⚠️  Sends real transactions unless --dry-run is given.[/bold red]
    """
    config = _load_config()
    reclaimer = build_reclaimer(config)

    if dry_run:
        console.print(Panel.fit("[bold yellow]🧪 DRY-RUN[/bold yellow]: no transactions will be sent", border_style="yellow"))
        sponsored, reclaimable = asyncio.run(_scan(reclaimer))
        console.print(f"📊  {len(sponsored)} sponsored  |  {len(reclaimable)} reclaimable\n")
        if reclaimable:
            console.print(_reclaimable_table(reclaimable))
        total = sum(a.estimated_rent for a in reclaimable)
        console.print(f"\n💰  Would reclaim {_sol(total)} total\n")
        return

    if not yes:
        confirm = typer.confirm(
            f"\n⚠️  LIVE MODE - balances will be sent to {config.treasury_wallet}. Continue?",
            default=False,
        )
        if not confirm:
            console.print("[yellow]Aborted.[/yellow]")
            raise typer.Exit(0)

    async def run_cycle():
        async with reclaimer:
            return await reclaimer.run_full_cycle()

    console.print("\n🔍  Scanning and reclaiming …\n")
    report = asyncio.run(run_cycle())
    console.print(f"📊  Scanned: {len(report.scanned)}   Reclaimable: {len(report.reclaimable)}\n")

    if not report.results:
        console.print("[green]✅  Nothing to reclaim.[/green]\n")
        return

    for i, r in enumerate(report.successful, 1):
        console.print(f"  ✅ {i}. {r.account_address}")
        console.print(f"       Reclaimed : {_sol(r.reclaimed_amount)}")
        console.print(f"       Tx        : {r.signature}\n")

    if report.failed:
        console.print(f"  [red]❌  {len(report.failed)} failed:[/red]\n")
        for r in report.failed:
            console.print(f"     {r.account_address}  →  {r.error}\n")

    console.print(
        f"📈  Summary : {len(report.successful)} ok / {len(report.failed)} failed  |  "
        f"{_sol(report.total_reclaimed)} reclaimed"
    )
    console.print(f"    Treasury: {reclaimer.treasury_address}\n")

    if report.failed:
        raise typer.Exit(2)


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: STATS
# ═══════════════════════════════════════════════════════════════════════════════

@app.command()
def stats():
    """Show current rent statistics."""
    reclaimer = build_reclaimer(_load_config())

    console.print("\n📊  Fetching stats …\n")
    sponsored, reclaimable = asyncio.run(_scan(reclaimer))
    s = reclaimer.get_stats(sponsored, reclaimable)

    table = Table(show_header=False, box=None)
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Fee Payer", reclaimer.signer_address)
    table.add_row("Treasury", reclaimer.treasury_address)
    table.add_row("Accounts monitored", str(s.total_accounts_monitored))
    table.add_row("Rent locked", _sol(s.total_rent_locked))
    table.add_row("Lifetime reclaimed", _sol(s.total_rent_reclaimed))
    table.add_row("Reclaimable now", f"{s.reclaimable_accounts}  ({_sol(s.estimated_reclaimable)})")
    console.print(table)
    console.print()


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: INFO
# ═══════════════════════════════════════════════════════════════════════════════

@app.command()
def info():
    """Print loaded configuration (the signing key is never shown)."""
    config = _load_config(require_key=False)

    console.print("\nℹ️   Configuration\n")
    console.print(f"  RPC URL              : {config.rpc_url}")
    console.print(f"  Treasury             : {config.treasury_wallet}")
    console.print(f"  Min rent threshold   : {_sol(config.min_rent_threshold)}")
    console.print(f"  Inactivity threshold : {config.account_age_threshold} days")
    console.print(f"  Batch delay          : {config.batch_delay_seconds}s")
    console.print(f"  Scan interval        : {config.scan_interval_minutes} minutes")
    console.print(f"  Log directory        : {config.log_dir}\n")


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: WATCH (scheduled job)
# ═══════════════════════════════════════════════════════════════════════════════

@app.command()
def watch(
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        help="Minutes between cycles (default: SCAN_INTERVAL_MINUTES)",
        min=0.1,
    ),
    cycles: Optional[int] = typer.Option(
        None,
        "--cycles",
        help="Stop after this many cycles (default: run forever)",
        min=1,
    ),
):
    """Run scan-and-reclaim on a fixed interval."""
    reclaimer = build_reclaimer(_load_config())
    scheduler = ReclaimScheduler(reclaimer, interval_minutes=interval)

    async def run():
        async with reclaimer:
            await scheduler.run_loop(max_cycles=cycles)

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Shutdown requested.[/yellow]")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
