"""ideamarket CLI — administer the market and token registry."""

import logging
from contextlib import contextmanager

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ideamarket import __version__
from ideamarket.config import Settings, load_settings
from ideamarket.errors import RegistryError

console = Console()


def _settings() -> Settings:
    ctx = click.get_current_context()
    return ctx.find_object(Settings) or load_settings()


def _resolve_dir(registry_dir: str | None) -> str:
    return registry_dir or _settings().registry_dir


def _open_factory(registry_dir: str | None):
    from ideamarket.events import EventLog
    from ideamarket.registry import IdeaTokenFactory, RegistryStore

    registry_dir = _resolve_dir(registry_dir)
    return IdeaTokenFactory(store=RegistryStore(registry_dir), events=EventLog(registry_dir))


@contextmanager
def _registry_errors():
    """Print registry errors as ``[CODE] message`` and exit with status 1."""
    try:
        yield
    except RegistryError as exc:
        console.print(f"  [red]x[/] {escape(f'[{exc.code}]')} {escape(exc.message)}")
        raise click.exceptions.Exit(1)


registry_dir_option = click.option(
    "--registry-dir",
    "-r",
    default=None,
    help="Registry directory (default: settings file, then $IDEAMARKET_REGISTRY_DIR)",
)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Settings YAML with registry_dir, owner and exchange",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config: str | None):
    """ideamarket — market and token registry.

    Markets are created and re-priced by the registry owner; tokens can be
    listed on a market by anyone whose token name the market accepts.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = load_settings(config)


# ── Setup ────────────────────────────────────────────────────────────


@main.command()
@click.argument("owner", required=False)
@click.argument("exchange", required=False)
@registry_dir_option
def init(owner: str | None, exchange: str | None, registry_dir: str | None):
    """Initialize the registry with its OWNER and EXCHANGE identities.

    Either may be omitted when the settings file provides it.
    """
    settings = _settings()
    owner = owner or settings.owner
    exchange = exchange or settings.exchange
    if not owner or not exchange:
        raise click.UsageError("OWNER and EXCHANGE are required (pass them or set them in --config)")

    factory = _open_factory(registry_dir)
    with _registry_errors():
        factory.initialize(owner, exchange)
    console.print(f"  [green]v[/] Registry initialized, owner {escape(owner)}")


@main.command()
@click.argument("seed_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--as", "caller", required=True, help="Identity invoking the command")
@registry_dir_option
def seed(seed_file: str, caller: str, registry_dir: str | None):
    """Create every market listed in a YAML SEED_FILE."""
    from ideamarket.config import load_markets

    factory = _open_factory(registry_dir)
    with _registry_errors():
        for entry in load_markets(seed_file):
            record = factory.add_market(
                entry.name,
                entry.verifier or None,
                entry.base_cost,
                entry.price_rise,
                entry.trading_fee_rate,
                entry.platform_fee_rate,
                caller=caller,
            )
            console.print(f"  [green]v[/] Market #{record.id} {escape(record.name)}")


# ── Markets ──────────────────────────────────────────────────────────


@main.group()
def market():
    """Create, inspect and re-price markets."""


@market.command(name="add")
@click.argument("name")
@click.option("--verifier", default="", help="Name verifier key (see 'ideamarket verifiers')")
@click.option("--base-cost", type=int, required=True)
@click.option("--price-rise", type=int, required=True)
@click.option("--trading-fee", type=int, required=True)
@click.option("--platform-fee", type=int, default=0)
@click.option("--as", "caller", required=True, help="Identity invoking the command")
@registry_dir_option
def add_market(
    name: str,
    verifier: str,
    base_cost: int,
    price_rise: int,
    trading_fee: int,
    platform_fee: int,
    caller: str,
    registry_dir: str | None,
):
    """Create market NAME. Owner only."""
    factory = _open_factory(registry_dir)
    with _registry_errors():
        record = factory.add_market(
            name, verifier or None, base_cost, price_rise, trading_fee, platform_fee, caller=caller
        )
    console.print(f"  [green]v[/] Market #{record.id} {escape(record.name)} created")


@market.command(name="list")
@registry_dir_option
def list_markets(registry_dir: str | None):
    """List all markets."""
    factory = _open_factory(registry_dir)
    records = factory.list_markets()

    if not records:
        console.print("[yellow]No markets yet.[/]")
        return

    table = Table(title=f"Markets ({len(records)})")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Verifier")
    table.add_column("Tokens", justify="right")
    table.add_column("Trading fee", justify="right")
    table.add_column("Platform fee", justify="right")

    for r in records:
        table.add_row(
            str(r.id),
            r.name,
            r.name_verifier.key if r.name_verifier else "-",
            str(r.num_tokens),
            str(r.trading_fee_rate),
            str(r.platform_fee_rate),
        )

    console.print(table)


@market.command(name="show")
@click.argument("market")
@registry_dir_option
def show_market(market: str, registry_dir: str | None):
    """Show one market by ID or name."""
    factory = _open_factory(registry_dir)
    with _registry_errors():
        if market.isdigit():
            r = factory.get_market_details_by_id(int(market))
        else:
            r = factory.get_market_details_by_name(market)

    console.print(f"\n[bold cyan]{escape(r.name)}[/] (#{r.id})")
    console.print(f"  Verifier:      {r.name_verifier.key if r.name_verifier else '-'}")
    console.print(f"  Tokens:        {r.num_tokens}")
    console.print(f"  Base cost:     {r.base_cost}")
    console.print(f"  Price rise:    {r.price_rise}")
    console.print(f"  Trading fee:   {r.trading_fee_rate}")
    console.print(f"  Platform fee:  {r.platform_fee_rate}")


@market.command(name="set-fee")
@click.argument("market_id", type=int)
@click.option("--trading", type=int, default=None, help="New trading fee rate")
@click.option("--platform", type=int, default=None, help="New platform fee rate")
@click.option("--as", "caller", required=True, help="Identity invoking the command")
@registry_dir_option
def set_fee(
    market_id: int,
    trading: int | None,
    platform: int | None,
    caller: str,
    registry_dir: str | None,
):
    """Update the trading and/or platform fee of MARKET_ID. Owner only."""
    if trading is None and platform is None:
        raise click.UsageError("Pass --trading and/or --platform")

    factory = _open_factory(registry_dir)
    with _registry_errors():
        if trading is not None:
            factory.set_trading_fee(market_id, trading, caller=caller)
            console.print(f"  [green]v[/] Trading fee of market #{market_id} set to {trading}")
        if platform is not None:
            factory.set_platform_fee(market_id, platform, caller=caller)
            console.print(f"  [green]v[/] Platform fee of market #{market_id} set to {platform}")


# ── Tokens ───────────────────────────────────────────────────────────


@main.group()
def token():
    """List tokens on markets."""


@token.command(name="add")
@click.argument("name")
@click.argument("market_id", type=int)
@click.option("--as", "caller", default=None, help="Identity invoking the command")
@registry_dir_option
def add_token(name: str, market_id: int, caller: str | None, registry_dir: str | None):
    """Register token NAME on MARKET_ID."""
    factory = _open_factory(registry_dir)
    with _registry_errors():
        record = factory.add_token(name, market_id, caller=caller)
    console.print(f"  [green]v[/] Token {escape(record.name)} is #{record.id} on market #{market_id}")


@token.command(name="list")
@click.argument("market_id", type=int)
@registry_dir_option
def list_tokens(market_id: int, registry_dir: str | None):
    """List the tokens of MARKET_ID."""
    factory = _open_factory(registry_dir)
    with _registry_errors():
        records = factory.list_tokens(market_id)

    if not records:
        console.print("[yellow]No tokens on this market.[/]")
        return

    table = Table(title=f"Tokens on market #{market_id} ({len(records)})")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    for r in records:
        table.add_row(str(r.id), r.name)
    console.print(table)


@token.command(name="show")
@click.argument("market_id", type=int)
@click.argument("token_id", type=int)
@registry_dir_option
def show_token(market_id: int, token_id: int, registry_dir: str | None):
    """Show token TOKEN_ID of MARKET_ID."""
    factory = _open_factory(registry_dir)
    with _registry_errors():
        r = factory.get_token_details(market_id, token_id)
    console.print(f"  [cyan]{escape(r.name)}[/] (market #{r.market_id}, token #{r.id})")


# ── Verifiers and events ─────────────────────────────────────────────


@main.command()
def verifiers():
    """List the available name verifiers."""
    from ideamarket.verifiers import available_verifiers

    for key in available_verifiers():
        console.print(f"  [cyan]{key}[/]")


@main.command()
@click.option("--name", "-n", default=None, help="Only show events with this name")
@click.option("--limit", default=50, help="Maximum number of events")
@registry_dir_option
def events(name: str | None, limit: int, registry_dir: str | None):
    """Show registry events, newest first."""
    from ideamarket.events import EventLog

    entries = EventLog(_resolve_dir(registry_dir)).get_events(name=name, limit=limit)
    if not entries:
        console.print("[yellow]No events recorded.[/]")
        return

    for e in entries:
        args = ", ".join(f"{k}={v}" for k, v in e.args.items())
        console.print(f"  [dim]{e.timestamp}[/] [cyan]{e.name}[/] {escape(args)} [dim]{escape(e.caller)}[/]")


if __name__ == "__main__":
    main()
