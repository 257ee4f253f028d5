"""
Dutch Auction CLI - Command Line Interface

Main entry point for all CLI commands.
"""

import click

from dutchauction.utils.logger import setup_logging


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--config", "config_path", default=None, type=click.Path(), help="dotenv config file")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, config_path):
    """Dutch auction engine - descending-price auctions over discrete steps"""
    import logging
    from dutchauction.core.config import load_config

    try:
        cfg = load_config(config_path)
        level = logging.DEBUG if debug else cfg.level
    except (FileNotFoundError, ValueError) as exc:
        raise click.BadParameter(str(exc), param_hint="--config")

    setup_logging(level=level, log_dir=str(cfg.log_dir), log_to_file=cfg.log_to_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


def _params_from(ctx, reserve, duration, decrement):
    from dutchauction.core.auction import AuctionParams
    from dutchauction.core.errors import InvalidAuctionParams

    cfg = ctx.obj["config"]
    try:
        return AuctionParams.create(
            reserve_price=cfg.reserve_price if reserve is None else reserve,
            duration_steps=cfg.duration_steps if duration is None else duration,
            price_decrement=cfg.price_decrement if decrement is None else decrement,
        )
    except InvalidAuctionParams as exc:
        raise click.UsageError(str(exc))


def schedule_options(fn):
    fn = click.option("--decrement", type=int, default=None, help="Price drop per step")(fn)
    fn = click.option("--duration", type=int, default=None, help="Steps the auction stays open")(fn)
    fn = click.option("--reserve", type=int, default=None, help="Reserve (floor) price")(fn)
    return fn


# =============================================================================
# Pricing Commands
# =============================================================================


@cli.command("schedule")
@schedule_options
@click.option("--extra", default=1, type=int, help="Steps to show past the duration")
@click.pass_context
def schedule(ctx, reserve, duration, decrement, extra):
    """Print the price at every elapsed step"""
    from dutchauction.core.auction import price_schedule

    params = _params_from(ctx, reserve, duration, decrement)

    click.echo(f"Initial price: {params.initial_price}")
    click.echo(f"Reserve price: {params.reserve_price}")
    click.echo("-" * 40)
    click.echo(f"  {'step':>6}  {'price':>10}  state")
    for elapsed, price in price_schedule(params, extra_steps=max(extra, 0)):
        state = "OPEN" if elapsed <= params.duration_steps else "EXPIRED"
        click.echo(f"  {elapsed:>6}  {price:>10}  {state}")


@cli.command("price")
@schedule_options
@click.option("--elapsed", required=True, type=int, help="Elapsed steps since creation")
@click.pass_context
def price(ctx, reserve, duration, decrement, elapsed):
    """Print the price after a number of elapsed steps"""
    from dutchauction.core.auction import current_price

    if elapsed < 0:
        raise click.BadParameter("must be >= 0", param_hint="--elapsed")

    params = _params_from(ctx, reserve, duration, decrement)
    click.echo(current_price(params, 0, elapsed))


# =============================================================================
# Config Command
# =============================================================================


@cli.command("config")
@click.pass_context
def show_config(ctx):
    """Show the effective configuration"""
    cfg = ctx.obj["config"]

    click.echo("Dutch Auction Configuration")
    click.echo("-" * 40)
    click.echo(f"  Reserve price:   {cfg.reserve_price}")
    click.echo(f"  Duration steps:  {cfg.duration_steps}")
    click.echo(f"  Price decrement: {cfg.price_decrement}")
    click.echo(f"  Log level:       {cfg.log_level}")
    click.echo(f"  Log to file:     {cfg.log_to_file} ({cfg.log_dir})")


# =============================================================================
# Demo Command
# =============================================================================


@cli.command("demo")
@click.option(
    "--variant",
    type=click.Choice(["basic", "collectible", "token"]),
    default="basic",
    help="Auction variant to run",
)
@click.pass_context
def demo(ctx, variant):
    """Run an end-to-end auction on a local chain"""
    from dutchauction.core.assets import CollectibleRegistry, FungibleToken
    from dutchauction.core.auction import (
        create_basic_auction,
        create_collectible_auction,
        create_token_bid_auction,
    )
    from dutchauction.core.chain import Chain
    from dutchauction.core.errors import AuctionError
    from dutchauction.crypto import generate_keypair, bytes_to_hex

    params = ctx.obj["config"].to_params()

    click.echo("=" * 60)
    click.echo(f"  DUTCH AUCTION - DEMO ({variant})")
    click.echo("=" * 60)
    click.echo()

    seller = generate_keypair().address
    alice = generate_keypair().address
    bob = generate_keypair().address

    chain = Chain()
    chain.ledger.create_genesis([(alice, 10 * params.initial_price), (bob, 10 * params.initial_price)])

    token = None
    registry = None
    collectible_id = None
    if variant in ("collectible", "token"):
        registry = CollectibleRegistry("Ridiculous Dragons", "RDG", owner=seller)
        collectible_id = registry.mint(seller, seller, "ipfs://dragon/0")
        click.echo(f"🐉 Minted {registry.symbol} #{collectible_id} to seller")
    if variant == "token":
        token = FungibleToken("Bid Token", "BID", owner=seller)
        token.mint(seller, alice, 2 * params.initial_price)
        click.echo(f"💰 Minted {2 * params.initial_price} {token.symbol} to alice")

    if variant == "basic":
        auction = create_basic_auction(chain, seller, params)
    elif variant == "collectible":
        auction = create_collectible_auction(chain, registry, collectible_id, seller, params)
    else:
        auction = create_token_bid_auction(chain, token, registry, collectible_id, seller, params)

    if registry is not None:
        registry.approve(seller, auction.address, collectible_id)

    click.echo(f"🏛️  Auction deployed at {bytes_to_hex(auction.address)} (block {chain.block_number})")
    click.echo(f"  Initial price: {auction.initial_price}")
    click.echo()

    chain.mine(5)
    now_price = auction.current_price(chain.block_number)
    click.echo(f"⏳ Mined 5 blocks, price now {now_price}")

    # Bids land in the next block, one step cheaper than the price read above
    bid_price = auction.current_price(chain.block_number + 1)

    def submit(bidder, label, amount):
        try:
            receipt = chain.transact(auction.bid, bidder, amount)
            click.echo(f"  ✓ {label} won with {amount} at block {receipt.step}")
        except AuctionError as exc:
            click.echo(f"  ✗ {label} bid {amount} rejected: {exc}")

    click.echo("🔨 Bidding...")
    submit(alice, "alice", bid_price - 1)
    if token is not None:
        # Next bid is another block later
        bid_price = auction.current_price(chain.block_number + 1)
        submit(alice, "alice (no allowance)", bid_price)
        token.approve(alice, auction.address, bid_price)
        click.echo(f"  alice approved {bid_price} {token.symbol}")
    bid_price = auction.current_price(chain.block_number + 1)
    submit(alice, "alice", bid_price)
    submit(bob, "bob", bid_price * 2)
    click.echo()

    click.echo("📊 Final State:")
    click.echo(f"  Winner: {bytes_to_hex(auction.winner) if auction.winner else 'none'}")
    click.echo(f"  State: {auction.state_at(chain.block_number).name}")
    if token is not None:
        click.echo(f"  Seller {token.symbol}: {token.balance_of(seller)}")
    else:
        click.echo(f"  Seller balance: {chain.ledger.get_balance(seller)}")
    if registry is not None:
        owner = registry.owner_of(collectible_id)
        click.echo(f"  {registry.symbol} #{collectible_id} owner is winner: {owner == auction.winner}")
    click.echo()
    click.echo("✅ Demo complete!")


if __name__ == "__main__":
    cli()
