import asyncio
import logging
import sys
from typing import Optional, Tuple

import click
import structlog
from aiohttp import web
from rich.console import Console
from rich.table import Table

from blockwatch.config import settings
from blockwatch.core.chain import ChainFetchError, EthereumRPCClient
from blockwatch.services.http_api import create_app
from blockwatch.services.watch_store import WatchStore

logging.basicConfig(level=settings.log_level.upper(), format="%(message)s")

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer() if settings.log_format == "plain" else structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()
console = Console()


@click.group()
def cli():
    """blockwatch - Ethereum address watch-list and transaction cache"""
    pass


@cli.command()
@click.option('--host', default=None, help='Interface to bind (default: SERVER_HOST)')
@click.option('--port', type=int, default=None, help='Port to listen on (default: SERVER_PORT)')
@click.option('--eth-url', default=None, help='JSON-RPC endpoint (default: ETH_URL)')
def serve(host: Optional[str], port: Optional[int], eth_url: Optional[str]):
    """Run the HTTP API"""
    host = host or settings.server_host
    port = port or settings.server_port
    app = create_app(EthereumRPCClient(eth_url))

    logger.info("Server is starting", host=host, port=port, rpc_url=eth_url or settings.eth_url)
    # run_app handles SIGINT/SIGTERM and drains in-flight requests
    web.run_app(
        app,
        host=host,
        port=port,
        shutdown_timeout=settings.shutdown_timeout_seconds,
        print=None,
    )
    logger.info("Server gracefully stopped")


def _non_empty_addresses(ctx, param, value):
    if any(not address for address in value):
        raise click.BadParameter("address must not be empty")
    return value


@cli.command()
@click.argument('block', type=click.IntRange(min=0))
@click.option('--address', '-a', 'addresses', multiple=True, required=True,
              callback=_non_empty_addresses,
              help='Address to watch (repeatable)')
@click.option('--eth-url', default=None, help='JSON-RPC endpoint (default: ETH_URL)')
def parse_block(block: int, addresses: Tuple[str, ...], eth_url: Optional[str]):
    """Parse a single block and show transactions touching the given addresses"""
    async def run() -> bool:
        chain = EthereumRPCClient(eth_url)
        await chain.initialize()
        try:
            store = WatchStore(chain)
            for address in addresses:
                await store.subscribe(address)

            with console.status(f"[bold yellow]Fetching block {block}..."):
                try:
                    matched = await store.parse_block(block)
                except ChainFetchError as e:
                    console.print(f"[red]✗ Failed to parse block {block}: {e}[/red]")
                    return False

            console.print(f"[green]✓ Block {block} parsed, {matched} matching entries[/green]")

            table = Table(title=f"Block {block}", show_header=True)
            table.add_column("Address", style="cyan", no_wrap=True)
            table.add_column("Direction", style="yellow")
            table.add_column("Tx Hash", style="magenta")
            table.add_column("Value", justify="right")

            for address in dict.fromkeys(addresses):
                for tx in await store.get_transactions(address):
                    if tx.from_address == tx.to_address:
                        direction = "self"
                    else:
                        direction = "out" if tx.from_address == address else "in"
                    table.add_row(address, direction, tx.hash, tx.value)

            console.print(table)
            return True
        finally:
            await chain.close()

    if not asyncio.run(run()):
        sys.exit(1)


def main():
    """Main entry point"""
    cli()


if __name__ == "__main__":
    main()
