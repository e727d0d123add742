from typing import Optional

import structlog
from aiohttp import web

from blockwatch.core.chain import ChainAPI, ChainFetchError, EthereumRPCClient
from blockwatch.services.watch_store import WatchStore

logger = structlog.get_logger()

STORE_KEY = web.AppKey("store", WatchStore)
CHAIN_KEY = web.AppKey("chain", ChainAPI)


def _require_address(request: web.Request) -> str:
    address = request.query.get("address", "")
    if not address:
        raise web.HTTPBadRequest(text="Address parameter is required")
    return address


async def subscribe(request: web.Request) -> web.Response:
    address = _require_address(request)
    store = request.app[STORE_KEY]

    if await store.subscribe(address):
        return web.Response(text=f"Successfully subscribed to address: {address}")

    logger.debug("Address already subscribed", address=address)
    raise web.HTTPConflict(text="Address already subscribed")


async def transactions(request: web.Request) -> web.Response:
    address = _require_address(request)
    txs = await request.app[STORE_KEY].get_transactions(address)
    logger.debug("Transactions", address=address, count=len(txs))
    return web.json_response([tx.model_dump(mode="json", by_alias=True) for tx in txs])


async def current_block(request: web.Request) -> web.Response:
    block = await request.app[STORE_KEY].current_block()
    return web.Response(text=f"Current block: {block}")


async def parse_block(request: web.Request) -> web.Response:
    raw = request.query.get("block", "")
    # Unsigned 64-bit decimal only
    if not (raw.isascii() and raw.isdigit()) or int(raw) >= 2 ** 64:
        logger.error("Invalid block number", block=raw)
        raise web.HTTPBadRequest(text="Invalid block number")
    block_number = int(raw)

    try:
        matched = await request.app[STORE_KEY].parse_block(block_number)
    except ChainFetchError as e:
        logger.error("Failed to parse block", block=block_number, kind=e.kind.value, error=str(e))
        raise web.HTTPInternalServerError(text="Failed to parse block")

    logger.info("Block parsed successfully", block=block_number, matched=matched)
    return web.Response(text="Block parsed successfully")


async def stats(request: web.Request) -> web.Response:
    return web.json_response(await request.app[STORE_KEY].get_stats())


async def _start_chain(app: web.Application):
    await app[CHAIN_KEY].initialize()


async def _close_chain(app: web.Application):
    await app[CHAIN_KEY].close()


def create_app(chain: Optional[ChainAPI] = None) -> web.Application:
    """Build the HTTP API around a fresh WatchStore"""
    chain = chain or EthereumRPCClient()

    app = web.Application()
    app[CHAIN_KEY] = chain
    app[STORE_KEY] = WatchStore(chain)
    app.on_startup.append(_start_chain)
    app.on_cleanup.append(_close_chain)

    app.add_routes([
        web.route("*", "/subscribe", subscribe),
        web.route("*", "/transactions", transactions),
        web.route("*", "/current-block", current_block),
        web.route("*", "/parse-block", parse_block),
        web.route("*", "/stats", stats),
    ])
    return app
