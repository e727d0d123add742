import asyncio
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from blockwatch.core.chain import Block, ChainAPI, ChainFetchError, EthereumRPCClient, Transaction


class FakeChain(ChainAPI):
    """In-memory block source; unknown blocks come back empty"""

    def __init__(self):
        self.blocks: Dict[int, Block] = {}
        self.error: Optional[ChainFetchError] = None
        self.gate: Optional[asyncio.Event] = None
        self.calls: List[int] = []
        self.initialized = False
        self.closed = False

    async def initialize(self):
        self.initialized = True

    async def close(self):
        self.closed = True

    def add_block(self, number: int, *transactions: Transaction) -> Block:
        block = Block(number=hex(number), transactions=list(transactions))
        self.blocks[number] = block
        return block

    async def get_block(self, block_number: int) -> Block:
        self.calls.append(block_number)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.blocks.get(block_number, Block(number=hex(block_number)))


class FakeRPCEndpoint:
    """Scripted JSON-RPC server, records every request it receives"""

    def __init__(self):
        self.requests: List[Dict[str, Any]] = []
        self.content_types: List[str] = []
        self.status = 200
        self.payload: Any = {"jsonrpc": "2.0", "id": 1, "result": None}
        self.raw_body: Optional[str] = None
        self.delay = 0.0
        self.url = ""

    def reply_block(self, block: Dict[str, Any]):
        self.payload = {"jsonrpc": "2.0", "id": 1, "result": block}

    async def handle(self, request: web.Request) -> web.Response:
        self.content_types.append(request.content_type)
        self.requests.append(await request.json())
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raw_body is not None:
            return web.Response(status=self.status, text=self.raw_body)
        return web.json_response(self.payload, status=self.status)


@pytest.fixture
def fake_chain():
    return FakeChain()


@pytest.fixture
def make_tx():
    def _make_tx(tx_hash: str, from_address: str, to_address: Optional[str],
                 value: str = "0xde0b6b3a7640000", block_number: str = "0x1") -> Transaction:
        return Transaction(
            hash=tx_hash,
            from_address=from_address,
            to_address=to_address,
            value=value,
            block_number=block_number,
        )
    return _make_tx


@pytest_asyncio.fixture
async def rpc_endpoint():
    endpoint = FakeRPCEndpoint()
    app = web.Application()
    app.router.add_post("/", endpoint.handle)
    server = TestServer(app)
    await server.start_server()
    endpoint.url = str(server.make_url("/"))
    yield endpoint
    await server.close()


@pytest_asyncio.fixture
async def rpc_client(rpc_endpoint):
    client = EthereumRPCClient(rpc_endpoint.url, timeout=2)
    await client.initialize()
    yield client
    await client.close()
