import asyncio
import json
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List, Optional

import aiohttp
import structlog
from aiohttp import ClientSession
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from blockwatch.config import settings

logger = structlog.get_logger()


class Transaction(BaseModel):
    """Ethereum transaction as returned by eth_getBlockByNumber, hex fields kept as-is"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    hash: str
    from_address: str = Field(alias="from")
    to_address: Optional[str] = Field(None, alias="to")  # None for contract creation
    value: str
    block_number: Optional[str] = Field(None, alias="blockNumber")


class Block(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: str
    transactions: List[Transaction] = Field(default_factory=list)

    @property
    def height(self) -> int:
        return int(self.number, 16)


class RPCErrorPayload(BaseModel):
    """Standard JSON-RPC 2.0 error object"""
    code: int
    message: str


class FetchErrorKind(str, Enum):
    TRANSPORT = "transport"
    DECODE = "decode"
    RPC = "rpc"


class ChainFetchError(Exception):
    """Base exception for block fetch failures"""
    kind: FetchErrorKind


class ChainTransportError(ChainFetchError):
    kind = FetchErrorKind.TRANSPORT


class ChainDecodeError(ChainFetchError):
    kind = FetchErrorKind.DECODE


class ChainRPCError(ChainFetchError):
    kind = FetchErrorKind.RPC

    def __init__(self, code: Optional[int], message: str):
        self.code = code
        self.message = message
        if code is None:
            super().__init__(f"RPC error: {message}")
        else:
            super().__init__(f"RPC error {code}: {message}")


class ChainAPI(ABC):
    """Abstract base class for block sources"""

    async def initialize(self):
        """Acquire any resources needed to talk to the chain"""

    async def close(self):
        """Release resources acquired by initialize()"""

    @abstractmethod
    async def get_block(self, block_number: int) -> Block:
        """Fetch a block with full transaction objects"""
        pass


class EthereumRPCClient(ChainAPI):
    """Ethereum JSON-RPC implementation, one POST per call, no retries"""

    def __init__(self, rpc_url: Optional[str] = None, timeout: Optional[float] = None):
        self.rpc_url = rpc_url or settings.eth_url
        self.timeout = timeout or settings.rpc_timeout_seconds
        self.session: Optional[ClientSession] = None
        self.logger = logger.bind(component="chain_client")

    async def initialize(self):
        """Initialize HTTP session"""
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={'User-Agent': 'blockwatch/0.1'}
        )
        self.logger.info("Chain client initialized", rpc_url=self.rpc_url, timeout=self.timeout)

    async def close(self):
        """Close HTTP session"""
        if self.session:
            await self.session.close()
            self.session = None

    async def get_block(self, block_number: int) -> Block:
        result = await self._call("eth_getBlockByNumber", [hex(block_number), True])

        if result is None:
            # Unknown block decodes to an empty one, nothing to match
            return Block(number=hex(block_number))

        try:
            return Block.model_validate(result)
        except ValidationError as e:
            raise ChainDecodeError(f"Malformed block {block_number}: {e}") from e

    async def _call(self, method: str, params: List[Any]) -> Any:
        if not self.session:
            raise RuntimeError("Chain client not initialized")

        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": 1,
        }

        try:
            async with self.session.post(self.rpc_url, json=payload) as response:
                body = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.error("RPC request failed", method=method, error=str(e))
            raise ChainTransportError(f"Request failed: {e!r}") from e

        try:
            envelope = json.loads(body)
        except ValueError as e:
            raise ChainDecodeError(f"Invalid JSON response: {e}") from e

        if not isinstance(envelope, dict):
            raise ChainDecodeError(f"Unexpected JSON-RPC envelope: {type(envelope).__name__}")

        if envelope.get("error") is not None:
            raise self._parse_error(envelope["error"])

        if "result" not in envelope:
            raise ChainDecodeError("JSON-RPC response has neither result nor error")

        return envelope["result"]

    @staticmethod
    def _parse_error(raw: Any) -> ChainRPCError:
        try:
            err = RPCErrorPayload.model_validate(raw)
        except ValidationError:
            # Non-standard error payload, surface it verbatim
            message = raw if isinstance(raw, str) else json.dumps(raw)
            return ChainRPCError(None, message)
        return ChainRPCError(err.code, err.message)

