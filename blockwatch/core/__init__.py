from .chain import (
    Block, ChainAPI, ChainDecodeError, ChainFetchError, ChainRPCError,
    ChainTransportError, EthereumRPCClient, FetchErrorKind, Transaction,
)
from .locks import ReadWriteLock

__all__ = [
    "Block", "ChainAPI", "ChainDecodeError", "ChainFetchError", "ChainRPCError",
    "ChainTransportError", "EthereumRPCClient", "FetchErrorKind", "Transaction",
    "ReadWriteLock",
]
