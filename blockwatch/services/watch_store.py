"""
Subscription registry and per-address transaction cache.
Blocks are fetched on demand and scanned against the subscribed addresses;
matching transactions are appended to the history of each matching side.
"""

from typing import Any, Dict, List, Set

import structlog

from blockwatch.core.chain import ChainAPI, ChainFetchError, Transaction
from blockwatch.core.locks import ReadWriteLock

logger = structlog.get_logger()


class WatchStore:
    """Watches subscribed addresses across explicitly parsed blocks"""

    def __init__(self, chain: ChainAPI):
        self.chain = chain
        self._subscriptions: Set[str] = set()
        self._transactions: Dict[str, List[Transaction]] = {}
        self._current_block = 0
        self._lock = ReadWriteLock()
        self.logger = logger.bind(component="watch_store")

    async def current_block(self) -> int:
        """Number of the last successfully parsed block, 0 before any parse"""
        async with self._lock.read():
            return self._current_block

    async def subscribe(self, address: str) -> bool:
        """Add an address to the watch-list, False if it was already there"""
        if not address:
            raise ValueError("Address must not be empty")

        async with self._lock.write():
            if address in self._subscriptions:
                return False
            self._subscriptions.add(address)
            total = len(self._subscriptions)

        self.logger.debug("Subscribed to address", address=address, total_subscribed=total)
        return True

    async def get_transactions(self, address: str) -> List[Transaction]:
        """Inbound and outbound transactions recorded for an address"""
        async with self._lock.read():
            return list(self._transactions.get(address, ()))

    async def parse_block(self, block_number: int) -> int:
        """
        Fetch a block and record its transactions for subscribed addresses.
        The fetch runs outside the lock; the scan, the history appends and the
        block pointer update are committed together under the write lock.
        Returns the number of history entries appended.
        """
        if block_number < 0:
            raise ValueError("Block number must be non-negative")

        try:
            block = await self.chain.get_block(block_number)
        except ChainFetchError as e:
            self.logger.warning(
                "Failed to fetch block",
                block=block_number,
                kind=e.kind.value,
                error=str(e)
            )
            raise

        matched = 0
        async with self._lock.write():
            for tx in block.transactions:
                if tx.from_address in self._subscriptions:
                    self._transactions.setdefault(tx.from_address, []).append(tx)
                    matched += 1
                if tx.to_address in self._subscriptions:
                    self._transactions.setdefault(tx.to_address, []).append(tx)
                    matched += 1

            self._current_block = block_number

        self.logger.info(
            "Block parsed",
            block=block_number,
            tx_count=len(block.transactions),
            matched=matched
        )
        return matched

    async def get_stats(self) -> Dict[str, Any]:
        """Get watch-list statistics"""
        async with self._lock.read():
            return {
                'subscribed_addresses': len(self._subscriptions),
                'addresses_with_history': len(self._transactions),
                'cached_transactions': sum(len(txs) for txs in self._transactions.values()),
                'current_block': self._current_block,
            }
