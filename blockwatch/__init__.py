"""blockwatch - Ethereum address watch-list and transaction cache"""

__version__ = "0.1.0"
