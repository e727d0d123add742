from .watch_store import WatchStore
from .http_api import create_app

__all__ = ["WatchStore", "create_app"]
