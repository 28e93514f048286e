"""Append-only in-memory cache of fetched comments."""
import threading
from typing import Dict, List

from tqdm import tqdm

from .models import CacheEntry


class CommentCache:
    """Comments keyed by comment id, kept for the life of the process.

    Thread-safe: the pipeline writes from the poll loop while the renderer
    reads a snapshot. Entries are never evicted.
    """

    def __init__(self, verbose: bool = True) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[str, CacheEntry] = {}
        self.verbose = verbose

    def exists(self, comment_id: str) -> bool:
        with self._lock:
            found = comment_id in self._entries
        if found and self.verbose:
            tqdm.write(f"  Comment {comment_id} already in cache")
        return found

    def insert(self, comment_id: str, entry: CacheEntry) -> None:
        # Overwrites an existing key; the pipeline checks exists() first.
        with self._lock:
            self._entries[comment_id] = entry
        if self.verbose:
            tqdm.write(f"  New comment added to cache: {comment_id}")

    def snapshot(self) -> Dict[str, CacheEntry]:
        """Copy of the current mapping, safe to read while ingestion continues."""
        with self._lock:
            return dict(self._entries)

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, comment_id: object) -> bool:
        with self._lock:
            return comment_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
