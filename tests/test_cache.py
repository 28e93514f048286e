"""Unit tests for the append-only comment cache."""
from docket_watch.cache import CommentCache
from docket_watch.models import CacheEntry, CommentRecord


def _entry(cid: str, *attachments: str) -> CacheEntry:
    return CacheEntry(comment_id=cid, record=CommentRecord(comment_id=cid), attachments=tuple(attachments))


def test_exists_reflects_inserts(cache) -> None:
    assert not cache.exists("C1")

    cache.insert("C1", _entry("C1"))

    assert cache.exists("C1")
    assert "C1" in cache
    assert len(cache) == 1


def test_second_insert_overwrites(cache) -> None:
    cache.insert("C1", _entry("C1"))
    cache.insert("C1", _entry("C1", "https://example.org/a.pdf"))

    assert len(cache) == 1
    assert cache.snapshot()["C1"].attachments == ("https://example.org/a.pdf",)


def test_snapshot_is_detached_copy(cache) -> None:
    cache.insert("C1", _entry("C1"))
    snap = cache.snapshot()

    cache.insert("C2", _entry("C2"))

    assert set(snap) == {"C1"}
    assert set(cache.ids()) == {"C1", "C2"}


def test_verbose_cache_reports_hits(capsys) -> None:
    verbose = CommentCache(verbose=True)
    verbose.insert("C1", _entry("C1"))
    verbose.exists("C1")

    out = capsys.readouterr()
    text = out.out + out.err
    assert "New comment added to cache: C1" in text
    assert "Comment C1 already in cache" in text
