"""Records produced by the fetch stages and stored in the cache."""
from dataclasses import dataclass, field
from typing import Tuple

from .config import PUBLIC_COMMENT_URL


@dataclass(frozen=True)
class CommentRecord:
    """Snapshot of a comment as returned by /v4/comments/{id}."""
    comment_id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    organization: str = ""
    comment: str = ""
    self_link: str = ""
    attachments_link: str = ""

    @property
    def public_url(self) -> str:
        return PUBLIC_COMMENT_URL.format(commentId=self.comment_id)


@dataclass(frozen=True)
class CacheEntry:
    comment_id: str
    record: CommentRecord
    attachments: Tuple[str, ...] = field(default_factory=tuple)
