"""Fetch stages for one ingest cycle.

Each stage issues exactly one request (the attachment stage may issue none)
and either returns decoded values or raises PipelineError. Optional string
fields that are missing or null decode as "", matching how the API omits
empty submitter details.
"""
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import (
    COMMENT_LIST_DELAY,
    COMMENT_PAGE_SIZE,
    REGS_COMMENT_DETAIL_URL,
    REGS_COMMENTS_URL,
    REGS_DOCUMENTS_URL,
)
from .errors import ErrorKind, PipelineError
from .models import CommentRecord
from .regs_client import RegsGovClient


def _object(value: Any, where: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise PipelineError(ErrorKind.DECODE, f"{where}: expected object, got {type(value).__name__}")
    return value


def _array(value: Any, where: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise PipelineError(ErrorKind.DECODE, f"{where}: expected array, got {type(value).__name__}")
    return value


def _text(container: Dict[str, Any], key: str, where: str) -> str:
    value = container.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise PipelineError(ErrorKind.DECODE, f"{where}.{key}: expected string, got {type(value).__name__}")
    return value


def list_document_ids(client: RegsGovClient, docket_id: str) -> List[str]:
    """Return objectIds of the documents in a docket (first page only)."""
    data = client.request_json(REGS_DOCUMENTS_URL.format(docketId=docket_id))

    object_ids: List[str] = []
    for idx, item in enumerate(_array(data.get("data"), "documents.data")):
        doc = _object(item, f"documents.data[{idx}]")
        attrs = _object(doc.get("attributes"), f"documents.data[{idx}].attributes")
        object_ids.append(_text(attrs, "objectId", f"documents.data[{idx}].attributes"))
    return object_ids


def list_comment_ids(
    client: RegsGovClient,
    document_id: str,
    delay: float = COMMENT_LIST_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> List[str]:
    """Return up to COMMENT_PAGE_SIZE comment ids on a document.

    Waits `delay` seconds before the request to stay under the upstream rate
    limit. Only page 1 is read; comments beyond the first page are not seen.
    """
    if delay > 0:
        sleep(delay)

    data = client.request_json(
        REGS_COMMENTS_URL.format(documentId=document_id, pageSize=COMMENT_PAGE_SIZE)
    )

    ids: List[str] = []
    for idx, item in enumerate(_array(data.get("data"), "comments.data")):
        entry = _object(item, f"comments.data[{idx}]")
        ids.append(_text(entry, "id", f"comments.data[{idx}]"))
    return ids


def fetch_comment(client: RegsGovClient, comment_id: str) -> CommentRecord:
    """Fetch full comment detail from /v4/comments/{id}."""
    data = client.request_json(REGS_COMMENT_DETAIL_URL.format(commentId=comment_id))

    comment_data = _object(data.get("data"), "comment.data")
    attrs = _object(comment_data.get("attributes"), "comment.data.attributes")
    links = _object(comment_data.get("links"), "comment.data.links")
    relationships = _object(comment_data.get("relationships"), "comment.data.relationships")
    attachments = _object(relationships.get("attachments"), "comment.data.relationships.attachments")
    attachment_links = _object(attachments.get("links"), "comment.data.relationships.attachments.links")

    return CommentRecord(
        comment_id=_text(comment_data, "id", "comment.data"),
        first_name=_text(attrs, "firstName", "comment.data.attributes"),
        last_name=_text(attrs, "lastName", "comment.data.attributes"),
        email=_text(attrs, "email", "comment.data.attributes"),
        organization=_text(attrs, "organization", "comment.data.attributes"),
        comment=_text(attrs, "comment", "comment.data.attributes"),
        self_link=_text(links, "self", "comment.data.links"),
        attachments_link=_text(attachment_links, "related", "comment.data.relationships.attachments.links"),
    )


def resolve_attachments(client: RegsGovClient, related_link: Optional[str]) -> Tuple[str, ...]:
    """Flatten every fileFormats[].fileUrl behind a comment's attachments link.

    Args:
        client: API client
        related_link: relationships.attachments.links.related from the comment

    Returns:
        File URLs in response order; () when there is no link or no attachment
    """
    if not related_link:
        return ()

    data = client.request_json(related_link)

    urls: List[str] = []
    for idx, item in enumerate(_array(data.get("data"), "attachments.data")):
        attachment = _object(item, f"attachments.data[{idx}]")
        attrs = _object(attachment.get("attributes"), f"attachments.data[{idx}].attributes")
        formats = _array(attrs.get("fileFormats"), f"attachments.data[{idx}].attributes.fileFormats")
        for fidx, ff in enumerate(formats):
            where = f"attachments.data[{idx}].attributes.fileFormats[{fidx}]"
            url = _text(_object(ff, where), "fileUrl", where)
            if url:
                urls.append(url)
    return tuple(urls)
