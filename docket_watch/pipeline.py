"""Poll -> fetch -> deduplicate -> publish pipeline for one docket."""
import sys
import time
from dataclasses import dataclass
from typing import Callable, Dict, NoReturn, Optional

from tqdm import tqdm

from .cache import CommentCache
from .config import COMMENT_LIST_DELAY, DOCKET_ID, POLL_INTERVAL
from .errors import PipelineError
from .fetchers import fetch_comment, list_comment_ids, list_document_ids, resolve_attachments
from .models import CacheEntry
from .regs_client import RegsGovClient


Publisher = Callable[[Dict[str, CacheEntry]], object]


@dataclass
class CycleSummary:
    documents: int = 0
    comments_listed: int = 0
    already_cached: int = 0
    new_comments: int = 0
    elapsed: float = 0.0


def exit_on_fatal(error: PipelineError) -> NoReturn:
    """Default fatal hook: report and terminate the process."""
    print(f"FATAL: {error}", file=sys.stderr, flush=True)
    raise SystemExit(1)


class IngestPipeline:
    """Runs ingest cycles against one docket and feeds the shared cache.

    Any PipelineError raised by a fetch stage ends the cycle: it is handed to
    `on_fatal` (which exits the process by default) and nothing after the
    failing step runs, including publishing. Comments cached by earlier
    cycles are kept.
    """

    def __init__(
        self,
        client: RegsGovClient,
        cache: CommentCache,
        docket_id: str = DOCKET_ID,
        on_fatal: Callable[[PipelineError], None] = exit_on_fatal,
        list_delay: float = COMMENT_LIST_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        show_progress: bool = True,
    ) -> None:
        self.client = client
        self.cache = cache
        self.docket_id = docket_id
        self.on_fatal = on_fatal
        self.list_delay = list_delay
        self.sleep = sleep
        self.show_progress = show_progress

    def run_cycle(self) -> CycleSummary:
        try:
            return self._ingest()
        except PipelineError as exc:
            self.on_fatal(exc)
            # Hook returned instead of exiting; still stop this cycle.
            raise

    def run_once(self, publish: Publisher) -> CycleSummary:
        """One cycle followed by publishing a snapshot of the cache."""
        summary = self.run_cycle()
        try:
            publish(self.cache.snapshot())
        except PipelineError as exc:
            staged = exc.with_stage("publish")
            self.on_fatal(staged)
            raise staged from exc
        return summary

    def run_forever(
        self,
        publish: Publisher,
        interval: float = POLL_INTERVAL,
        max_cycles: Optional[int] = None,
    ) -> None:
        """Alternate between a cycle and `interval` seconds of idling."""
        cycles = 0
        while True:
            self.run_once(publish)
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                return
            self.sleep(interval)

    def _ingest(self) -> CycleSummary:
        start_time = time.time()
        summary = CycleSummary()

        print(f"\n{'='*60}")
        print(f"INGEST CYCLE: docket {self.docket_id}")
        print(f"{'='*60}")

        try:
            document_ids = list_document_ids(self.client, self.docket_id)
        except PipelineError as exc:
            raise exc.with_stage(f"listing documents for docket {self.docket_id}") from exc
        summary.documents = len(document_ids)

        for document_id in tqdm(document_ids, desc="Documents", unit="doc", disable=not self.show_progress):
            try:
                comment_ids = list_comment_ids(
                    self.client, document_id, delay=self.list_delay, sleep=self.sleep
                )
            except PipelineError as exc:
                raise exc.with_stage(f"listing comments for document {document_id}") from exc
            summary.comments_listed += len(comment_ids)

            for comment_id in comment_ids:
                if self.cache.exists(comment_id):
                    summary.already_cached += 1
                    continue
                self._ingest_comment(comment_id)
                summary.new_comments += 1

        summary.elapsed = time.time() - start_time
        print(f"\nCycle complete:")
        print(f"  Documents: {summary.documents}")
        print(f"  Comments listed: {summary.comments_listed:,}")
        print(f"  Already cached: {summary.already_cached:,}")
        print(f"  New comments: {summary.new_comments:,}")
        print(f"  Cache size: {len(self.cache):,}")
        print(f"  Elapsed: {summary.elapsed:.1f}s")
        return summary

    def _ingest_comment(self, comment_id: str) -> None:
        try:
            record = fetch_comment(self.client, comment_id)
        except PipelineError as exc:
            raise exc.with_stage(f"fetching comment {comment_id}") from exc

        try:
            attachments = resolve_attachments(self.client, record.attachments_link)
        except PipelineError as exc:
            raise exc.with_stage(f"fetching attachments for comment {comment_id}") from exc

        self.cache.insert(
            comment_id,
            CacheEntry(comment_id=comment_id, record=record, attachments=attachments),
        )
