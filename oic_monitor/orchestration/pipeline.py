"""
Pipeline orchestrator for the Orders in Council keyword monitor.
"""

import time
import uuid
from datetime import datetime
from typing import Callable, Dict, List, Optional, Set

import structlog

from ..core.config import Settings
from ..core.exceptions import AttachmentFailure
from ..core.models import DocumentRecord, PipelineRun
from ..core.ordering import IdRecencyPolicy, higher_id_is_newer, newest_ids_first
from ..ingestion import AttachmentResolver, OrdersInCouncilClient, extract_attach_ids
from ..publishing import RSSFeedPublisher
from ..storage import KnowledgeStore, merge_discoveries

logger = structlog.get_logger(__name__)


class OrdersInCouncilPipeline:
    """Runs one search, resolve, merge and publish cycle.

    Requests are made strictly one after another with a pause between any
    two of them. Nothing is written until every request has succeeded, so an
    aborted run leaves the store and feed exactly as the previous run left them.
    """

    def __init__(self, settings: Settings,
                 client: Optional[OrdersInCouncilClient] = None,
                 store: Optional[KnowledgeStore] = None,
                 publisher: Optional[RSSFeedPublisher] = None,
                 id_recency: IdRecencyPolicy = higher_id_is_newer,
                 sleep: Callable[[float], None] = time.sleep):
        self.settings = settings
        self.client = client or OrdersInCouncilClient(settings)
        self.resolver = AttachmentResolver(self.client)
        self.store = store or KnowledgeStore(settings.items_path, id_recency)
        self.publisher = publisher or RSSFeedPublisher(settings, id_recency)
        self.id_recency = id_recency
        self._sleep = sleep
        self._requests_made = 0

    def run(self, dry_run: bool = False) -> PipelineRun:
        """Execute one full run.

        Args:
            dry_run: Search and resolve as usual but write neither store nor feed

        Returns:
            PipelineRun: Results of the run; ``status`` is ``completed`` or ``failed``
        """
        run_id = str(uuid.uuid4())
        pipeline_run = PipelineRun(run_id=run_id, start_time=datetime.utcnow(), dry_run=dry_run)
        self._requests_made = 0

        logger.info("Starting pipeline", run_id=run_id, dry_run=dry_run,
                    keywords=len(self.settings.keywords))

        try:
            # Step 1: Load everything discovered by earlier runs
            known = self.store.load()

            # Step 2: Search each keyword
            run_matches = self._search_keywords()
            pipeline_run.keywords_searched = len(self.settings.keywords)
            pipeline_run.documents_matched = len(run_matches)

            # Step 3: Resolve ids never seen before
            new_ids = newest_ids_first(
                (attach_id for attach_id in run_matches if attach_id not in known),
                self.id_recency,
            )
            new_records, skipped = self._resolve_new_ids(new_ids)
            for attach_id in skipped:
                run_matches.pop(attach_id, None)
            pipeline_run.new_documents = len(new_records)
            pipeline_run.skipped_documents = skipped

            # Step 4: Merge keyword attributions
            merged = merge_discoveries(known, new_records, run_matches)
            pipeline_run.stored_documents = len(merged)

            # Step 5 and 6: Persist the full store, publish the newest slice
            if dry_run:
                pipeline_run.published_documents = len(self.publisher.select(merged.values()))
                logger.info("Dry run, skipping store and feed writes")
            else:
                self.store.persist(merged)
                pipeline_run.published_documents = self.publisher.publish(merged.values())

            pipeline_run.status = "completed"
            pipeline_run.end_time = datetime.utcnow()

            logger.info(f"Updated: {pipeline_run.published_documents} items "
                        f"(new IDs this run: {pipeline_run.new_documents})",
                        run_id=run_id,
                        published=pipeline_run.published_documents,
                        new_ids=pipeline_run.new_documents,
                        stored=pipeline_run.stored_documents,
                        duration_seconds=(pipeline_run.end_time - pipeline_run.start_time).total_seconds())

        except Exception as e:
            pipeline_run.status = "failed"
            pipeline_run.end_time = datetime.utcnow()
            pipeline_run.error_message = str(e)

            logger.error("Pipeline failed", run_id=run_id, error=str(e), exc_info=True)

        return pipeline_run

    def _pause(self, seconds: float) -> None:
        """Politeness delay before every request except the first of a run."""
        if self._requests_made and seconds > 0:
            self._sleep(seconds)
        self._requests_made += 1

    def _search_keywords(self) -> Dict[int, Set[str]]:
        """Map each attachment id found this run to the keywords that found it."""
        found: Dict[int, Set[str]] = {}
        limit = self.settings.check_limit_per_keyword

        for keyword in self.settings.keywords:
            self._pause(self.settings.search_pause_seconds)
            page = self.client.search(keyword)
            ids = extract_attach_ids(page)[:limit]

            if not ids:
                logger.info("Keyword matched nothing", keyword=keyword)
            for attach_id in ids:
                found.setdefault(attach_id, set()).add(keyword)

            logger.info("Keyword searched", keyword=keyword, matches=len(ids))

        return found

    def _resolve_new_ids(self, new_ids: List[int]):
        """Fetch metadata for each new id, newest first.

        Returns the resolved records and the ids skipped when attachment
        failures are configured not to abort.
        """
        records: Dict[int, DocumentRecord] = {}
        skipped: List[int] = []

        for attach_id in new_ids:
            self._pause(self.settings.attachment_pause_seconds)
            try:
                records[attach_id] = self.resolver.resolve(attach_id)
            except AttachmentFailure as e:
                if self.settings.abort_on_attachment_failure:
                    raise
                logger.warning("Skipping attachment until next run",
                               attach_id=attach_id, error=str(e))
                skipped.append(attach_id)

        logger.info("Resolved new attachments", resolved=len(records), skipped=len(skipped))
        return records, skipped

    def health_check(self) -> Dict[str, bool]:
        """Check health of all pipeline components."""
        health_status = {
            "orders_in_council_portal": self.client.health_check(),
            "knowledge_store": self.store.health_check(),
            "feed_output": self.publisher.health_check(),
        }

        logger.info("Pipeline health check",
                    overall_healthy=all(health_status.values()),
                    component_status=health_status)
        return health_status

    def store_stats(self) -> Dict[str, object]:
        return self.store.stats(self.store.load())
