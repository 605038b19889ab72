"""Ingest run orchestration."""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from typing import Callable

from page_ingest.core.config import Settings
from page_ingest.core.errors import ErrorKind, IngestError
from page_ingest.core.logging import get_logger
from page_ingest.core.metrics import RUN_COUNT, RUN_DURATION
from page_ingest.db.store import StoreRequestError, TableStore
from page_ingest.ingest.embeddings import PlaceholderEmbedder
from page_ingest.ingest.extract import extract_content
from page_ingest.ingest.fetch import fetch_page
from page_ingest.ingest.schema import SchemaValidator
from page_ingest.ingest.types import FetchedPage, RunResult
from page_ingest.models.entities import DocumentRecord, StoredDocument

logger = get_logger(__name__)

Fetcher = Callable[[str], FetchedPage]


class IngestRunner:
    """Coordinate schema check, fetch, extraction, placeholder embedding and persistence."""

    def __init__(
        self,
        store: TableStore,
        settings: Settings,
        validator: SchemaValidator | None = None,
        embedder: PlaceholderEmbedder | None = None,
        fetcher: Fetcher | None = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.validator = validator or SchemaValidator(store, table=settings.table_name, dim=settings.embedding_dim)
        self.embedder = embedder or PlaceholderEmbedder(
            dim=settings.embedding_dim, fill_value=settings.placeholder_value
        )
        self.fetcher = fetcher or self._default_fetcher

    def run(self) -> RunResult:
        """Validate, fetch, extract and store; never raises on a classified failure."""
        return self._timed(self._ingest)

    def validate(self) -> RunResult:
        """Run only the schema check."""
        return self._timed(self._validate_only)

    # Internal helpers -------------------------------------------------

    def _timed(self, step: Callable[[], tuple[StoredDocument | None, int]]) -> RunResult:
        run_id = f"run_{uuid.uuid4().hex}"
        started_at = datetime.now(tz=timezone.utc)
        start = time.perf_counter()
        try:
            document, content_chars = step()
        except IngestError as exc:
            duration = time.perf_counter() - start
            RUN_COUNT.labels(outcome=exc.kind.value).inc()
            RUN_DURATION.observe(duration)
            logger.error(
                "Ingest run failed (%s): %s",
                exc.kind.value,
                exc.message,
                extra={"ctx_run_id": run_id, "ctx_kind": exc.kind.value},
            )
            return RunResult(
                run_id=run_id,
                started_at=started_at,
                duration_s=duration,
                ok=False,
                kind=exc.kind,
                message=exc.message,
            )
        duration = time.perf_counter() - start
        RUN_COUNT.labels(outcome="success").inc()
        RUN_DURATION.observe(duration)
        logger.info("Ingest run completed in %.2fs", duration, extra={"ctx_run_id": run_id})
        return RunResult(
            run_id=run_id,
            started_at=started_at,
            duration_s=duration,
            ok=True,
            document=document,
            content_chars=content_chars,
        )

    def _validate_only(self) -> tuple[None, int]:
        self.validator.validate_schema()
        return None, 0

    def _ingest(self) -> tuple[StoredDocument, int]:
        self.validator.validate_schema()

        target = self.settings.target_url
        logger.info("Fetching %s", target)
        page = self.fetcher(target)

        content = extract_content(page.body, self.settings.max_content_chars)
        if not content:
            raise IngestError(ErrorKind.FETCH_ERROR, f"No visible text found at {page.url}")
        logger.info("Extracted text (%d chars)", len(content))

        record = DocumentRecord(
            content=content,
            embedding=self.embedder.embed(content),
            url=page.url,
            dim=self.settings.embedding_dim,
            max_chars=self.settings.max_content_chars,
        )
        # Read-back is not requested: row-level security may allow insert but not select.
        try:
            row = self.store.insert(self.settings.table_name, record.to_payload(), returning=False)
        except StoreRequestError as exc:
            raise IngestError(ErrorKind.STORE_ERROR, exc.message) from exc

        stored = StoredDocument.from_row(row) if row else StoredDocument(
            id=None, content=record.content, url=record.url, created_at=None
        )
        logger.info("Stored document %s from %s", stored.id, stored.url)
        return stored, len(content)

    def _default_fetcher(self, url: str) -> FetchedPage:
        return fetch_page(
            url,
            timeout=self.settings.request_timeout,
            user_agent=self.settings.user_agent,
        )


__all__ = ["Fetcher", "IngestRunner"]
