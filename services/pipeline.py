"""
Embeds company records and uploads them to the vector store in batches.

Records are embedded one at a time and upserted one batch at a time. A
failure for a single record skips that record; a failed upsert skips that
batch. Both are logged and returned in the UpsertReport so the run can
continue.
"""

import logging
import time
from typing import Callable, List, Sequence

from models.main_models import CompanyRecord, IndexedRecord, RecordFailure, UpsertReport
from services.embeddings import EmbeddingClient
from services.errors import EmbeddingError, StoreError
from services.vector_store import VectorStore

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100
METADATA_OFFICER_LIMIT = 3
SEARCH_TEXT_LIMIT = 800
PROGRESS_EVERY = 10
MIN_BACKOFF_DELAY = 1.0

def record_id(category: str, company: CompanyRecord) -> str:
    return f"{category}-{company.company_number}"

def build_search_text(company: CompanyRecord) -> str:
    """
    Builds the descriptive text that gets embedded for a company.
    """
    officer_names = ", ".join(officer.name or "" for officer in company.officers)
    return (
        f"Company Name: {company.company_name}. "
        f"Company Number: {company.company_number}. "
        f"Status: {company.company_status}. "
        f"Officers: {officer_names}"
    )

def build_indexed_record(company: CompanyRecord, category: str,
                         values: List[float], search_text: str) -> IndexedRecord:
    """
    Builds the vector store record for an embedded company.

    Metadata is kept flat: officer names are joined into a single string and
    the search text is truncated.
    """
    first_officers = company.officers[:METADATA_OFFICER_LIMIT]
    return IndexedRecord(
        id=record_id(category, company),
        values=values,
        metadata={
            "companyNumber": str(company.company_number),
            "companyName": company.company_name or "",
            "companyStatus": company.company_status or "",
            "category": str(category),
            "officerCount": len(company.officers),
            "officers": ", ".join(officer.name or "" for officer in first_officers),
            "searchText": search_text[:SEARCH_TEXT_LIMIT],
        }
    )

def iter_batches(items: Sequence, size: int):
    for start in range(0, len(items), size):
        yield items[start:start + size]

class BatchUpsertPipeline:
    """
    Drives embedding and upload of one category of companies.

    The pause after each batch starts at ``batch_delay``. It doubles (up to
    ``max_batch_delay``) after a batch in which the embedding provider
    reported a rate limit and returns to ``batch_delay`` after a clean batch.
    Backoff starts from at least one second, even when ``batch_delay`` is 0.
    """

    def __init__(self, embedder: EmbeddingClient, store: VectorStore,
                 batch_size: int = DEFAULT_BATCH_SIZE, batch_delay: float = 1.0,
                 max_batch_delay: float = 30.0, namespace: str = "",
                 sleep: Callable[[float], None] = time.sleep):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.embedder = embedder
        self.store = store
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.max_batch_delay = max(max_batch_delay, batch_delay)
        self.namespace = namespace
        self.sleep = sleep

    def next_delay(self, current: float, rate_limited: bool) -> float:
        if not rate_limited:
            return self.batch_delay
        return min(max(current * 2, self.batch_delay, MIN_BACKOFF_DELAY), self.max_batch_delay)

    def run(self, companies: Sequence[CompanyRecord], category: str) -> UpsertReport:
        """
        Embeds and upserts every company under ``category``.

        Returns:
            UpsertReport: counts plus one RecordFailure per skipped company.
        """
        report = UpsertReport(category=category, total=len(companies))
        logger.info("Processing %d companies from %s...", len(companies), category)
        delay = self.batch_delay

        for batch in iter_batches(companies, self.batch_size):
            report.batches += 1
            vectors: List[IndexedRecord] = []
            rate_limited = False

            for company in batch:
                search_text = build_search_text(company)
                try:
                    values = self.embedder.embed(search_text)
                except EmbeddingError as exc:
                    rate_limited = rate_limited or exc.error_kind == "rate_limit"
                    logger.error("Error processing company %s: %s", company.company_number, exc)
                    report.failures.append(RecordFailure(
                        record_id=record_id(category, company),
                        error_kind=exc.error_kind,
                        message=str(exc)
                    ))
                    continue

                vectors.append(build_indexed_record(company, category, values, search_text))
                report.processed += 1
                if report.processed % PROGRESS_EVERY == 0:
                    logger.info("Processed %d/%d companies...", report.processed, report.total)

            if vectors:
                try:
                    self.store.upsert(vectors, namespace=self.namespace)
                    report.upserted += len(vectors)
                    logger.info("Uploaded batch of %d vectors", len(vectors))
                except StoreError as exc:
                    logger.error("Error uploading batch %d: %s", report.batches, exc)
                    report.failures.extend(
                        RecordFailure(record_id=vector.id, error_kind="upsert", message=str(exc))
                        for vector in vectors
                    )

            delay = self.next_delay(delay, rate_limited)
            if delay > 0:
                self.sleep(delay)

        logger.info(
            "Completed processing %s: %d embedded, %d upserted, %d failed",
            category, report.processed, report.upserted, len(report.failures)
        )
        return report
