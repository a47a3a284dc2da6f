"""
QuoteOrchestrator - request flow from raw input to an enriched extraction result.

Stages:
    Received -> Validating -> Extracting -> Aggregating -> Oracle-Querying
    -> Totaling -> Persisting -> Responded

Validating, Extracting and Oracle-Querying may exit early by raising a
QuoteParserError. Link fetch and persistence failures never fail the request.
"""

import asyncio
import uuid
from collections.abc import Callable

from models.errors import NoContentProvided, PersistenceFailed
from models.quote import InputDocument, ProcessedQuote, QuoteRecord, utc_now_iso
from orchestrator.content_aggregator import ContentAggregator
from orchestrator.quote_oracle import QuoteExtractionOracle
from orchestrator.total_calculator import calculate_total_quote
from tools.documents.text_extractor import TextExtractor
from tools.web.link_fetcher import LinkedContentFetcher
from tools.web.link_harvester import extract_links
from utils.logger import get_logger

logger = get_logger(__name__)

QuoteSink = Callable[[QuoteRecord], object]


class QuoteOrchestrator:
    """
    Sequences extraction, link augmentation, the oracle call and totaling.

    Example usage:
        orchestrator = QuoteOrchestrator(oracle=QuoteExtractionOracle(client))
        quote = asyncio.run(orchestrator.process(InputDocument(source_text=email)))
        print(quote.total_quote)
    """

    def __init__(
        self,
        oracle: QuoteExtractionOracle,
        text_extractor: TextExtractor | None = None,
        link_fetcher: LinkedContentFetcher | None = None,
        aggregator: ContentAggregator | None = None,
        record_sink: QuoteSink | None = None,
        raw_content_limit: int = 50000,
    ):
        """
        Args:
            oracle: Extraction oracle wrapper
            text_extractor: Uploaded file decoder
            link_fetcher: Fetcher for links found in the document
            aggregator: Combined text builder
            record_sink: Callable persisting a QuoteRecord; None disables persistence
            raw_content_limit: Characters of combined text kept in the persisted record
        """
        self.oracle = oracle
        self.text_extractor = text_extractor or TextExtractor()
        self.link_fetcher = link_fetcher or LinkedContentFetcher()
        self.aggregator = aggregator or ContentAggregator()
        self.record_sink = record_sink
        self.raw_content_limit = raw_content_limit

    async def process(self, document: InputDocument, request_id: str | None = None) -> ProcessedQuote:
        request_id = request_id or str(uuid.uuid4())
        log_fields = {"request_id": request_id}
        base_text = document.source_text or ""

        file_text = None
        if document.uploaded_file is not None:
            self.text_extractor.validate(document.uploaded_file)
            logger.info(
                "Extracting uploaded file",
                extra={"extra_fields": {**log_fields, "file_name": document.uploaded_file.filename}},
            )
            file_text = await self.text_extractor.extract_async(document.uploaded_file)

        if not base_text.strip() and not (file_text or "").strip():
            raise NoContentProvided()

        document_text = self.aggregator.compose(base_text, file_text)
        links = extract_links(document_text.text)
        link_results = await self.link_fetcher.fetch_all(links) if links else []
        combined = self.aggregator.compose(base_text, file_text, link_results)

        fetched = sum(1 for r in link_results if r.succeeded and r.text.strip())
        link_errors = [r.to_error_dict() for r in link_results if not r.succeeded]
        logger.info(
            f"Combined content ready: {len(combined)} chars, {fetched}/{len(links)} links fetched",
            extra={
                "extra_fields": {
                    **log_fields,
                    "content_length": len(combined),
                    "links_found": len(links),
                    "links_fetched": fetched,
                    "link_errors": link_errors,
                }
            },
        )

        result = await asyncio.to_thread(self.oracle.extract, combined)
        total_quote = calculate_total_quote(
            result.guestroom_total, result.meeting_room_total, result.food_beverage_total
        )

        quote = ProcessedQuote(
            result=result,
            total_quote=total_quote,
            combined_text=combined,
            has_linked_content=len(links) > 0,
            linked_content_fetched=fetched,
            linked_content_errors=link_errors,
            processed_at=utc_now_iso(),
        )

        logger.info(
            "Quote calculation",
            extra={
                "extra_fields": {
                    **log_fields,
                    "guestroom": result.guestroom_total,
                    "meeting_room": result.meeting_room_total,
                    "food_beverage": result.food_beverage_total,
                    "total_quote": total_quote,
                }
            },
        )

        await self._persist(quote, request_id)
        return quote

    async def _persist(self, quote: ProcessedQuote, request_id: str) -> None:
        """Push the quote record to the sink. Failures are logged, never raised."""
        if self.record_sink is None:
            logger.debug(
                "Quote persistence disabled; skipping record",
                extra={"extra_fields": {"request_id": request_id}},
            )
            return

        record = QuoteRecord.from_processed(quote, raw_content_limit=self.raw_content_limit)
        try:
            await asyncio.to_thread(self.record_sink, record)
        except Exception as exc:
            error = exc if isinstance(exc, PersistenceFailed) else PersistenceFailed(details=str(exc))
            logger.warning(
                "Quote record persistence failed; returning result anyway",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "error": error.message,
                        "details": error.details,
                        "persistence_status": "failed",
                    }
                },
            )
            return

        logger.info(
            "Quote record persisted",
            extra={"extra_fields": {"request_id": request_id, "persistence_status": "success"}},
        )
