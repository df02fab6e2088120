"""
CSV import service.

Parses an uploaded product CSV and queues every row. The whole file is
validated before anything is queued: a header mismatch imports nothing.
"""

from typing import Optional, Union

import structlog

from exceptions import MissingTitleError, SchemaError
from models.queue import CsvImportResponse
from parsers.csv_parser import EMPTY_CSV_MESSAGE, parse_product_csv
from services.activity_log_service import ActivityLogService, get_activity_log_service
from services.queue_runner_service import QueueRunnerService, get_queue_runner_service

logger = structlog.get_logger(__name__)


class ImportService:
    """Bulk product import into the upload queue."""

    def __init__(self, runner: QueueRunnerService, activity_log: ActivityLogService):
        self.runner = runner
        self.activity_log = activity_log

    async def import_csv(self, content: Union[bytes, str], filename: Optional[str] = None) -> CsvImportResponse:
        """
        Import a product CSV.

        Rows without a title are skipped (the runner logs each one).

        Args:
            content: Raw file bytes (UTF-8, BOM tolerated) or decoded text
            filename: Original file name, for logging

        Returns:
            CsvImportResponse with row, queued and skipped counts

        Raises:
            SchemaError: Empty file or missing columns (nothing queued)
        """
        text = content.decode("utf-8-sig") if isinstance(content, bytes) else content
        logger.info("csv_import_started", filename=filename, size=len(text))

        try:
            parsed = parse_product_csv(text)
        except SchemaError as e:
            if e.message == EMPTY_CSV_MESSAGE:
                self.activity_log.error("Empty CSV", e.message)
            else:
                self.activity_log.error("CSV headers mismatch", e.message)
            raise

        item_ids: list[str] = []
        skipped = 0

        for draft in parsed.drafts:
            try:
                item = await self.runner.enqueue(draft)
            except MissingTitleError:
                skipped += 1
                continue
            item_ids.append(item.id)

        self.activity_log.success(
            "CSV imported",
            f"{parsed.row_count} product rows processed.",
        )
        logger.info(
            "csv_import_completed",
            filename=filename,
            rows=parsed.row_count,
            queued=len(item_ids),
            skipped=skipped,
        )

        return CsvImportResponse(
            rows=parsed.row_count,
            queued=len(item_ids),
            skipped=skipped,
            item_ids=item_ids,
        )


# Singleton instance for convenience
_import_service: Optional[ImportService] = None


def get_import_service() -> ImportService:
    """Get or create ImportService instance."""
    global _import_service
    if _import_service is None:
        _import_service = ImportService(
            runner=get_queue_runner_service(),
            activity_log=get_activity_log_service(),
        )
    return _import_service
