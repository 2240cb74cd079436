"""Sync orchestration logic."""

import asyncio
import logging
import tempfile
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

from shared.config import get_max_workers
from shared.db_operations import DatabaseOperations
from shared.models import Note
from services.sync_service.attachments import AttachmentExtractor
from services.sync_service.change_detector import compute_stale_ids

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """Orchestrates the incremental sync of a notes folder into the local store."""

    def __init__(
        self,
        provider,
        db_ops: DatabaseOperations,
        extractor: AttachmentExtractor,
        max_workers: Optional[int] = None
    ):
        """
        Initialize the sync orchestrator.

        Args:
            provider: Notes provider exposing ``fetch_metadata`` and ``fetch_full_content``
            db_ops: Notes store; owned and closed by the caller
            extractor: Attachment extractor for note bodies
            max_workers: Bound on notes processed concurrently during extraction
        """
        self.provider = provider
        self.db_ops = db_ops
        self.extractor = extractor
        self.max_workers = max_workers or get_max_workers()

    async def execute_sync(self, collection: str) -> Dict:
        """
        Execute the synchronization workflow.

        This is the main orchestration method that:
        1. Fetches id and modification time of every note in the folder
        2. Compares them with the store to find new or changed notes
        3. Stops early when nothing changed
        4. Exports the folder into a scratch directory and keeps the stale notes
        5. Extracts embedded images from each stale note
        6. Saves all processed notes in one transaction
        7. Removes the scratch directory whatever the outcome

        Args:
            collection: Name of the notes folder to sync

        Returns:
            Dictionary with sync summary
        """
        logger.info(f"Checking notes in folder \"{collection}\"...")
        stage = "metadata"

        try:
            metadata = await self.provider.fetch_metadata(collection)

            stage = "detect"
            stale_ids = compute_stale_ids(metadata, self.db_ops)

            if not stale_ids:
                logger.info("All notes are up to date!")
                return {
                    "collection": collection,
                    "status": "up_to_date",
                    "summary": {
                        "stale_notes": 0,
                        "synced_notes": 0,
                        "attachments": 0
                    }
                }

            logger.info(f"Found {len(stale_ids)} notes that need updating")

            with tempfile.TemporaryDirectory(prefix="notes-sync-") as scratch_dir:
                stage = "content"
                logger.info(f"Exporting notes folder \"{collection}\". This may take a while..")
                export = await self.provider.fetch_full_content(collection, Path(scratch_dir))

                notes = [note for note in export.notes if note.id in stale_ids]
                missing = stale_ids - {note.id for note in notes}
                if missing:
                    logger.warning(f"{len(missing)} changed notes were missing from the export")

                stage = "extract"
                logger.info("Processing attachments...")
                notes = await self._extract_attachments(notes, export.name or collection)

                stage = "persist"
                synced_count = self.db_ops.upsert_notes(notes)

            attachment_count = sum(len(note.attachments) for note in notes)
            logger.info(
                f"Successfully synced {synced_count} notes "
                f"({attachment_count} images) from \"{collection}\""
            )

            return {
                "collection": collection,
                "status": "completed",
                "summary": {
                    "stale_notes": len(stale_ids),
                    "synced_notes": synced_count,
                    "attachments": attachment_count
                }
            }

        except Exception as e:
            logger.error(f"Sync of \"{collection}\" failed during {stage}: {e}", exc_info=True)
            return {
                "collection": collection,
                "status": "failed",
                "stage": stage,
                "error": str(e)
            }

    async def _extract_attachments(self, notes: List[Note], collection: str) -> List[Note]:
        """
        Run attachment extraction for every note with bounded concurrency.

        Each note writes only to its own directory, so notes are processed in
        worker threads. The result keeps the input order.

        Args:
            notes: Stale notes from the export
            collection: Folder name recorded on each note

        Returns:
            Notes with rewritten bodies and populated attachments
        """
        semaphore = asyncio.Semaphore(self.max_workers)

        async def process(note: Note) -> Note:
            async with semaphore:
                result = await asyncio.to_thread(self.extractor.extract, note.body, note.id)
            return replace(
                note,
                body=result.body,
                attachments=result.attachments,
                collection=collection
            )

        return list(await asyncio.gather(*(process(note) for note in notes)))
