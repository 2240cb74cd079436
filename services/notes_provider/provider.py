"""Apple Notes provider backed by osascript."""

import asyncio
import logging
import shutil
import time
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from shared.errors import ProviderError
from shared.models import CollectionExport, NoteMetadata, NotesFolder
from services.notes_provider.schemas import CollectionPayload, FolderListPayload, metadata_list_adapter
from services.notes_provider.scripts import FOLDERS_SCRIPT, FULL_EXPORT_SCRIPT, METADATA_SCRIPT

logger = logging.getLogger(__name__)


class AppleNotesProvider:
    """Reads note listings and full exports from the Notes app."""

    def __init__(self, osascript_path: str = "osascript"):
        """
        Initialize the provider.

        Args:
            osascript_path: Name or path of the osascript executable
        """
        self.osascript_path = osascript_path

    def check_osascript(self) -> str:
        """
        Resolve the osascript executable.

        Returns:
            Absolute path of osascript

        Raises:
            ProviderError: If osascript is not installed
        """
        resolved = shutil.which(self.osascript_path)
        if resolved is None:
            raise ProviderError("osascript is not installed on this system")
        return resolved

    async def fetch_metadata(self, collection: str) -> List[NoteMetadata]:
        """
        List id and modification time of every note in a folder.

        Args:
            collection: Notes folder name

        Returns:
            List of note metadata

        Raises:
            ProviderError: If the script fails or its output is malformed
        """
        stdout = await self._run_script(METADATA_SCRIPT, asyncio.subprocess.PIPE, collection)

        try:
            payload = metadata_list_adapter.validate_json(stdout)
        except ValidationError as e:
            raise ProviderError(f"Unexpected metadata for folder \"{collection}\": {e}") from e

        logger.info(f"Found {len(payload)} notes in folder \"{collection}\"")
        return [entry.to_metadata() for entry in payload]

    async def fetch_full_content(self, collection: str, scratch_dir: Path) -> CollectionExport:
        """
        Export every note of a folder, bodies included.

        The raw export is written to a file in ``scratch_dir``; the caller owns
        that directory and removes it.

        Args:
            collection: Notes folder name
            scratch_dir: Directory for the temporary export file

        Returns:
            CollectionExport with all notes of the folder

        Raises:
            ProviderError: If the script fails or its output is malformed
        """
        export_path = Path(scratch_dir) / f"temp_notes_{int(time.time())}.json"

        with open(export_path, "wb") as export_file:
            await self._run_script(FULL_EXPORT_SCRIPT, export_file, collection)

        try:
            payload = CollectionPayload.model_validate_json(export_path.read_bytes())
        except ValidationError as e:
            raise ProviderError(f"Unexpected export for folder \"{collection}\": {e}") from e

        logger.info(f"Exported {len(payload.notes)} notes from folder \"{collection}\"")
        return payload.to_export()

    async def fetch_folders(self) -> List[NotesFolder]:
        """
        List every folder of the Notes app with its note count.

        Returns:
            List of folders in the order the app reports them

        Raises:
            ProviderError: If the script fails or its output is malformed
        """
        stdout = await self._run_script(FOLDERS_SCRIPT, asyncio.subprocess.PIPE)

        try:
            payload = FolderListPayload.model_validate_json(stdout)
        except ValidationError as e:
            raise ProviderError(f"Unexpected folder listing: {e}") from e

        logger.info(f"Found {len(payload.folders)} folders")
        return [folder.to_folder() for folder in payload.folders]

    async def _run_script(self, script: str, stdout, *args: str) -> Optional[bytes]:
        """
        Run a JXA script through osascript.

        Args:
            script: JXA source
            stdout: ``asyncio.subprocess.PIPE`` or an open binary file
            args: Script arguments; the note scripts take the folder name as ``argv[0]``

        Returns:
            Captured stdout when piped, otherwise None
        """
        executable = self.check_osascript()

        try:
            process = await asyncio.create_subprocess_exec(
                executable, "-l", "JavaScript", "-e", script, *args,
                stdout=stdout,
                stderr=asyncio.subprocess.PIPE
            )
            out, err = await process.communicate()
        except OSError as e:
            raise ProviderError(f"Failed to run osascript: {e}") from e

        err_text = (err or b"").decode("utf-8", errors="replace").strip()
        if process.returncode != 0:
            raise ProviderError(
                f"osascript failed with status {process.returncode}: {err_text}"
            )
        if err_text:
            logger.warning(f"osascript stderr: {err_text}")

        return out
