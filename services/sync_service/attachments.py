"""Extraction of base64 images embedded in note bodies."""

import base64
import binascii
import logging
import re
from pathlib import Path
from typing import List, Union

from shared.models import AttachmentManifestEntry, ExtractionResult

logger = logging.getLogger(__name__)

EMBEDDED_IMAGE_PATTERN = re.compile(r"data:image/([-\w.+]+);base64,([^\"'\s]+)")

FILE_REFERENCE_SCHEME = "file://"

MIME_TO_EXT = {
    "png": "png",
    "jpeg": "jpg",
    "jpg": "jpg",
    "gif": "gif",
    "webp": "webp",
    "tiff": "tiff",
    "x-adobe-dng": "dng",
    "dng": "dng",
    "bmp": "bmp",
    "svg+xml": "svg",
    "svg": "svg",
    "heic": "heic",
    "heif": "heif",
}


def extension_for_subtype(subtype: str) -> str:
    """Map an image media subtype to a file extension.

    Unknown subtypes are used verbatim so new formats still get a usable name.
    """
    return MIME_TO_EXT.get(subtype.lower(), subtype)


class AttachmentExtractor:
    """Writes images embedded in note markup to files under a per-note directory."""

    def __init__(self, attachments_dir: Union[str, Path]):
        """
        Initialize the attachment extractor.

        Args:
            attachments_dir: Root directory; each note gets a subdirectory named by its id
        """
        self.attachments_dir = Path(attachments_dir)

    def extract(self, body: str, note_id: str) -> ExtractionResult:
        """
        Replace every embedded base64 image in ``body`` with a file reference.

        Occurrences that cannot be decoded or written are left in the body
        untouched and omitted from the manifest. Identical payloads are not
        deduplicated: each one gets its own file.

        Args:
            body: Note markup
            note_id: Id of the note owning the body

        Returns:
            ExtractionResult with the rewritten body and the manifest
        """
        note_dir = self.attachments_dir / note_id
        parts: List[str] = []
        attachments: List[AttachmentManifestEntry] = []
        position = 0

        for match in EMBEDDED_IMAGE_PATTERN.finditer(body):
            parts.append(body[position:match.start()])
            position = match.end()

            subtype, base64_data = match.group(1), match.group(2)
            sequence_number = len(attachments) + 1
            filename = f"{sequence_number}.{extension_for_subtype(subtype)}"

            try:
                image_data = base64.b64decode(base64_data, validate=True)
            except (binascii.Error, ValueError) as e:
                logger.warning(f"Skipping undecodable image in note {note_id}: {e}")
                parts.append(match.group(0))
                continue

            try:
                note_dir.mkdir(parents=True, exist_ok=True)
                (note_dir / filename).write_bytes(image_data)
            except OSError as e:
                logger.error(f"Failed to save image {filename} for note {note_id}: {e}")
                parts.append(match.group(0))
                continue

            relative_path = f"{note_id}/{filename}"
            parts.append(f"{FILE_REFERENCE_SCHEME}{relative_path}")
            attachments.append(AttachmentManifestEntry(
                sequence_number=sequence_number,
                filename=filename,
                relative_path=relative_path,
                media_type=f"image/{subtype.lower()}",
            ))
            logger.debug(f"Saved {subtype} image: {relative_path}")

        parts.append(body[position:])

        if attachments:
            logger.info(f"Saved {len(attachments)} images for note {note_id}")

        return ExtractionResult(body="".join(parts), attachments=attachments)
