"""Static site generation from the notes store."""

import logging
import shutil
from pathlib import Path
from typing import Dict, List, Union

from shared.db_operations import DatabaseOperations
from shared.models import Note
from services.site_generator.decorate import IMAGES_DIR, decorate, safe_filename
from services.site_generator.style import STYLESHEET
from services.site_generator.themes import DEFAULT_THEME, get_index_generator

logger = logging.getLogger(__name__)


class SiteGenerator:
    """Builds an HTML site for one notes folder."""

    def __init__(self, db_ops: DatabaseOperations, attachments_dir: Union[str, Path]):
        """
        Initialize the site generator.

        Args:
            db_ops: Notes store to read from
            attachments_dir: Root directory holding extracted images
        """
        self.db_ops = db_ops
        self.attachments_dir = Path(attachments_dir)

    def generate(self, output_dir: Union[str, Path], collection: str, theme: str = DEFAULT_THEME) -> Dict:
        """
        Write the stylesheet, referenced images, one page per note and the index.

        Args:
            output_dir: Directory receiving the site
            collection: Notes folder to publish
            theme: Index page theme (``blog`` or ``photos``)

        Returns:
            Dictionary with counts of pages and images written
        """
        html_dir = Path(output_dir)
        html_dir.mkdir(parents=True, exist_ok=True)

        notes = self.db_ops.list_notes(collection)
        logger.info(f"Generating site for {len(notes)} notes of \"{collection}\" in {html_dir}")

        (html_dir / "style.css").write_text(STYLESHEET, encoding="utf-8")
        images_copied = self._copy_required_attachments(html_dir, notes)

        for note in notes:
            page_path = html_dir / f"{safe_filename(note.title)}.html"
            page_path.write_text(decorate(note.body, note.created_at), encoding="utf-8")
            logger.info(f"HTML saved to {page_path}")

        index_generator = get_index_generator(theme)
        index_generator(notes, html_dir, collection)

        return {
            "pages": len(notes),
            "images": images_copied,
            "output_dir": str(html_dir)
        }

    def _copy_required_attachments(self, html_dir: Path, notes: List[Note]) -> int:
        """Copy only the images referenced by the notes' manifests."""
        images_dir = html_dir / IMAGES_DIR
        images_dir.mkdir(parents=True, exist_ok=True)

        copied = 0
        for note in notes:
            for attachment in note.attachments:
                source = self.attachments_dir / attachment.relative_path
                destination = images_dir / attachment.relative_path

                if not source.exists():
                    logger.warning(f"Image file not found: {source}")
                    continue

                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, destination)
                copied += 1

        logger.info(f"Copied {copied} required images to output directory")
        return copied
