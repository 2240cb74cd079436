"""Command line entry point: list folders, sync a folder, list stored notes, build the site."""

import argparse
import asyncio
import logging
import sys
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from shared.config import get_attachments_dir, get_database_url, get_default_collection
from shared.db_operations import DatabaseOperations
from shared.errors import ProviderError
from shared.models import Note, NotesFolder
from services.notes_provider.provider import AppleNotesProvider
from services.site_generator.decorate import parse_timestamp
from services.site_generator.generator import SiteGenerator
from services.site_generator.themes import DEFAULT_THEME, THEMES
from services.sync_service.attachments import AttachmentExtractor
from services.sync_service.orchestrator import SyncOrchestrator

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False):
    """Configure root logging for the command line."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notes-site",
        description="Export Apple Notes folders into a SQLite database and a static HTML site."
    )
    parser.add_argument("--database-url", default=None, help="SQLAlchemy URL of the notes database")
    parser.add_argument("--attachments-dir", default=None, help="Directory for extracted images")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("folders", help="List the folders of the Notes app")

    sync_parser = subparsers.add_parser("sync", help="Sync a notes folder into the database")
    sync_parser.add_argument("collection", nargs="?", default=None, help="Notes folder name")

    list_parser = subparsers.add_parser("list", help="List notes stored in the database")
    list_parser.add_argument("--collection", default=None, help="Only list notes of this folder")

    generate_parser = subparsers.add_parser("generate", help="Sync a folder and build its static site")
    generate_parser.add_argument("collection", help="Notes folder name")
    generate_parser.add_argument("output_dir", help="Directory receiving the site")
    generate_parser.add_argument(
        "--theme",
        default=DEFAULT_THEME,
        help=f"Index page theme ({', '.join(sorted(THEMES))})"
    )
    generate_parser.add_argument("--no-sync", action="store_true", help="Build from the database as is")

    return parser


def run_sync(db_ops: DatabaseOperations, collection: str, attachments_dir: str) -> Dict:
    """Run one sync of ``collection`` against an open store."""
    orchestrator = SyncOrchestrator(
        provider=AppleNotesProvider(),
        db_ops=db_ops,
        extractor=AttachmentExtractor(attachments_dir)
    )
    return asyncio.run(orchestrator.execute_sync(collection))


def report_sync(result: Dict) -> int:
    """Print the outcome of a sync and return the exit status."""
    if result["status"] == "failed":
        print(f"Error: sync of \"{result['collection']}\" failed during {result['stage']}: {result['error']}",
              file=sys.stderr)
        return 1
    if result["status"] == "up_to_date":
        print(f"All notes in \"{result['collection']}\" are up to date")
        return 0

    summary = result["summary"]
    print(f"Synced {summary['synced_notes']} notes ({summary['attachments']} images) "
          f"from \"{result['collection']}\"")
    return 0


def print_folders(folders: List[NotesFolder]):
    """Print the folders that can be synced."""
    print("\nNotes folders:")
    print("=============")

    for folder in folders:
        print(f"{folder.name} ({folder.note_count} notes)")

    print(f"\nTotal folders: {len(folders)}")


def list_folders() -> int:
    """Print the Notes folders and return the exit status."""
    try:
        folders = asyncio.run(AppleNotesProvider().fetch_folders())
    except ProviderError as e:
        logger.error(f"Listing folders failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_folders(folders)
    return 0


def format_size(size: int) -> str:
    if size > 1024 * 1024:
        return f"{size / (1024 * 1024):.2f} MB"
    return f"{size / 1024:.2f} KB"


def format_timestamp(value: str) -> str:
    parsed = parse_timestamp(value)
    return parsed.strftime("%Y-%m-%d %H:%M:%S") if parsed else (value or "")


def print_notes(notes: List[Note]):
    """Print a summary of stored notes."""
    print("\nNotes in database:")
    print("=================")

    for note in notes:
        print(
            f"\nTitle: {note.title}\n"
            f"Folder: {note.collection}\n"
            f"Created: {format_timestamp(note.created_at)}\n"
            f"Modified: {format_timestamp(note.modified_at)}\n"
            f"Content Size: {format_size(len(note.body.encode('utf-8')))}\n"
            f"Images: {len(note.attachments)}\n"
            f"-------------------"
        )

    print(f"\nTotal notes: {len(notes)}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "folders":
        return list_folders()

    attachments_dir = args.attachments_dir or get_attachments_dir()

    try:
        with DatabaseOperations(args.database_url or get_database_url()) as db_ops:
            db_ops.create_tables()

            if args.command == "sync":
                collection = args.collection or get_default_collection()
                logger.info(f"Starting sync for folder: {collection}")
                return report_sync(run_sync(db_ops, collection, attachments_dir))

            if args.command == "list":
                print_notes(db_ops.list_notes(args.collection))
                return 0

            if args.command == "generate":
                if not args.no_sync:
                    status = report_sync(run_sync(db_ops, args.collection, attachments_dir))
                    if status != 0:
                        return status

                result = SiteGenerator(db_ops, attachments_dir).generate(
                    args.output_dir, args.collection, args.theme
                )
                print(f"Generated {result['pages']} pages and copied {result['images']} images "
                      f"to {result['output_dir']}")
                return 0

    except (SQLAlchemyError, OSError) as e:
        logger.error(f"{args.command} failed: {e}", exc_info=args.verbose)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 1


if __name__ == "__main__":
    sys.exit(main())
