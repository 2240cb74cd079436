"""Index page themes: a blog list and a photo grid."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List

from bs4 import BeautifulSoup

from shared.models import Note
from services.site_generator.decorate import IMAGES_DIR, format_date, parse_timestamp, safe_filename
from services.site_generator.style import PHOTO_GRID_STYLE

logger = logging.getLogger(__name__)

INDEX_TEMPLATE = "<!DOCTYPE html><html><head></head><body></body></html>"

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _newest_first(notes: List[Note]) -> List[Note]:
    def created(note: Note) -> datetime:
        parsed = parse_timestamp(note.created_at)
        if parsed is None:
            return _OLDEST
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    return sorted(notes, key=created, reverse=True)


def _index_soup(site_name: str) -> BeautifulSoup:
    soup = BeautifulSoup(INDEX_TEMPLATE, "html.parser")
    head = soup.head
    head.append(soup.new_tag("meta", charset="UTF-8"))
    head.append(soup.new_tag("meta", attrs={"http-equiv": "Content-Type", "content": "text/html; charset=UTF-8"}))
    head.append(soup.new_tag("meta", attrs={"name": "viewport", "content": "width=device-width, initial-scale=1.0"}))
    head.append(soup.new_tag("link", rel="stylesheet", href="style.css"))
    title = soup.new_tag("title")
    title.string = site_name
    head.append(title)

    heading = soup.new_tag("h1")
    heading.string = site_name
    soup.body.append(heading)
    return soup


def _write_index(soup: BeautifulSoup, html_dir: Path) -> Path:
    index_path = Path(html_dir) / "index.html"
    index_path.write_text(str(soup), encoding="utf-8")
    return index_path


def generate_blog_index(notes: List[Note], html_dir: Path, site_name: str) -> Path:
    """Write an index listing every note, newest first."""
    soup = _index_soup(site_name)
    notes_list = soup.new_tag("ul", attrs={"class": "notes-list"})

    for note in _newest_first(notes):
        item = soup.new_tag("li")
        link_row = soup.new_tag("div", attrs={"class": "note-link"})

        link = soup.new_tag("a", href=f"{safe_filename(note.title)}.html")
        link.string = note.title
        date = soup.new_tag("span", attrs={"class": "note-date"})
        date.string = format_date(note.created_at)

        link_row.append(link)
        link_row.append(date)
        item.append(link_row)
        notes_list.append(item)

    soup.body.append(notes_list)
    index_path = _write_index(soup, html_dir)
    logger.info(f"Index page generated at {index_path}")
    return index_path


def generate_photos_index(notes: List[Note], html_dir: Path, site_name: str) -> Path:
    """Write a grid index showing the first image of every note, newest first."""
    soup = _index_soup(site_name)
    style = soup.new_tag("style")
    style.string = PHOTO_GRID_STYLE
    soup.head.append(style)

    grid = soup.new_tag("div", attrs={"class": "photo-grid"})

    for note in _newest_first(notes):
        item = soup.new_tag("a", href=f"{safe_filename(note.title)}.html", attrs={"class": "photo-item"})
        container = soup.new_tag("div", attrs={"class": "photo-container"})

        if note.attachments:
            cover = note.attachments[0]
            container.append(soup.new_tag("img", src=f"{IMAGES_DIR}/{cover.relative_path}", alt=note.title))
        else:
            placeholder = soup.new_tag("div", attrs={"class": "photo-placeholder"})
            placeholder.string = "No image"
            container.append(placeholder)

        title = soup.new_tag("div", attrs={"class": "photo-title"})
        title.string = note.title
        date = soup.new_tag("div", attrs={"class": "photo-date"})
        date.string = format_date(note.created_at)

        item.append(container)
        item.append(title)
        item.append(date)
        grid.append(item)

    soup.body.append(grid)
    index_path = _write_index(soup, html_dir)
    logger.info(f"Photo grid index page generated at {index_path}")
    return index_path


THEMES: Dict[str, Callable[[List[Note], Path, str], Path]] = {
    "blog": generate_blog_index,
    "photos": generate_photos_index,
}

DEFAULT_THEME = "blog"


def get_index_generator(theme: str) -> Callable[[List[Note], Path, str], Path]:
    """Return the index generator for a theme, falling back to the blog list."""
    generator = THEMES.get((theme or DEFAULT_THEME).lower())
    if generator is None:
        logger.warning(f"Unknown theme \"{theme}\", using {DEFAULT_THEME}")
        return THEMES[DEFAULT_THEME]
    return generator
