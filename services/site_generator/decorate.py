"""Turns a stored note body into a standalone HTML page."""

import logging
import re
from datetime import datetime
from typing import Optional

from bs4 import BeautifulSoup, Doctype

from services.sync_service.attachments import FILE_REFERENCE_SCHEME

logger = logging.getLogger(__name__)

IMAGES_DIR = "images"


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as emitted by the Notes app."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_date(value: str) -> str:
    """Format an ISO timestamp like ``January 5, 2024``."""
    parsed = parse_timestamp(value)
    if parsed is None:
        logger.warning(f"Unparseable date: {value!r}")
        return value or ""
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def safe_filename(title: str) -> str:
    """Replace every character that is not an ASCII letter or digit with ``_``."""
    return re.sub(r"[^a-z0-9]", "_", title or "", flags=re.IGNORECASE)


def decorate(markup: str, published_date: str) -> str:
    """
    Wrap a note body into a page linked to the site stylesheet.

    Adds the head meta tags and stylesheet link, wraps loose content in a
    body, adds a link back to the site, takes the title from the first
    ``h1``, appends the published date and points ``file://`` image
    references at the site's images directory.

    Args:
        markup: Note body with extracted images
        published_date: ISO timestamp shown under the note

    Returns:
        HTML document
    """
    soup = BeautifulSoup(markup or "", "html.parser")

    html_tag = soup.find("html")
    if html_tag is None:
        html_tag = soup.new_tag("html")
        for child in list(soup.contents):
            if not isinstance(child, Doctype):
                html_tag.append(child.extract())
        soup.append(html_tag)

    head = soup.find("head")
    if head is None:
        head = soup.new_tag("head")
        html_tag.insert(0, head)

    if soup.find("body") is None:
        body = soup.new_tag("body")
        for child in list(html_tag.contents):
            if child is not head:
                body.append(child.extract())
        html_tag.append(body)
    body = soup.find("body")

    head_tags = [
        soup.new_tag("meta", charset="UTF-8"),
        soup.new_tag("meta", attrs={"http-equiv": "Content-Type", "content": "text/html; charset=UTF-8"}),
        soup.new_tag("meta", attrs={"name": "viewport", "content": "width=device-width, initial-scale=1.0"}),
        soup.new_tag("link", rel="stylesheet", href="style.css"),
    ]
    for tag in reversed(head_tags):
        head.insert(0, tag)

    site_link = soup.new_tag("div", attrs={"class": "site-link"})
    back = soup.new_tag("a", href="/")
    back.string = "Back to site"
    site_link.append(back)
    body.insert(0, site_link)

    first_heading = soup.find("h1")
    title = soup.new_tag("title")
    title.string = first_heading.get_text(strip=True) if first_heading else ""
    head.append(title)

    published = soup.new_tag("div", attrs={"class": "published-date"})
    published.string = f"Published on {format_date(published_date)}"
    body.append(published)

    for img in soup.find_all("img", src=re.compile("^" + re.escape(FILE_REFERENCE_SCHEME))):
        img["src"] = f"{IMAGES_DIR}/{img['src'][len(FILE_REFERENCE_SCHEME):]}"

    return str(soup)
