"""
Pattern-based extraction from Orders in Council portal pages.

Both functions take raw page text and never raise: markup they cannot make
sense of yields an empty list or absent fields.
"""

import html
import re
from datetime import datetime
from typing import List, Optional

import structlog

from ..core.models import AttachmentMetadata

logger = structlog.get_logger(__name__)

ATTACHMENT_LINK_RE = re.compile(r"attachment\.php\?attach=(\d+)", re.IGNORECASE)
PC_NUMBER_RE = re.compile(r"PC Number:\s*([0-9]{4}-[0-9]{4})", re.IGNORECASE)
DATE_RE = re.compile(r"Date:\s*([0-9]{4}-[0-9]{2}-[0-9]{2})", re.IGNORECASE)

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def extract_attach_ids(page: Optional[str]) -> List[int]:
    """Return attachment ids linked from a search result page.

    Ids are de-duplicated, keeping the order in which the portal listed them.
    """
    if not page:
        return []

    seen = set()
    ids = []
    for match in ATTACHMENT_LINK_RE.finditer(page):
        attach_id = int(match.group(1))
        if attach_id not in seen:
            seen.add(attach_id)
            ids.append(attach_id)

    if not ids:
        logger.debug("No attachment links found in search results", page_length=len(page))
    return ids


def _flatten(page: str) -> str:
    """Strip tags and entities so labels split across markup still match."""
    text = _TAG_RE.sub(" ", page)
    text = html.unescape(text)
    return _WHITESPACE_RE.sub(" ", text)


def _parse_date(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date().isoformat()
    except ValueError:
        logger.warning("Ignoring unparsable attachment date", raw_date=raw)
        return None


def parse_attachment_metadata(page: Optional[str]) -> AttachmentMetadata:
    """Pull the PC number and date off an attachment detail page.

    These pages typically read "PC Number: YYYY-NNNN" and "Date: YYYY-MM-DD".
    """
    if not page:
        return AttachmentMetadata()

    text = _flatten(page)
    pc_match = PC_NUMBER_RE.search(text)
    date_match = DATE_RE.search(text)

    return AttachmentMetadata(
        pc_number=pc_match.group(1) if pc_match else None,
        published_date=_parse_date(date_match.group(1) if date_match else None),
    )
