"""RSS 2.0 feed publisher for watched Orders in Council."""

from datetime import datetime, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union
from xml.etree import ElementTree as ET

import structlog

from ..core.config import Settings
from ..core.models import DocumentRecord
from ..core.ordering import IdRecencyPolicy, higher_id_is_newer, sort_newest_first
from ..storage.files import atomic_write_text

logger = structlog.get_logger(__name__)

ATOM_NS = "http://www.w3.org/2005/Atom"
ET.register_namespace("atom", ATOM_NS)

DESCRIPTION_SEPARATOR = "<br/>"
GENERATOR = "oic-monitor"


def rfc822_date(published_date: str) -> Optional[str]:
    """Midnight UTC of a YYYY-MM-DD date, formatted for pubDate.

    Stored dates are only shape-checked, so an impossible one gives None.
    """
    try:
        day = datetime.strptime(published_date, "%Y-%m-%d")
    except ValueError:
        return None
    return format_datetime(day.replace(tzinfo=timezone.utc))


def describe(record: DocumentRecord) -> str:
    parts = []
    if record.pc_number:
        parts.append(f"PC Number: {record.pc_number}")
    if record.published_date:
        parts.append(f"Date: {record.published_date}")
    if record.matched_keywords:
        parts.append(f"Keywords: {', '.join(sorted(record.matched_keywords))}")
    return DESCRIPTION_SEPARATOR.join(parts)


class RSSFeedPublisher:
    """Renders the newest stored records as an RSS 2.0 document."""

    def __init__(self, settings: Settings,
                 id_recency: IdRecencyPolicy = higher_id_is_newer,
                 output_path: Optional[Union[str, Path]] = None):
        self.title = settings.feed_title
        self.description = settings.feed_description
        self.site_url = settings.search_url
        self.feed_url = settings.feed_url
        self.language = settings.language
        self.max_items = settings.max_feed_items
        self.id_recency = id_recency
        self.output_path = Path(output_path) if output_path else settings.feed_path

    def select(self, records: Iterable[DocumentRecord]) -> List[DocumentRecord]:
        """Newest records first, cut to the feed size.

        Records past the cut stay in the knowledge store.
        """
        return sort_newest_first(records, self.id_recency)[:self.max_items]

    def render(self, records: Iterable[DocumentRecord]) -> str:
        """Build the feed document.

        The channel carries no lastBuildDate: a wall-clock value would make
        every run differ, and one derived from item dates would miss
        keyword-only updates.
        """
        items = self.select(records)

        rss = ET.Element("rss", {"version": "2.0"})
        channel = ET.SubElement(rss, "channel")
        ET.SubElement(channel, "title").text = self.title
        ET.SubElement(channel, "description").text = self.description
        ET.SubElement(channel, "link").text = self.site_url
        ET.SubElement(channel, f"{{{ATOM_NS}}}link", {
            "href": self.feed_url,
            "rel": "self",
            "type": "application/rss+xml",
        })
        ET.SubElement(channel, "language").text = self.language
        ET.SubElement(channel, "generator").text = GENERATOR

        for record in items:
            self._add_item(channel, record)

        ET.indent(rss, space="  ")
        return ET.tostring(rss, encoding="utf-8", xml_declaration=True).decode("utf-8") + "\n"

    def _add_item(self, channel: ET.Element, record: DocumentRecord) -> None:
        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "title").text = record.title
        ET.SubElement(item, "link").text = record.url
        ET.SubElement(item, "guid", {"isPermaLink": "false"}).text = str(record.attach_id)
        pub_date = rfc822_date(record.published_date) if record.published_date else None
        if pub_date:
            ET.SubElement(item, "pubDate").text = pub_date
        ET.SubElement(item, "description").text = describe(record)

    def publish(self, records: Iterable[DocumentRecord]) -> int:
        """Render and write the feed. Returns the number of items published."""
        records = list(records)
        xml = self.render(records)
        atomic_write_text(self.output_path, xml)

        published = min(len(records), self.max_items)
        logger.info("Feed published", path=str(self.output_path), items=published)
        return published

    def health_check(self) -> bool:
        """Check that the feed location is writable."""
        try:
            directory = self.output_path.parent
            directory.mkdir(parents=True, exist_ok=True)
            test_file = directory / ".test_write"
            test_file.write_text("test")
            test_file.unlink()
            return True
        except OSError as e:
            logger.error("Feed publisher health check failed", error=str(e))
            return False
