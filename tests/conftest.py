"""
Shared fixtures: settings pointed at tmp_path and a fake portal session.
"""
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from unittest.mock import Mock

import pytest

from oic_monitor.core.config import Settings
from oic_monitor.core.models import DocumentRecord, synthesize_title


def make_response(text="", status=200):
    response = Mock()
    response.ok = 200 <= status < 400
    response.status_code = status
    response.text = text
    return response


def search_page(*attach_ids):
    """Search result markup linking to the given attachment ids."""
    rows = "\n".join(
        f'<tr><td><a href="attachment.php?attach={attach_id}&amp;lang=en">View</a></td></tr>'
        for attach_id in attach_ids
    )
    return f"<html><body><table>{rows}</table></body></html>"


def attachment_page(pc_number=None, date=None):
    parts = ["<html><body><h1>Order in Council</h1>"]
    if pc_number:
        parts.append(f"<p><strong>PC Number:</strong> {pc_number}</p>")
    if date:
        parts.append(f"<p>Date: {date}</p>")
    parts.append("</body></html>")
    return "".join(parts)


class FakePortal:
    """Stands in for requests.Session against the Orders in Council portal.

    ``searches`` maps keyword to a page string or an int status code;
    ``attachments`` maps attachment id the same way. Unknown keywords return
    an empty result page, unknown attachments a 404.
    """

    def __init__(self, searches=None, attachments=None):
        self.searches = dict(searches or {})
        self.attachments = dict(attachments or {})
        self.headers = {}
        self.calls = []

    def post(self, url, data=None, timeout=None):
        keyword = data["keywords"]
        self.calls.append(("search", keyword))
        page = self.searches.get(keyword, "<html><body>No results</body></html>")
        if isinstance(page, int):
            return make_response(status=page)
        return make_response(page)

    def get(self, url, params=None, timeout=None):
        if params is None:
            self.calls.append(("health", url))
            return make_response("<html></html>")
        attach_id = int(params["attach"])
        self.calls.append(("attachment", attach_id))
        page = self.attachments.get(attach_id, 404)
        if isinstance(page, int):
            return make_response(status=page)
        return make_response(page)

    @property
    def fetched_attachments(self):
        return [value for kind, value in self.calls if kind == "attachment"]


@pytest.fixture
def settings_factory(tmp_path):
    def factory(**overrides):
        values = {
            "keywords": ["cannabis"],
            "data_dir": str(tmp_path / "data"),
            "feed_file": str(tmp_path / "feed.xml"),
            "search_pause_seconds": 0.6,
            "attachment_pause_seconds": 0.5,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return factory


@pytest.fixture
def settings(settings_factory):
    return settings_factory()


@pytest.fixture
def make_record():
    def factory(attach_id, pc_number=None, published_date=None, keywords=()):
        return DocumentRecord(
            attach_id=attach_id,
            url=f"https://orders-in-council.canada.ca/attachment.php?attach={attach_id}&lang=en",
            pc_number=pc_number,
            published_date=published_date,
            title=synthesize_title(attach_id, pc_number),
            matched_keywords=list(keywords),
        )
    return factory
