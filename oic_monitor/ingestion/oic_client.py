"""
HTTP client for the Orders in Council search portal.

The portal has no API: searches are a form POST to the index page and each
order has an attachment detail page. The client makes exactly one request per
call and never retries. Any failure is raised to the caller.
"""

from typing import Optional

import requests
import structlog

from ..core.config import Settings
from ..core.exceptions import AttachmentFailure, SearchFailure

logger = structlog.get_logger(__name__)


class OrdersInCouncilClient:
    """Client for the Orders in Council search and attachment pages."""

    # Other form fields exist but can be blank; the portal accepts this set
    SEARCH_ACTION = "Search / List"

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.timeout = settings.request_timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": settings.user_agent,
        })

    def search(self, keyword: str) -> str:
        """Run one keyword search and return the raw result page.

        Args:
            keyword: Search term sent in the ``keywords`` form field

        Returns:
            Result page HTML

        Raises:
            SearchFailure: The request failed or returned a non-success status
        """
        form = {
            "keywords": keyword,
            "searchList": self.SEARCH_ACTION,
        }

        logger.info("Searching Orders in Council", keyword=keyword)
        try:
            response = self.session.post(
                self.settings.search_url,
                data=form,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SearchFailure(keyword, reason=str(e)) from e

        if not response.ok:
            raise SearchFailure(keyword, status_code=response.status_code)

        return response.text

    def fetch_attachment(self, attach_id: int) -> str:
        """Fetch the detail page for one attachment id.

        Raises:
            AttachmentFailure: The request failed or returned a non-success status
        """
        params = {"attach": attach_id, "lang": self.settings.language}

        logger.info("Fetching attachment page", attach_id=attach_id)
        try:
            response = self.session.get(
                self.settings.attachment_endpoint,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AttachmentFailure(attach_id, reason=str(e)) from e

        if not response.ok:
            raise AttachmentFailure(attach_id, status_code=response.status_code)

        return response.text

    def health_check(self) -> bool:
        """Check that the portal answers at all."""
        try:
            response = self.session.get(self.settings.search_url, timeout=self.timeout)
            healthy = response.ok
        except requests.RequestException as e:
            logger.error("Portal health check failed", error=str(e))
            return False

        if not healthy:
            logger.error("Portal health check failed", status_code=response.status_code)
        return healthy
