"""
Errors raised by the Orders in Council monitor.

Only transport failures are exceptions. Missing fields, empty result pages
and an unreadable knowledge store are handled where they occur.
"""

from typing import Optional


class OICMonitorError(Exception):
    """Base class for failures that abort a run."""


class SearchFailure(OICMonitorError):
    """The search endpoint did not answer successfully for a keyword."""

    def __init__(self, keyword: str, status_code: Optional[int] = None,
                 reason: Optional[str] = None):
        self.keyword = keyword
        self.status_code = status_code
        self.reason = reason
        detail = status_code if status_code is not None else reason
        super().__init__(f"Search failed ({keyword}): {detail}")


class AttachmentFailure(OICMonitorError):
    """The detail page for an attachment id could not be retrieved."""

    def __init__(self, attach_id: int, status_code: Optional[int] = None,
                 reason: Optional[str] = None):
        self.attach_id = attach_id
        self.status_code = status_code
        self.reason = reason
        detail = status_code if status_code is not None else reason
        super().__init__(f"Attachment failed ({attach_id}): {detail}")
