"""
Resolution of newly discovered attachment ids into document records.
"""

import structlog

from ..core.models import DocumentRecord, synthesize_title
from .extraction import parse_attachment_metadata
from .oic_client import OrdersInCouncilClient

logger = structlog.get_logger(__name__)


class AttachmentResolver:
    """Builds a DocumentRecord from a single attachment detail page.

    Fields missing from the page are left empty. Only a failed fetch is an
    error, and it propagates as AttachmentFailure. Keywords are left empty
    for the caller to attribute.
    """

    def __init__(self, client: OrdersInCouncilClient):
        self.client = client

    def resolve(self, attach_id: int) -> DocumentRecord:
        page = self.client.fetch_attachment(attach_id)
        metadata = parse_attachment_metadata(page)

        if metadata.pc_number is None or metadata.published_date is None:
            logger.warning("Attachment page missing metadata",
                           attach_id=attach_id,
                           has_pc_number=metadata.pc_number is not None,
                           has_date=metadata.published_date is not None)

        return DocumentRecord(
            attach_id=attach_id,
            url=self.client.settings.attachment_url(attach_id),
            pc_number=metadata.pc_number,
            published_date=metadata.published_date,
            title=synthesize_title(attach_id, metadata.pc_number),
        )
