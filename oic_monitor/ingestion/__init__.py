"""
Data ingestion module for the Orders in Council portal.
"""

from .oic_client import OrdersInCouncilClient
from .extraction import extract_attach_ids, parse_attachment_metadata
from .resolver import AttachmentResolver

__all__ = [
    "OrdersInCouncilClient",
    "AttachmentResolver",
    "extract_attach_ids",
    "parse_attachment_metadata",
]
