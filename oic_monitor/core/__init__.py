"""
Core module for the Orders in Council monitoring system.
"""

from .config import Settings
from .exceptions import OICMonitorError, SearchFailure, AttachmentFailure
from .models import DocumentRecord, AttachmentMetadata, PipelineRun

__all__ = [
    "Settings",
    "OICMonitorError",
    "SearchFailure",
    "AttachmentFailure",
    "DocumentRecord",
    "AttachmentMetadata",
    "PipelineRun",
]
