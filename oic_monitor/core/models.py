"""
Data models for the Orders in Council monitoring system.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


PC_NUMBER_PATTERN = r"^\d{4}-\d{4}$"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


def synthesize_title(attach_id: int, pc_number: Optional[str]) -> str:
    """Title shown in the feed; never empty."""
    if pc_number:
        return f"Order in Council {pc_number}"
    return f"Order in Council (attach {attach_id})"


class AttachmentMetadata(BaseModel):
    """Fields scraped from one attachment detail page."""
    pc_number: Optional[str] = None
    published_date: Optional[str] = None


class DocumentRecord(BaseModel):
    """One Order in Council, keyed by its attachment id.

    Serialised with the key names used in ``data/items.json`` (``attachId``,
    ``pc``, ``date``, ``keywords``) so existing stores keep loading.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    attach_id: int = Field(alias="attachId")
    url: str
    pc_number: Optional[str] = Field(None, alias="pc", pattern=PC_NUMBER_PATTERN)
    published_date: Optional[str] = Field(None, alias="date", pattern=DATE_PATTERN)
    title: str = Field(min_length=1)
    matched_keywords: List[str] = Field(default_factory=list, alias="keywords")

    @field_validator("matched_keywords", mode="before")
    @classmethod
    def _normalise_keywords(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return sorted(set(value))

    def with_keywords(self, keywords: Iterable[str]) -> "DocumentRecord":
        """Copy of this record whose keywords are the union with ``keywords``."""
        merged = sorted(set(self.matched_keywords) | set(keywords))
        return self.model_copy(update={"matched_keywords": merged})

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


class PipelineRun(BaseModel):
    """Pipeline execution tracking."""
    run_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    status: str = "running"  # running, completed, failed
    dry_run: bool = False

    keywords_searched: int = 0
    documents_matched: int = 0
    new_documents: int = 0
    published_documents: int = 0
    stored_documents: int = 0
    skipped_documents: List[int] = Field(default_factory=list)

    error_message: Optional[str] = None
