"""
Configuration management for the Orders in Council monitoring system.
"""

from pathlib import Path
from typing import List
from urllib.parse import urlencode

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_KEYWORDS = [
    "cannabis",
    "vaping",
    "excise",
    "liquor",
    "alcohol",
    "drug",
    "drugs",
    "proceeds of crime",
    "contraventions",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The object is frozen: build it once at process start and hand it to
    the pipeline explicitly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    # Portal
    language: str = Field("en", alias="OIC_LANGUAGE")
    base_url: str = Field("https://orders-in-council.canada.ca", alias="OIC_BASE_URL")
    user_agent: str = Field("OIC-Keyword-RSS/1.0 (polite polling)", alias="OIC_USER_AGENT")
    request_timeout_seconds: float = Field(30.0, alias="OIC_REQUEST_TIMEOUT")

    # Search behaviour
    keywords: List[str] = Field(default_factory=lambda: list(DEFAULT_KEYWORDS), alias="OIC_KEYWORDS")
    check_limit_per_keyword: int = Field(40, ge=1, alias="OIC_CHECK_LIMIT_PER_KEYWORD")
    max_feed_items: int = Field(80, ge=1, alias="OIC_MAX_FEED_ITEMS")

    # Politeness pauses between outbound requests
    search_pause_seconds: float = Field(0.6, ge=0.0, alias="OIC_SEARCH_PAUSE")
    attachment_pause_seconds: float = Field(0.5, ge=0.0, alias="OIC_ATTACHMENT_PAUSE")

    # A failed detail page aborts the run unless this is switched off
    abort_on_attachment_failure: bool = Field(True, alias="OIC_ABORT_ON_ATTACHMENT_FAILURE")

    # Output locations
    data_dir: str = Field("data", alias="DATA_DIR")
    items_filename: str = Field("items.json", alias="OIC_ITEMS_FILENAME")
    feed_file: str = Field("feed.xml", alias="OIC_FEED_PATH")
    feed_url: str = Field("feed.xml", alias="OIC_FEED_URL")
    feed_title: str = Field("Orders in Council: keyword watch (EN)", alias="OIC_FEED_TITLE")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    @property
    def search_url(self) -> str:
        """Search endpoint, also used as the feed's site link."""
        return f"{self.base_url}/index.php?{urlencode({'lang': self.language})}"

    @property
    def attachment_endpoint(self) -> str:
        return f"{self.base_url}/attachment.php"

    def attachment_url(self, attach_id: int) -> str:
        """Canonical detail page URL for an attachment id."""
        query = urlencode({"attach": attach_id, "lang": self.language})
        return f"{self.attachment_endpoint}?{query}"

    @property
    def items_path(self) -> Path:
        """Location of the persisted knowledge store."""
        return Path(self.data_dir) / self.items_filename

    @property
    def feed_path(self) -> Path:
        return Path(self.feed_file)

    @property
    def feed_description(self) -> str:
        return f"Auto-generated RSS for keywords: {', '.join(self.keywords)}"
