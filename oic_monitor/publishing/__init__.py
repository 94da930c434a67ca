"""
Publishing module for the keyword watch feed.
"""

from .rss_publisher import RSSFeedPublisher

__all__ = ["RSSFeedPublisher"]
