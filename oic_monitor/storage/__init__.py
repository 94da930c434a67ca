"""
Persistent storage for discovered Orders in Council.
"""

from .knowledge_store import KnowledgeStore, merge_discoveries
from .files import atomic_write_text

__all__ = ["KnowledgeStore", "merge_discoveries", "atomic_write_text"]
