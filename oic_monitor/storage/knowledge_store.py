"""
JSON-file knowledge store of every Order in Council discovered so far.
"""

import json
import re
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from ..core.models import DATE_PATTERN, PC_NUMBER_PATTERN, DocumentRecord, synthesize_title
from ..core.ordering import IdRecencyPolicy, higher_id_is_newer, sort_newest_first
from .files import atomic_write_text

logger = structlog.get_logger(__name__)


def merge_discoveries(
    current: Mapping[int, DocumentRecord],
    new_records: Mapping[int, DocumentRecord],
    run_matches: Mapping[int, Iterable[str]],
) -> Dict[int, DocumentRecord]:
    """Fold this run's keyword matches into the stored records.

    Args:
        current: Records loaded at the start of the run
        new_records: Records resolved this run for ids not in ``current``
        run_matches: Keywords whose search results contained each id this run

    Returns:
        A new mapping. Inputs are not modified and ids missing from
        ``run_matches`` are carried over as they are.
    """
    merged = dict(current)

    for attach_id, keywords in run_matches.items():
        record = merged.get(attach_id) or new_records.get(attach_id)
        if record is None:
            logger.warning("No record available for matched attachment", attach_id=attach_id)
            continue
        merged[attach_id] = record.with_keywords(keywords)

    return merged


def salvage_entry(entry: Any) -> Optional[DocumentRecord]:
    """Rebuild a stored entry that failed validation.

    Stored records are never re-resolved, so an entry is kept as long as its
    id is readable. Fields that do not validate are cleared, the title is
    synthesised if missing, and keywords that are not strings are dropped.
    """
    if not isinstance(entry, dict):
        return None
    try:
        attach_id = int(entry.get("attachId"))
    except (TypeError, ValueError):
        return None

    def matching(key: str, pattern: str) -> Optional[str]:
        value = entry.get(key)
        if isinstance(value, str) and re.match(pattern, value):
            return value
        return None

    pc_number = matching("pc", PC_NUMBER_PATTERN)
    title = entry.get("title")
    keywords = entry.get("keywords")
    url = entry.get("url")

    return DocumentRecord(
        attach_id=attach_id,
        url=url if isinstance(url, str) else "",
        pc_number=pc_number,
        published_date=matching("date", DATE_PATTERN),
        title=title if isinstance(title, str) and title else synthesize_title(attach_id, pc_number),
        matched_keywords=[k for k in keywords if isinstance(k, str)] if isinstance(keywords, list) else [],
    )


class KnowledgeStore:
    """Durable mapping of attachment id to its accumulated record."""

    def __init__(self, path: Union[str, Path],
                 id_recency: IdRecencyPolicy = higher_id_is_newer):
        self.path = Path(path)
        self.id_recency = id_recency

    def load(self) -> Dict[int, DocumentRecord]:
        """Read prior state. A missing or corrupt file means a first run."""
        if not self.path.exists():
            logger.info("No knowledge store found, starting empty", path=str(self.path))
            return {}

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Knowledge store unreadable, starting empty",
                           path=str(self.path), error=str(e))
            return {}

        if not isinstance(raw, list):
            logger.warning("Knowledge store is not a list, starting empty",
                           path=str(self.path), found=type(raw).__name__)
            return {}

        records: Dict[int, DocumentRecord] = {}
        for index, entry in enumerate(raw):
            try:
                record = DocumentRecord.model_validate(entry)
            except ValidationError as e:
                record = salvage_entry(entry)
                if record is None:
                    logger.warning("Skipping knowledge store entry without an id",
                                   index=index, error=str(e))
                    continue
                logger.warning("Kept knowledge store entry with invalid fields cleared",
                               index=index, attach_id=record.attach_id, error=str(e))

            existing = records.get(record.attach_id)
            if existing is not None:
                records[record.attach_id] = existing.with_keywords(record.matched_keywords)
            else:
                records[record.attach_id] = record

        logger.info("Loaded knowledge store", path=str(self.path), records=len(records))
        return records

    def persist(self, records: Mapping[int, DocumentRecord]) -> None:
        """Rewrite the whole store, newest first."""
        ordered = sort_newest_first(records.values(), self.id_recency)
        payload = json.dumps([record.to_json() for record in ordered],
                             indent=2, ensure_ascii=False)
        atomic_write_text(self.path, payload + "\n")
        logger.info("Saved knowledge store", path=str(self.path), records=len(ordered))

    def health_check(self) -> bool:
        """Check that the store's directory is writable."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            test_file = self.path.parent / ".test_write"
            test_file.write_text("test")
            test_file.unlink()
            return True
        except OSError as e:
            logger.error("Knowledge store health check failed", error=str(e))
            return False

    @staticmethod
    def stats(records: Mapping[int, DocumentRecord]) -> Dict[str, Any]:
        keyword_counts = Counter(
            keyword for record in records.values() for keyword in record.matched_keywords
        )
        return {
            "total_documents": len(records),
            "with_pc_number": sum(1 for r in records.values() if r.pc_number),
            "with_date": sum(1 for r in records.values() if r.published_date),
            "keyword_matches": dict(sorted(keyword_counts.items())),
        }
