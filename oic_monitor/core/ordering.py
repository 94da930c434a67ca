"""
Recency ordering shared by attachment resolution and the published feed.

The portal does not document how attachment ids are assigned. Treating a
higher id as a newer order is a heuristic, so it is passed around as a
replaceable policy instead of being baked into the sort.
"""

from typing import Callable, Iterable, List

from .models import DocumentRecord

IdRecencyPolicy = Callable[[int], int]


def higher_id_is_newer(attach_id: int) -> int:
    return attach_id


def newest_ids_first(ids: Iterable[int],
                     id_recency: IdRecencyPolicy = higher_id_is_newer) -> List[int]:
    return sorted(ids, key=id_recency, reverse=True)


def sort_newest_first(records: Iterable[DocumentRecord],
                      id_recency: IdRecencyPolicy = higher_id_is_newer) -> List[DocumentRecord]:
    """Order by publication date descending, then by id recency.

    Undated records compare as the empty string and therefore sort last.
    """
    return sorted(
        records,
        key=lambda record: (record.published_date or "", id_recency(record.attach_id)),
        reverse=True,
    )
