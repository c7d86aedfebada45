"""
Admissibility filter for decoded player records
"""

from typing import Callable, Iterable, Iterator, Optional
from schemas.player import PlayerRecord
import logging

logger = logging.getLogger(__name__)


def is_admissible(record: PlayerRecord) -> bool:
    """A player is served only with a name and at least one rated game"""
    return record.name != "" and record.games > 0


def select_admissible(
    records: Iterable[PlayerRecord],
    on_skip: Optional[Callable[[PlayerRecord], None]] = None
) -> Iterator[PlayerRecord]:
    """
    Yield admissible records in feed order.

    Rejected records are reported, never raised: a skip notice is logged
    and on_skip is called with the record.
    """
    for record in records:
        if is_admissible(record):
            yield record
            continue

        logger.info(
            f"Skip player FIDE ID {record.fideid} by having either name or games field empty"
        )
        if on_skip is not None:
            on_skip(record)
