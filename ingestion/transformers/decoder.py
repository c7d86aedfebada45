"""
Decode the XML player feed into typed records
"""

import xml.etree.ElementTree as ET
from io import BytesIO
from typing import Any, Dict

from pydantic import ValidationError

from schemas.player import PlayerRecord, PlayerFeedDocument
from core.exceptions import FeedParseError
import logging

logger = logging.getLogger(__name__)

ROOT_TAG = "playerslist"
PLAYER_TAG = "player"
ID_TAG = "fideid"
FIELD_TAGS = frozenset(PlayerRecord.model_fields)


def decode_feed(content: bytes) -> PlayerFeedDocument:
    """
    Parse the feed into a PlayerFeedDocument, preserving feed order.

    The document must be rooted at <playerslist>; every direct <player>
    child becomes one record. Unknown tags are ignored. Any structural or
    value error aborts the whole decode with FeedParseError.
    """
    players = []
    root = None
    depth = 0

    try:
        for event, elem in ET.iterparse(BytesIO(content), events=("start", "end")):
            if event == "start":
                depth += 1
                if depth == 1:
                    if elem.tag != ROOT_TAG:
                        raise FeedParseError(
                            f"Expected <{ROOT_TAG}> root element",
                            context={"element": elem.tag}
                        )
                    root = elem
                continue

            depth -= 1
            if depth == 1 and elem.tag == PLAYER_TAG:
                players.append(_decode_player(elem, index=len(players)))
                # Drop decoded subtrees so memory stays flat on large feeds
                root.clear()
    except ET.ParseError as e:
        raise FeedParseError(
            "Feed is not well-formed XML",
            context={"position": e.position},
            original_exception=e
        )

    logger.info(f"Decoded {len(players)} players from feed")
    return PlayerFeedDocument(players=players)


def _decode_player(elem: ET.Element, index: int) -> PlayerRecord:
    fields: Dict[str, Any] = {}
    for child in elem:
        if child.tag in FIELD_TAGS:
            fields[child.tag] = child.text

    if ID_TAG not in fields:
        raise FeedParseError(
            f"<{PLAYER_TAG}> element without <{ID_TAG}>",
            context={"player_index": index}
        )

    try:
        return PlayerRecord(**fields)
    except ValidationError as e:
        raise FeedParseError(
            "Invalid player field value",
            context={
                "player_index": index,
                "fideid": fields.get(ID_TAG),
                "field_errors": [
                    {"field": ".".join(str(p) for p in err["loc"]), "error": err["msg"]}
                    for err in e.errors()
                ]
            },
            original_exception=e
        )
