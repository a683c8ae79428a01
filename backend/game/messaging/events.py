"""
Event model of the messaging protocol.

Events follow the Nostr NIP-01 layout: the id is the sha256 of the
canonical serialization ``[0, pubkey, created_at, kind, tags, content]``
and the signature is a Schnorr signature over that id. Threads are linked
with ``e`` tags (referenced event ids) and ``p`` tags (addressed pubkeys).
"""

import hashlib
import json
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

KIND_TEXT_NOTE = 1

TAG_EVENT = "e"
TAG_PUBKEY = "p"
MARKER_REPLY = "reply"

# ["e", <event id>, <relay url>, <marker>]
_MARKER_INDEX = 3

HexId = Annotated[str, Field(pattern=r"^[0-9a-f]{64}$")]


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: HexId
    pubkey: HexId
    created_at: int = Field(ge=0)
    kind: int = Field(ge=0)
    tags: list[list[str]] = Field(default_factory=list)
    content: str = ""
    sig: str = ""


def compute_event_id(pubkey: str, created_at: int, kind: int, tags: list[list[str]], content: str) -> str:
    """Return the NIP-01 event id (hex sha256 of the canonical serialization)."""
    serialized = json.dumps(
        [0, pubkey, created_at, kind, tags, content],
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


def find_reference(tags: list[list[str]]) -> str | None:
    """
    Return the id of the event this one replies to.

    Prefers the last ``e`` tag carrying the ``reply`` marker; falls back to
    the last ``e`` tag; None when there is no ``e`` tag with a value.
    """
    event_tags = [tag for tag in tags if len(tag) > 1 and tag[0] == TAG_EVENT]
    marked = [tag for tag in event_tags if len(tag) > _MARKER_INDEX and tag[_MARKER_INDEX] == MARKER_REPLY]
    if marked:
        return marked[-1][1]
    if event_tags:
        return event_tags[-1][1]
    return None


def _append_unique(tags: list[list[str]], tag: list[str]) -> None:
    # uniqueness is decided on the tag name and value only
    if not any(existing[:2] == tag[:2] for existing in tags):
        tags.append(tag)


def reply_tags(inbound: Event) -> list[list[str]]:
    """
    Build the tags of a reply to inbound.

    Text notes start from a clean slate; other kinds keep their tags minus
    the thread tags. The reply then references inbound and addresses its author.
    """
    if inbound.kind == KIND_TEXT_NOTE:
        tags: list[list[str]] = []
    else:
        tags = [list(tag) for tag in inbound.tags if not tag or tag[0] not in (TAG_EVENT, TAG_PUBKEY)]
    _append_unique(tags, [TAG_EVENT, inbound.id])
    _append_unique(tags, [TAG_PUBKEY, inbound.pubkey])
    return tags
