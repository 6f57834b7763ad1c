"""Forum tag lookups.

Writes resolve names strictly: one unknown name blocks the whole update.
Reads resolve ids leniently: a stale id is shown as a placeholder.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from discord_forum_mcp.errors import NotFound
from discord_forum_mcp.models import Channel, Tag

UNKNOWN_TAG_NAME = "Unknown Tag"


def resolve_tag_ids(names: Sequence[str], forum: Channel) -> List[str]:
    lookup = {tag.name.strip().lower(): tag for tag in forum.available_tags}

    resolved: List[str] = []
    missing: List[str] = []
    for name in names:
        tag = lookup.get(name.strip().lower())
        if tag is None:
            if name not in missing:
                missing.append(name)
        elif tag.id not in resolved:
            resolved.append(tag.id)

    if missing:
        available = ", ".join(f'"{tag.name}"' for tag in forum.available_tags)
        raise NotFound(
            f"Tags not found in #{forum.name}: {', '.join(missing)}. "
            f"Available tags: {available or 'none'}"
        )
    return resolved


def merge_tag_ids(existing: Iterable[str], added: Iterable[str]) -> List[str]:
    return list(dict.fromkeys([*existing, *added]))


def serialize_tag(tag: Tag) -> Dict[str, Any]:
    emoji: Optional[Dict[str, Optional[str]]] = None
    if tag.emoji is not None:
        emoji = {"id": tag.emoji.id, "name": tag.emoji.name}
    return {"id": tag.id, "name": tag.name, "emoji": emoji}


def describe_tags(tag_ids: Iterable[str], forum: Channel) -> List[Dict[str, Any]]:
    described = []
    for tag_id in tag_ids:
        tag = forum.get_tag(tag_id)
        if tag is None:
            described.append({"id": tag_id, "name": UNKNOWN_TAG_NAME, "emoji": None})
        else:
            described.append(serialize_tag(tag))
    return described


def tag_names(tag_ids: Iterable[str], forum: Channel) -> List[str]:
    return [tag["name"] for tag in describe_tags(tag_ids, forum)]
