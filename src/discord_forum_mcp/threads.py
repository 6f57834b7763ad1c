from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from discord_forum_mcp.models import Channel, Thread
from discord_forum_mcp.pagination import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_BATCHES,
    fetch_all_archived,
)
from discord_forum_mcp.ports import DiscordGateway
from discord_forum_mcp.tags import describe_tags


@dataclass(frozen=True)
class ThreadFilter:
    query: str
    exact_match: bool = False

    def matches(self, thread: Thread) -> bool:
        name = thread.name.lower()
        query = self.query.lower()
        if self.exact_match:
            return name == query
        return query in name


@dataclass(frozen=True)
class ThreadListing:
    threads: List[Dict[str, Any]]
    total_matched: int
    total_scanned: int


def merge_threads(*groups: Iterable[Thread]) -> List[Thread]:
    """Concatenate thread groups, keeping the first copy of each id."""
    merged: Dict[str, Thread] = {}
    for group in groups:
        for thread in group:
            merged.setdefault(thread.id, thread)
    return list(merged.values())


def newest_first(threads: Iterable[Thread]) -> List[Thread]:
    # sorted() is stable with reverse=True, equal timestamps keep input order
    return sorted(threads, key=lambda t: t.created_timestamp, reverse=True)


def thread_view(thread: Thread, forum: Channel) -> Dict[str, Any]:
    return {
        "threadId": thread.id,
        "threadName": thread.name,
        "createdAt": thread.created_at.isoformat(),
        "createdTimestamp": thread.created_timestamp,
        "ownerId": thread.owner_id,
        "archived": thread.archived,
        "locked": thread.locked,
        "messageCount": thread.message_count,
        "memberCount": thread.member_count,
        "totalMessageSent": thread.total_message_sent,
        "rateLimitPerUser": thread.rate_limit_per_user,
        "tags": describe_tags(thread.applied_tags, forum),
        "lastMessageId": thread.last_message_id,
    }


async def collect_threads(
    gateway: DiscordGateway,
    forum: Channel,
    include_archived: bool,
    max_batches: int = DEFAULT_MAX_BATCHES,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> List[Thread]:
    active = await gateway.fetch_active_threads(forum)
    if not include_archived:
        return merge_threads(active)
    archived = await fetch_all_archived(
        gateway, forum, max_batches=max_batches, batch_size=batch_size
    )
    return merge_threads(active, archived)


async def list_or_search(
    gateway: DiscordGateway,
    forum: Channel,
    include_archived: bool,
    thread_filter: Optional[ThreadFilter],
    limit: int,
    max_batches: int = DEFAULT_MAX_BATCHES,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> ThreadListing:
    threads = await collect_threads(
        gateway,
        forum,
        include_archived,
        max_batches=max_batches,
        batch_size=batch_size,
    )
    matched = threads
    if thread_filter is not None:
        matched = [t for t in threads if thread_filter.matches(t)]
    selected = newest_first(matched)[:limit]
    return ThreadListing(
        threads=[thread_view(thread, forum) for thread in selected],
        total_matched=len(matched),
        total_scanned=len(threads),
    )
