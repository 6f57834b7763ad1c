"""The operations exposed to MCP callers.

Each method resolves its targets through :class:`Resolver` and returns a plain
dict; rendering to MCP content happens in :mod:`discord_forum_mcp.server`.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from discord_forum_mcp.pagination import DEFAULT_BATCH_SIZE, DEFAULT_MAX_BATCHES
from discord_forum_mcp.ports import DiscordGateway
from discord_forum_mcp.resolvers import Resolver, TargetKind
from discord_forum_mcp.tags import describe_tags, merge_tag_ids, resolve_tag_ids, tag_names
from discord_forum_mcp.threads import ThreadFilter, list_or_search, newest_first
from discord_forum_mcp.views import message_view

logger = logging.getLogger(__name__)

THREAD_MESSAGE_LIMIT = 10


class DiscordTools:
    def __init__(
        self,
        gateway: DiscordGateway,
        default_guild: Optional[str] = None,
        archive_max_batches: int = DEFAULT_MAX_BATCHES,
        archive_batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        self.gateway = gateway
        self.resolver = Resolver(gateway, default_guild=default_guild)
        self.archive_max_batches = archive_max_batches
        self.archive_batch_size = archive_batch_size

    async def send_message(
        self, channel: str, message: str, server: Optional[str] = None
    ) -> Dict[str, Any]:
        guild = await self.resolver.guild(server)
        target = await self.resolver.channel(channel, guild, TargetKind.TEXT_OR_THREAD)
        sent = await self.gateway.send_message(target, message)
        logger.info("sent message %s to #%s in %s", sent.id, target.name, guild.name)
        return {
            "channelName": target.name,
            "guildName": guild.name,
            "sentMessageId": sent.id,
        }

    async def read_messages(
        self,
        channel: str,
        server: Optional[str] = None,
        limit: int = 50,
        before: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        guild = await self.resolver.guild(server)
        target = await self.resolver.channel(channel, guild, TargetKind.TEXT_OR_THREAD)
        messages = await self.gateway.fetch_messages(target, limit, before)
        return [
            message_view(msg, channel=f"#{target.name}", server=guild.name)
            for msg in messages
        ]

    async def read_forum_threads(
        self,
        channel: str,
        server: Optional[str] = None,
        limit: int = 10,
        before: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        guild = await self.resolver.guild(server)
        forum = await self.resolver.forum(channel, guild)
        active = await self.gateway.fetch_active_threads(forum)

        result = []
        for thread in newest_first(active)[:limit]:
            messages = await self.gateway.fetch_messages(
                thread, THREAD_MESSAGE_LIMIT, before
            )
            context = {
                "thread": thread.name,
                "threadId": thread.id,
                "channel": f"#{forum.name}",
                "server": guild.name,
            }
            result.append(
                {
                    "thread": thread.name,
                    "threadId": thread.id,
                    "tags": describe_tags(thread.applied_tags, forum),
                    "messages": [message_view(m, **context) for m in messages],
                }
            )
        return result

    async def list_threads(
        self,
        channel: str,
        server: Optional[str] = None,
        limit: int = 50,
        include_archived: bool = False,
    ) -> Dict[str, Any]:
        guild = await self.resolver.guild(server)
        forum = await self.resolver.forum(channel, guild)
        listing = await list_or_search(
            self.gateway,
            forum,
            include_archived,
            None,
            limit,
            max_batches=self.archive_max_batches,
            batch_size=self.archive_batch_size,
        )
        return {
            "forumChannel": forum.name,
            "server": guild.name,
            "includeArchived": include_archived,
            "totalThreads": len(listing.threads),
            "threads": listing.threads,
        }

    async def search_threads(
        self,
        channel: str,
        query: str,
        server: Optional[str] = None,
        limit: int = 50,
        include_archived: bool = True,
        exact_match: bool = False,
    ) -> Dict[str, Any]:
        guild = await self.resolver.guild(server)
        forum = await self.resolver.forum(channel, guild)
        listing = await list_or_search(
            self.gateway,
            forum,
            include_archived,
            ThreadFilter(query=query, exact_match=exact_match),
            limit,
            max_batches=self.archive_max_batches,
            batch_size=self.archive_batch_size,
        )
        return {
            "forumChannel": forum.name,
            "server": guild.name,
            "query": query,
            "exactMatch": exact_match,
            "includeArchived": include_archived,
            "totalFound": len(listing.threads),
            "totalSearched": listing.total_matched,
            "threads": listing.threads,
        }

    async def add_thread_tags(
        self,
        channel: str,
        thread_id: str,
        tag_names_requested: Sequence[str],
        server: Optional[str] = None,
    ) -> Dict[str, Any]:
        guild = await self.resolver.guild(server)
        forum = await self.resolver.forum(channel, guild)
        thread = await self.resolver.forum_thread(thread_id, forum, guild)

        # all names must resolve before anything is written
        tag_ids = resolve_tag_ids(tag_names_requested, forum)
        merged = merge_tag_ids(thread.applied_tags, tag_ids)
        await self.gateway.apply_tags(thread, merged)
        logger.info("applied tags %s to thread %s", merged, thread.id)
        return {
            "threadName": thread.name,
            "threadId": thread.id,
            "forumChannel": forum.name,
            "appliedTagNames": tag_names(merged, forum),
        }

    async def unarchive_thread(
        self,
        thread_id: str,
        server: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        # thread ids are global, only scope to a server when one was named
        guild = await self.resolver.guild(server) if server else None
        thread = await self.resolver.thread(thread_id, guild)
        result = {
            "threadName": thread.name,
            "threadId": thread.id,
            "changed": False,
            "reason": reason,
        }
        if not thread.archived:
            return result

        await self.gateway.set_archived(thread, False, reason)
        logger.info("unarchived thread %s", thread.id)
        result["changed"] = True
        return result
