"""discord.py implementation of :class:`~discord_forum_mcp.ports.DiscordGateway`."""

import logging
from functools import wraps
from typing import Any, List, Optional, Sequence, Union

import discord

from discord_forum_mcp import mapper
from discord_forum_mcp.errors import ExternalApiError, NotFound
from discord_forum_mcp.models import Channel, Guild, Message, Thread

logger = logging.getLogger(__name__)


def translate_http_errors(action: str):
    """Re-raise discord.py HTTP failures as :class:`ExternalApiError`."""

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except discord.HTTPException as exc:
                raise ExternalApiError(
                    f"Discord API error while trying to {action}: {exc}"
                ) from exc

        return wrapper

    return decorator


class DiscordPyGateway:
    def __init__(self, client: discord.Client):
        self.client = client

    async def fetch_guild(self, guild_id: str) -> Guild:
        guild = self.client.get_guild(int(guild_id))
        if guild is None:
            try:
                guild = await self.client.fetch_guild(int(guild_id))
            except (discord.NotFound, discord.Forbidden) as exc:
                raise NotFound(f"Server '{guild_id}' not found") from exc
            except discord.HTTPException as exc:
                raise ExternalApiError(f"Failed to fetch server '{guild_id}': {exc}") from exc
        return mapper.to_guild(guild)

    def cached_guilds(self) -> List[Guild]:
        return [mapper.to_guild(guild) for guild in self.client.guilds]

    async def _channel_object(self, channel_id: str) -> Any:
        channel = self.client.get_channel(int(channel_id))
        if channel is not None:
            return channel
        try:
            return await self.client.fetch_channel(int(channel_id))
        except (discord.NotFound, discord.Forbidden) as exc:
            raise NotFound(f"Channel '{channel_id}' not found") from exc
        except discord.HTTPException as exc:
            raise ExternalApiError(f"Failed to fetch channel '{channel_id}': {exc}") from exc

    async def fetch_channel(self, channel_id: str) -> Union[Channel, Thread]:
        channel = await self._channel_object(channel_id)
        if not hasattr(channel, "guild"):
            raise NotFound(f"Channel '{channel_id}' is not a server channel")
        return mapper.to_channel(channel)

    def cached_channels(self, guild: Guild) -> List[Channel]:
        discord_guild = self.client.get_guild(int(guild.id))
        if discord_guild is None:
            return []
        return [mapper.to_channel(ch) for ch in discord_guild.channels]

    @translate_http_errors("list active threads")
    async def fetch_active_threads(self, forum: Channel) -> List[Thread]:
        discord_guild = self.client.get_guild(int(forum.guild_id))
        if discord_guild is None:
            discord_guild = await self.client.fetch_guild(int(forum.guild_id))
        threads = await discord_guild.active_threads()
        return [mapper.to_thread(t) for t in threads if str(t.parent_id) == forum.id]

    @translate_http_errors("list archived threads")
    async def fetch_archived_threads(
        self, forum: Channel, before: Optional[Thread], limit: int
    ) -> List[Thread]:
        channel = await self._channel_object(forum.id)
        # Discord pages archived threads by archive time; a bare snowflake
        # would be turned into the thread's creation time instead.
        before_obj = None
        if before is not None:
            before_obj = before.archived_at or discord.Object(id=int(before.id))
        return [
            mapper.to_thread(thread)
            async for thread in channel.archived_threads(limit=limit, before=before_obj)
        ]

    @translate_http_errors("apply thread tags")
    async def apply_tags(self, thread: Thread, tag_ids: Sequence[str]) -> None:
        channel = await self._channel_object(thread.id)
        parent = channel.parent
        tags = []
        for tag_id in tag_ids:
            tag = parent.get_tag(int(tag_id)) if parent is not None else None
            tags.append(tag or discord.Object(id=int(tag_id)))
        await channel.edit(applied_tags=tags)

    @translate_http_errors("change thread archive state")
    async def set_archived(
        self, thread: Thread, archived: bool, reason: Optional[str] = None
    ) -> None:
        channel = await self._channel_object(thread.id)
        await channel.edit(archived=archived, reason=reason)

    @translate_http_errors("send a message")
    async def send_message(
        self, channel: Union[Channel, Thread], content: str
    ) -> Message:
        target = await self._channel_object(channel.id)
        sent = await target.send(content)
        return mapper.to_message(sent)

    @translate_http_errors("read message history")
    async def fetch_messages(
        self,
        channel: Union[Channel, Thread],
        limit: int,
        before: Optional[str] = None,
    ) -> List[Message]:
        target = await self._channel_object(channel.id)
        before_obj = discord.Object(id=int(before)) if before else None
        return [
            mapper.to_message(message)
            async for message in target.history(limit=limit, before=before_obj)
        ]
