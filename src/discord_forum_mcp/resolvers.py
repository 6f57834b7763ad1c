"""Resolve user supplied server, channel and thread identifiers.

Every identifier may be a Discord snowflake or a display name. IDs are tried
first; a lookup that reports :class:`NotFound` falls back to a
case-insensitive name match. Resolution yields exactly one entity or raises
one of the errors in :mod:`discord_forum_mcp.errors`.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Optional, Tuple, TypeVar, Union

from discord_forum_mcp.cache import EntityCacheView
from discord_forum_mcp.errors import (
    AmbiguousTarget,
    NotFound,
    ValidationError,
    describe,
)
from discord_forum_mcp.models import Channel, ChannelKind, Guild, Thread
from discord_forum_mcp.ports import DiscordGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TargetKind(Enum):
    TEXT_OR_THREAD = "text channel"
    FORUM = "forum channel"

    @property
    def accepted(self) -> Tuple[ChannelKind, ...]:
        if self is TargetKind.FORUM:
            return (ChannelKind.FORUM,)
        return (ChannelKind.TEXT, ChannelKind.THREAD)

    @property
    def listed(self) -> Tuple[ChannelKind, ...]:
        # threads are never offered as name candidates
        if self is TargetKind.FORUM:
            return (ChannelKind.FORUM,)
        return (ChannelKind.TEXT,)


def is_snowflake(value: Any) -> bool:
    return isinstance(value, str) and value.strip().isdigit()


def normalize_name(value: str) -> str:
    return value.strip().lower()


@dataclass(frozen=True)
class NameMatches(Generic[T]):
    """Outcome of a name lookup: zero, one or many candidates."""

    identifier: str
    candidates: Tuple[T, ...]

    @property
    def unique(self) -> Optional[T]:
        if len(self.candidates) == 1:
            return self.candidates[0]
        return None

    @property
    def is_ambiguous(self) -> bool:
        return len(self.candidates) > 1


def match_by_name(
    items: Iterable[T],
    identifier: str,
    name_of: Callable[[T], str] = lambda item: item.name,
    strip_hash: bool = False,
) -> NameMatches[T]:
    wanted = {normalize_name(identifier)}
    if strip_hash:
        wanted.add(normalize_name(identifier.strip().lstrip("#")))
    candidates = tuple(item for item in items if normalize_name(name_of(item)) in wanted)
    return NameMatches(identifier=identifier, candidates=candidates)


class Resolver:
    """Resolves identifiers against the gateway's current view.

    Nothing is memoized; each call re-reads the gateway so renamed or removed
    entities are never targeted from a stale answer.
    """

    def __init__(self, gateway: DiscordGateway, default_guild: Optional[str] = None):
        self.gateway = gateway
        self.cache = EntityCacheView(gateway)
        self.default_guild = default_guild

    async def guild(self, identifier: Optional[str] = None) -> Guild:
        if not identifier:
            identifier = self.default_guild
        if not identifier:
            return self._only_guild()

        identifier = identifier.strip()
        if is_snowflake(identifier):
            try:
                return await self.gateway.fetch_guild(identifier)
            except NotFound:
                logger.debug("guild id lookup missed for %s, trying names", identifier)

        guilds = self.cache.guilds()
        matches = match_by_name(guilds, identifier)
        if matches.unique is not None:
            return matches.unique
        if matches.is_ambiguous:
            raise AmbiguousTarget(
                f"Multiple servers found with name '{identifier}': "
                f"{describe(matches.candidates)}. Please specify the server ID.",
                matches.candidates,
            )
        raise NotFound(
            f"Server '{identifier}' not found. Available servers: {describe(guilds)}"
        )

    def _only_guild(self) -> Guild:
        guilds = self.cache.guilds()
        if len(guilds) == 1:
            return guilds[0]
        if not guilds:
            raise NotFound("Bot is not a member of any server.")
        raise AmbiguousTarget(
            "Bot is in multiple servers. Please specify server name or ID. "
            f"Available servers: {describe(guilds)}",
            guilds,
        )

    async def channel(
        self, identifier: str, guild: Guild, kind: TargetKind
    ) -> Union[Channel, Thread]:
        identifier = identifier.strip()
        candidates = self.cache.channels(guild, kind.listed)

        if is_snowflake(identifier):
            try:
                channel = await self.gateway.fetch_channel(identifier)
            except NotFound:
                logger.debug("channel id lookup missed for %s, trying names", identifier)
            else:
                return self._check_channel(channel, identifier, guild, kind, candidates)

        matches = match_by_name(candidates, identifier, strip_hash=True)
        if matches.unique is not None:
            return matches.unique
        if matches.is_ambiguous:
            raise AmbiguousTarget(
                f"Multiple {kind.value}s found with name '{identifier}' in server "
                f"'{guild.name}': {describe(matches.candidates, '#')}. "
                "Please specify the channel ID.",
                matches.candidates,
            )
        raise NotFound(
            f"{kind.value.capitalize()} '{identifier}' not found in server "
            f"'{guild.name}'. Available: {describe(candidates, '#')}"
        )

    @staticmethod
    def _check_channel(channel, identifier, guild, kind, candidates):
        if channel.guild_id != guild.id:
            raise NotFound(
                f"Channel '{identifier}' is not in server '{guild.name}'. "
                f"Available: {describe(candidates, '#')}"
            )
        if channel.kind not in kind.accepted:
            raise NotFound(
                f"Channel '{identifier}' (#{channel.name}) is not a {kind.value}. "
                f"Available: {describe(candidates, '#')}"
            )
        return channel

    async def forum(self, identifier: str, guild: Guild) -> Channel:
        return await self.channel(identifier, guild, TargetKind.FORUM)

    async def thread(self, thread_id: str, guild: Optional[Guild] = None) -> Thread:
        """Threads are addressed by ID only."""
        if not is_snowflake(thread_id):
            raise ValidationError(
                f"Thread ID must be a numeric Discord ID, got '{thread_id}'"
            )
        try:
            channel = await self.gateway.fetch_channel(thread_id.strip())
        except NotFound as exc:
            raise NotFound(f"Thread '{thread_id}' not found") from exc
        if not isinstance(channel, Thread):
            raise NotFound(f"Channel '{thread_id}' (#{channel.name}) is not a thread")
        if guild is not None and channel.guild_id != guild.id:
            raise NotFound(f"Thread '{thread_id}' is not in server '{guild.name}'")
        return channel

    async def forum_thread(self, thread_id: str, forum: Channel, guild: Guild) -> Thread:
        """Resolve a thread that must belong to ``forum``.

        Failures list the forum's active threads so the caller can pick one.
        """
        try:
            thread = await self.thread(thread_id, guild)
        except NotFound as exc:
            active = await self.gateway.fetch_active_threads(forum)
            raise NotFound(
                f"{exc}. Active threads in #{forum.name}: {describe(active)}"
            ) from exc
        if thread.parent_id != forum.id:
            active = await self.gateway.fetch_active_threads(forum)
            raise NotFound(
                f"Thread '{thread_id}' ({thread.name}) not found in forum channel "
                f"#{forum.name}. Active threads: {describe(active)}"
            )
        return thread
