"""Contract of the Discord client the core consumes.

Lookups raise :class:`~discord_forum_mcp.errors.NotFound` when the entity does
not exist or is not visible; every other remote failure surfaces as
:class:`~discord_forum_mcp.errors.ExternalApiError`.
"""

from typing import List, Optional, Protocol, Sequence, Union

from discord_forum_mcp.models import Channel, Guild, Message, Thread


class DiscordGateway(Protocol):
    async def fetch_guild(self, guild_id: str) -> Guild:
        ...

    def cached_guilds(self) -> List[Guild]:
        ...

    async def fetch_channel(self, channel_id: str) -> Union[Channel, Thread]:
        ...

    def cached_channels(self, guild: Guild) -> List[Channel]:
        ...

    async def fetch_active_threads(self, forum: Channel) -> List[Thread]:
        ...

    async def fetch_archived_threads(
        self, forum: Channel, before: Optional[Thread], limit: int
    ) -> List[Thread]:
        """Return one batch, newest archived first.

        ``before`` is the last thread of the previous batch; only threads
        archived before it are returned.
        """
        ...

    async def apply_tags(self, thread: Thread, tag_ids: Sequence[str]) -> None:
        ...

    async def set_archived(
        self, thread: Thread, archived: bool, reason: Optional[str] = None
    ) -> None:
        ...

    async def send_message(
        self, channel: Union[Channel, Thread], content: str
    ) -> Message:
        ...

    async def fetch_messages(
        self,
        channel: Union[Channel, Thread],
        limit: int,
        before: Optional[str] = None,
    ) -> List[Message]:
        ...
