from typing import Collection, List, Optional

from discord_forum_mcp.models import Channel, ChannelKind, Guild
from discord_forum_mcp.ports import DiscordGateway


class EntityCacheView:
    """Read-only view over the gateway's cached guilds and channels."""

    def __init__(self, gateway: DiscordGateway):
        self._gateway = gateway

    def guilds(self) -> List[Guild]:
        return list(self._gateway.cached_guilds())

    def channels(
        self, guild: Guild, kinds: Optional[Collection[ChannelKind]] = None
    ) -> List[Channel]:
        channels = self._gateway.cached_channels(guild)
        if kinds is None:
            return list(channels)
        return [ch for ch in channels if ch.kind in kinds]

