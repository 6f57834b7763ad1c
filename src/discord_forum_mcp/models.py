"""Plain entity records the resolution and aggregation code works on.

The Discord adapter maps discord.py objects into these so the core never
depends on a live client.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple


class ChannelKind(str, Enum):
    TEXT = "text"
    FORUM = "forum"
    THREAD = "thread"
    OTHER = "other"


@dataclass(frozen=True)
class Guild:
    id: str
    name: str


@dataclass(frozen=True)
class TagEmoji:
    id: Optional[str]
    name: Optional[str]


@dataclass(frozen=True)
class Tag:
    id: str
    name: str
    emoji: Optional[TagEmoji] = None
    moderated: bool = False


@dataclass(frozen=True)
class Channel:
    id: str
    name: str
    kind: ChannelKind
    guild_id: str
    parent_id: Optional[str] = None
    available_tags: Tuple[Tag, ...] = ()

    def get_tag(self, tag_id: str) -> Optional[Tag]:
        for tag in self.available_tags:
            if tag.id == tag_id:
                return tag
        return None


@dataclass(frozen=True)
class Thread:
    id: str
    name: str
    guild_id: str
    parent_id: Optional[str]
    created_timestamp: int
    archived: bool = False
    locked: bool = False
    applied_tags: Tuple[str, ...] = ()
    owner_id: Optional[str] = None
    message_count: Optional[int] = None
    member_count: Optional[int] = None
    total_message_sent: Optional[int] = None
    rate_limit_per_user: Optional[int] = None
    last_message_id: Optional[str] = None
    archived_at: Optional[datetime] = None

    kind = ChannelKind.THREAD

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.created_timestamp / 1000, tz=timezone.utc)


@dataclass(frozen=True)
class Attachment:
    id: str
    name: str
    url: str
    size: int
    content_type: Optional[str] = None
    proxy_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True)
class Embed:
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    image: Optional[str] = None
    thumbnail: Optional[str] = None


@dataclass(frozen=True)
class Reaction:
    emoji: str
    count: int


@dataclass(frozen=True)
class Message:
    id: str
    author: str
    content: str
    created_at: datetime
    attachments: Tuple[Attachment, ...] = ()
    embeds: Tuple[Embed, ...] = ()
    reactions: Tuple[Reaction, ...] = field(default_factory=tuple)
