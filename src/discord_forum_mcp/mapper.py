"""Map discord.py objects onto the core's entity records."""

from typing import Any, Optional, Union

import discord

from discord_forum_mcp.models import (
    Attachment,
    Channel,
    ChannelKind,
    Embed,
    Guild,
    Message,
    Reaction,
    Tag,
    TagEmoji,
    Thread,
)

TEXT_TYPES = {discord.ChannelType.text, discord.ChannelType.news}
THREAD_TYPES = {
    discord.ChannelType.public_thread,
    discord.ChannelType.private_thread,
    discord.ChannelType.news_thread,
}


def _str_id(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def channel_kind(channel_type: Any) -> ChannelKind:
    if channel_type in TEXT_TYPES:
        return ChannelKind.TEXT
    if channel_type in THREAD_TYPES:
        return ChannelKind.THREAD
    if channel_type == discord.ChannelType.forum:
        return ChannelKind.FORUM
    return ChannelKind.OTHER


def to_guild(guild: Any) -> Guild:
    return Guild(id=str(guild.id), name=guild.name)


def to_tag(tag: Any) -> Tag:
    emoji = None
    if tag.emoji:
        emoji = TagEmoji(
            id=_str_id(getattr(tag.emoji, "id", None)),
            name=getattr(tag.emoji, "name", None) or str(tag.emoji),
        )
    return Tag(
        id=str(tag.id),
        name=tag.name,
        emoji=emoji,
        moderated=bool(getattr(tag, "moderated", False)),
    )


def to_channel(channel: Any) -> Union[Channel, Thread]:
    kind = channel_kind(channel.type)
    if kind is ChannelKind.THREAD:
        return to_thread(channel)
    tags = ()
    if kind is ChannelKind.FORUM:
        tags = tuple(to_tag(tag) for tag in channel.available_tags)
    return Channel(
        id=str(channel.id),
        name=channel.name,
        kind=kind,
        guild_id=str(channel.guild.id),
        parent_id=_str_id(getattr(channel, "category_id", None)),
        available_tags=tags,
    )


def _applied_tag_ids(thread: Any):
    # Thread.applied_tags drops ids the parent forum no longer defines; the
    # raw ids are kept so stale tags can still be reported. _applied_tags is
    # an array of ints on discord.py 2.1 through 2.4; the public property is
    # used when it is missing.
    raw = getattr(thread, "_applied_tags", None)
    if raw is not None:
        return tuple(str(tag_id) for tag_id in raw)
    return tuple(str(tag.id) for tag in thread.applied_tags)


def to_thread(thread: Any) -> Thread:
    created_at = thread.created_at or discord.utils.snowflake_time(thread.id)
    return Thread(
        id=str(thread.id),
        name=thread.name,
        guild_id=str(thread.guild.id),
        parent_id=_str_id(thread.parent_id),
        created_timestamp=int(created_at.timestamp() * 1000),
        archived=bool(thread.archived),
        locked=bool(thread.locked),
        applied_tags=_applied_tag_ids(thread),
        owner_id=_str_id(thread.owner_id),
        message_count=thread.message_count,
        member_count=thread.member_count,
        total_message_sent=getattr(thread, "total_message_sent", None),
        rate_limit_per_user=thread.slowmode_delay,
        last_message_id=_str_id(thread.last_message_id),
        archived_at=getattr(thread, "archive_timestamp", None),
    )


def to_attachment(attachment: Any) -> Attachment:
    return Attachment(
        id=str(attachment.id),
        name=attachment.filename,
        url=attachment.url,
        size=attachment.size,
        content_type=attachment.content_type,
        proxy_url=attachment.proxy_url,
        width=attachment.width,
        height=attachment.height,
    )


def to_embed(embed: Any) -> Embed:
    return Embed(
        title=embed.title,
        description=embed.description,
        url=embed.url,
        image=embed.image.url if embed.image else None,
        thumbnail=embed.thumbnail.url if embed.thumbnail else None,
    )


def _emoji_label(emoji: Any) -> str:
    if getattr(emoji, "name", None):
        return str(emoji.name)
    if getattr(emoji, "id", None):
        return str(emoji.id)
    return str(emoji)


def to_message(message: Any) -> Message:
    return Message(
        id=str(message.id),
        author=str(message.author),
        content=message.content,
        created_at=message.created_at,
        attachments=tuple(to_attachment(a) for a in message.attachments),
        embeds=tuple(to_embed(e) for e in message.embeds),
        reactions=tuple(
            Reaction(emoji=_emoji_label(r.emoji), count=r.count)
            for r in message.reactions
        ),
    )
