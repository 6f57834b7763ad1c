from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import discord

from discord_forum_mcp import mapper
from discord_forum_mcp.models import ChannelKind, Thread


def _guild():
    return SimpleNamespace(id=1, name="Home")


def test_forum_channel_carries_tags() -> None:
    forum = SimpleNamespace(
        id=500,
        name="help",
        type=discord.ChannelType.forum,
        guild=_guild(),
        category_id=None,
        available_tags=[
            SimpleNamespace(id=1, name="Bug", emoji=SimpleNamespace(id=None, name="🐛"), moderated=False),
            SimpleNamespace(id=2, name="Plain", emoji=None, moderated=True),
        ],
    )

    channel = mapper.to_channel(forum)

    assert channel.kind is ChannelKind.FORUM
    assert channel.guild_id == "1"
    assert [t.name for t in channel.available_tags] == ["Bug", "Plain"]
    assert channel.available_tags[0].emoji.name == "🐛"
    assert channel.available_tags[1].emoji is None


def test_voice_channel_is_other() -> None:
    assert mapper.channel_kind(discord.ChannelType.voice) is ChannelKind.OTHER
    assert mapper.channel_kind(discord.ChannelType.news) is ChannelKind.TEXT


def test_thread_keeps_raw_tag_ids_and_falls_back_to_snowflake_time() -> None:
    raw = SimpleNamespace(
        id=175928847299117063,
        name="question",
        type=discord.ChannelType.public_thread,
        guild=_guild(),
        parent_id=500,
        created_at=None,
        archived=True,
        locked=False,
        _applied_tags=[1, 99],
        owner_id=42,
        message_count=3,
        member_count=2,
        total_message_sent=4,
        slowmode_delay=0,
        last_message_id=None,
    )

    thread = mapper.to_channel(raw)

    assert isinstance(thread, Thread)
    assert thread.applied_tags == ("1", "99")
    assert thread.parent_id == "500"
    expected = discord.utils.snowflake_time(175928847299117063)
    assert thread.created_timestamp == int(expected.timestamp() * 1000)


def test_message_reactions_and_embeds() -> None:
    raw = SimpleNamespace(
        id=7,
        author="someone#0001",
        content="hello",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        attachments=[],
        embeds=[
            SimpleNamespace(
                title="t", description=None, url=None,
                image=SimpleNamespace(url="https://img"), thumbnail=None,
            )
        ],
        reactions=[
            SimpleNamespace(emoji="👍", count=2),
            SimpleNamespace(emoji=SimpleNamespace(id=5, name="party"), count=1),
        ],
    )

    message = mapper.to_message(raw)

    assert message.embeds[0].image == "https://img"
    assert [(r.emoji, r.count) for r in message.reactions] == [("👍", 2), ("party", 1)]


def test_thread_uses_public_tags_and_keeps_archive_time() -> None:
    archived_at = datetime(2024, 1, 8, tzinfo=timezone.utc)
    raw = SimpleNamespace(
        id=800,
        name="done",
        guild=_guild(),
        parent_id=500,
        created_at=datetime(2024, 1, 5, tzinfo=timezone.utc),
        archived=True,
        locked=False,
        applied_tags=[SimpleNamespace(id=3, name="Resolved")],
        owner_id=None,
        message_count=1,
        member_count=1,
        slowmode_delay=0,
        last_message_id=None,
        archive_timestamp=archived_at,
    )

    thread = mapper.to_thread(raw)

    assert thread.applied_tags == ("3",)
    assert thread.archived_at == archived_at
    assert thread.total_message_sent is None
