from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from discord_forum_mcp.errors import AmbiguousTarget, NotFound
from discord_forum_mcp.models import Attachment, Guild, Message, Tag
from discord_forum_mcp.tools import DiscordTools

from fakes import FakeGateway, make_forum, make_text, make_thread

GUILD = Guild("1", "Home")


@pytest.fixture
def gateway() -> FakeGateway:
    gateway = FakeGateway()
    gateway.add_guild(GUILD)
    gateway.add_channel(make_text("100", "general"))
    gateway.add_channel(
        make_forum(
            "500",
            "help",
            tags=(Tag("1", "Bug"), Tag("2", "Feature"), Tag("3", "Resolved")),
        )
    )
    gateway.add_channel(make_forum("501", "ideas"))
    gateway.add_thread(make_thread("700", "crash on start", created=2, tags=("1",)))
    gateway.add_thread(
        make_thread("701", "old question", created=1, archived=True), active=False
    )
    return gateway


def test_send_message(gateway: FakeGateway) -> None:
    result = asyncio.run(DiscordTools(gateway).send_message("#general", "hello"))

    assert result == {"channelName": "general", "guildName": "Home", "sentMessageId": "91"}
    assert ("send_message", "100", "hello") in gateway.calls


def test_send_message_requires_server_when_ambiguous(gateway: FakeGateway) -> None:
    gateway.add_guild(Guild("2", "Away"))
    with pytest.raises(AmbiguousTarget):
        asyncio.run(DiscordTools(gateway).send_message("general", "hello"))
    assert "send_message" not in gateway.call_names()


def test_read_messages_projects_views(gateway: FakeGateway) -> None:
    gateway.messages["100"] = [
        Message(
            id="42",
            author="someone",
            content="hi",
            created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
            attachments=(Attachment("5", "a.png", "https://cdn/a.png", 10, "image/png"),),
        )
    ]

    messages = asyncio.run(
        DiscordTools(gateway).read_messages("general", server="Home", limit=5, before="99")
    )

    assert messages[0]["messageId"] == "42"
    assert messages[0]["channel"] == "#general"
    assert messages[0]["server"] == "Home"
    assert messages[0]["attachments"][0]["name"] == "a.png"
    assert ("fetch_messages", "100", 5, "99") in gateway.calls


def test_read_forum_threads(gateway: FakeGateway) -> None:
    gateway.messages["700"] = [
        Message(
            id="1", author="u", content="it crashed",
            created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )
    ]

    result = asyncio.run(DiscordTools(gateway).read_forum_threads("help"))

    assert len(result) == 1
    assert result[0]["thread"] == "crash on start"
    assert result[0]["tags"][0]["name"] == "Bug"
    assert result[0]["messages"][0]["threadId"] == "700"
    assert result[0]["messages"][0]["channel"] == "#help"


def test_list_threads_shape(gateway: FakeGateway) -> None:
    result = asyncio.run(DiscordTools(gateway).list_threads("help"))

    assert result["forumChannel"] == "help"
    assert result["includeArchived"] is False
    assert result["totalThreads"] == 1
    assert result["threads"][0]["threadId"] == "700"


def test_search_threads_counts(gateway: FakeGateway) -> None:
    gateway.archived_batches = [[gateway.entities["701"]], []]

    result = asyncio.run(DiscordTools(gateway).search_threads("help", "o", limit=1))

    assert result["totalFound"] == 1
    assert result["totalSearched"] == 2
    assert result["threads"][0]["threadName"] == "crash on start"


def test_add_thread_tags_merges_with_existing(gateway: FakeGateway) -> None:
    result = asyncio.run(
        DiscordTools(gateway).add_thread_tags("help", "700", ["feature", "Bug"])
    )

    assert ("apply_tags", "700", ["1", "2"]) in gateway.calls
    assert result["appliedTagNames"] == ["Bug", "Feature"]


def test_add_thread_tags_is_all_or_nothing(gateway: FakeGateway) -> None:
    with pytest.raises(NotFound) as excinfo:
        asyncio.run(
            DiscordTools(gateway).add_thread_tags("help", "700", ["Bug", "Nope", "Feature"])
        )

    message = str(excinfo.value)
    assert "Nope" in message
    assert '"Bug", "Feature", "Resolved"' in message
    assert "apply_tags" not in gateway.call_names()


def test_add_thread_tags_rejects_thread_from_other_forum(gateway: FakeGateway) -> None:
    gateway.add_thread(make_thread("702", "wishlist", parent_id="501"))

    with pytest.raises(NotFound) as excinfo:
        asyncio.run(DiscordTools(gateway).add_thread_tags("ideas", "700", ["Bug"]))

    message = str(excinfo.value)
    assert "not found in forum channel #ideas" in message
    assert "wishlist (702)" in message
    assert "apply_tags" not in gateway.call_names()


def test_add_thread_tags_unknown_thread_lists_active_threads(gateway: FakeGateway) -> None:
    with pytest.raises(NotFound) as excinfo:
        asyncio.run(DiscordTools(gateway).add_thread_tags("help", "12345", ["Bug"]))

    message = str(excinfo.value)
    assert "Thread '12345' not found" in message
    assert "Active threads in #help: crash on start (700)" in message
    assert "apply_tags" not in gateway.call_names()


def test_unarchive_active_thread_is_a_no_op(gateway: FakeGateway) -> None:
    result = asyncio.run(DiscordTools(gateway).unarchive_thread("700"))

    assert result["changed"] is False
    assert "set_archived" not in gateway.call_names()


def test_unarchive_archived_thread(gateway: FakeGateway) -> None:
    result = asyncio.run(
        DiscordTools(gateway).unarchive_thread("701", server="Home", reason="follow-up")
    )

    assert result == {
        "threadName": "old question",
        "threadId": "701",
        "changed": True,
        "reason": "follow-up",
    }
    assert ("set_archived", "701", False, "follow-up") in gateway.calls
