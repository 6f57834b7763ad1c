from __future__ import annotations

import asyncio
import json

import pytest

from discord_forum_mcp import server
from discord_forum_mcp.errors import ValidationError
from discord_forum_mcp.models import Guild
from discord_forum_mcp.schemas import TOOLS
from discord_forum_mcp.tools import DiscordTools

from fakes import FakeGateway, make_forum, make_text, make_thread


@pytest.fixture
def tools() -> DiscordTools:
    gateway = FakeGateway()
    gateway.add_guild(Guild("1", "Home"))
    gateway.add_channel(make_text("100", "general"))
    gateway.add_channel(make_forum("500", "help"))
    gateway.add_thread(make_thread("700", "Library", created=2))
    gateway.add_thread(make_thread("701", "Library2", created=1))
    return DiscordTools(gateway)


def test_every_tool_has_a_handler() -> None:
    assert {tool.name for tool in TOOLS} == set(server.HANDLERS)


def test_hyphen_and_underscore_names(tools: DiscordTools) -> None:
    for name in ("search-threads", "search_threads"):
        content = asyncio.run(
            server.dispatch(
                name,
                {"channel": "help", "query": "library", "exact_match": True},
                tools,
            )
        )
        payload = json.loads(content[0].text)
        assert payload["exactMatch"] is True
        assert [t["threadName"] for t in payload["threads"]] == ["Library"]


def test_send_message_text(tools: DiscordTools) -> None:
    content = asyncio.run(
        server.dispatch("send-message", {"channel": "general", "message": "hi"}, tools)
    )
    assert content[0].text.startswith("Message sent successfully to #general in Home.")


def test_unarchive_active_thread_text(tools: DiscordTools) -> None:
    content = asyncio.run(server.dispatch("unarchive-thread", {"threadId": "700"}, tools))
    assert "already active" in content[0].text


def test_limit_out_of_range(tools: DiscordTools) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(server.dispatch("read-forum-threads", {"channel": "help", "limit": 51}, tools))


def test_unknown_tool(tools: DiscordTools) -> None:
    with pytest.raises(ValidationError, match="Unknown tool"):
        asyncio.run(server.dispatch("delete-everything", {}, tools))


def test_tools_refuse_before_client_ready(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(server, "discord_tools", None)

    @server.require_discord_client
    async def handler(name, arguments):
        return name

    with pytest.raises(RuntimeError, match="not ready"):
        asyncio.run(handler("list-threads", {}))
    assert asyncio.run(handler("download_attachment", {})) == "download_attachment"
