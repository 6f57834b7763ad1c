import asyncio
import json
import logging
import sys
from functools import wraps
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

import discord
from discord.ext import commands
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from discord_forum_mcp import arguments as args
from discord_forum_mcp.attachments import download_attachment
from discord_forum_mcp.config import Settings, load_settings
from discord_forum_mcp.discord_gateway import DiscordPyGateway
from discord_forum_mcp.errors import DiscordToolError, ValidationError
from discord_forum_mcp.schemas import TOOLS
from discord_forum_mcp.tools import DiscordTools


def _configure_windows_stdout_encoding():
    if sys.platform == "win32":
        import io

        sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8")
        sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding="utf-8")


logger = logging.getLogger("discord-forum-mcp")

app = Server("discord-forum-mcp")

# Set once the Discord client has logged in
discord_tools: Optional[DiscordTools] = None

# Tools that never talk to Discord through the bot session
CLIENT_FREE_TOOLS = {"download-attachment"}

Handler = Callable[[Optional[DiscordTools], Mapping[str, Any]], Awaitable[List[TextContent]]]


def canonical_tool_name(name: str) -> str:
    return name.replace("_", "-")


def _text(text: str) -> List[TextContent]:
    return [TextContent(type="text", text=text)]


def _json(payload: Any) -> List[TextContent]:
    return _text(json.dumps(payload, ensure_ascii=False, indent=2))


def _server(arguments: Mapping[str, Any]) -> Optional[str]:
    return args.optional_str(arguments, "server", "server_id")


def _channel(arguments: Mapping[str, Any]) -> str:
    return args.required_str(arguments, "channel", "channel_id")


async def _send_message(tools: DiscordTools, arguments: Mapping[str, Any]):
    result = await tools.send_message(
        _channel(arguments),
        args.message_text(arguments, "message", "content"),
        server=_server(arguments),
    )
    return _text(
        f"Message sent successfully to #{result['channelName']} in "
        f"{result['guildName']}. Message ID: {result['sentMessageId']}"
    )


async def _read_messages(tools: DiscordTools, arguments: Mapping[str, Any]):
    messages = await tools.read_messages(
        _channel(arguments),
        server=_server(arguments),
        limit=args.bounded_int(arguments, "limit", default=50, minimum=1, maximum=100),
        before=args.snowflake(arguments, "before"),
    )
    return _json(messages)


async def _read_forum_threads(tools: DiscordTools, arguments: Mapping[str, Any]):
    threads = await tools.read_forum_threads(
        _channel(arguments),
        server=_server(arguments),
        limit=args.bounded_int(arguments, "limit", default=10, minimum=1, maximum=50),
        before=args.snowflake(arguments, "before"),
    )
    return _json(threads)


async def _list_threads(tools: DiscordTools, arguments: Mapping[str, Any]):
    result = await tools.list_threads(
        _channel(arguments),
        server=_server(arguments),
        limit=args.bounded_int(arguments, "limit", default=50, minimum=1, maximum=100),
        include_archived=args.flag(
            arguments, "includeArchived", "include_archived", default=False
        ),
    )
    return _json(result)


async def _search_threads(tools: DiscordTools, arguments: Mapping[str, Any]):
    result = await tools.search_threads(
        _channel(arguments),
        args.required_str(arguments, "query"),
        server=_server(arguments),
        limit=args.bounded_int(arguments, "limit", default=50, minimum=1, maximum=100),
        include_archived=args.flag(
            arguments, "includeArchived", "include_archived", default=True
        ),
        exact_match=args.flag(arguments, "exactMatch", "exact_match", default=False),
    )
    return _json(result)


async def _add_thread_tags(tools: DiscordTools, arguments: Mapping[str, Any]):
    result = await tools.add_thread_tags(
        _channel(arguments),
        args.required_str(arguments, "threadId", "thread_id"),
        args.string_list(arguments, "tagNames", "tag_names"),
        server=_server(arguments),
    )
    return _text(
        f"Tags added successfully to thread \"{result['threadName']}\" in "
        f"#{result['forumChannel']}!\n"
        f"Applied tags: {', '.join(result['appliedTagNames'])}"
    )


async def _unarchive_thread(tools: DiscordTools, arguments: Mapping[str, Any]):
    result = await tools.unarchive_thread(
        args.required_str(arguments, "threadId", "thread_id"),
        server=_server(arguments),
        reason=args.optional_str(arguments, "reason"),
    )
    if not result["changed"]:
        return _text(f"Thread \"{result['threadName']}\" is already active (not archived).")
    text = (
        f"Thread \"{result['threadName']}\" (ID: {result['threadId']}) has been "
        "successfully unarchived and is now active."
    )
    if result["reason"]:
        text += f"\nReason: {result['reason']}"
    return _text(text)


async def _download_attachment(_tools: Optional[DiscordTools], arguments: Mapping[str, Any]):
    result = await download_attachment(
        args.required_str(arguments, "url"),
        filename=args.optional_str(arguments, "filename"),
        directory=args.optional_str(arguments, "directory"),
    )
    return _text(
        "File downloaded successfully!\n"
        f"Path: {result['path']}\n"
        f"Size: {result['size']} bytes\n"
        f"Filename: {result['filename']}"
    )


HANDLERS: Dict[str, Handler] = {
    "send-message": _send_message,
    "read-messages": _read_messages,
    "read-forum-threads": _read_forum_threads,
    "list-threads": _list_threads,
    "search-threads": _search_threads,
    "add-thread-tags": _add_thread_tags,
    "unarchive-thread": _unarchive_thread,
    "download-attachment": _download_attachment,
}


async def dispatch(
    name: str, arguments: Optional[Mapping[str, Any]], tools: Optional[DiscordTools]
) -> List[TextContent]:
    handler = HANDLERS.get(canonical_tool_name(name))
    if handler is None:
        raise ValidationError(f"Unknown tool: {name}")
    return await handler(tools, arguments or {})


# Helper function to ensure Discord client is ready
def require_discord_client(func):
    @wraps(func)
    async def wrapper(name: str, arguments: Any):
        if canonical_tool_name(name) not in CLIENT_FREE_TOOLS and not discord_tools:
            raise RuntimeError("Discord client not ready")
        return await func(name, arguments)

    return wrapper


@app.list_tools()
async def list_tools() -> List[Tool]:
    """List available Discord tools."""
    return TOOLS


@app.call_tool()
@require_discord_client
async def call_tool(name: str, arguments: Any) -> List[TextContent]:
    """Handle Discord tool calls."""
    try:
        return await dispatch(name, arguments, discord_tools)
    except DiscordToolError as exc:
        logger.warning("%s failed (%s): %s", name, exc.kind, exc)
        raise


def build_bot(settings: Settings) -> commands.Bot:
    intents = discord.Intents.default()
    intents.message_content = True
    bot = commands.Bot(command_prefix="!", intents=intents)

    @bot.event
    async def on_ready():
        global discord_tools
        discord_tools = DiscordTools(
            DiscordPyGateway(bot),
            default_guild=settings.default_guild,
            archive_max_batches=settings.archive_max_batches,
            archive_batch_size=settings.archive_batch_size,
        )
        logger.info(f"Logged in as {bot.user.name} ({len(bot.guilds)} servers)")

    return bot


async def main():
    _configure_windows_stdout_encoding()
    settings = load_settings()
    logging.basicConfig(level=settings.log_level)

    bot = build_bot(settings)
    # Start Discord bot in the background
    bot_task = asyncio.create_task(bot.start(settings.discord_token))

    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(read_stream, write_stream, app.create_initialization_options())
    finally:
        await bot.close()
        bot_task.cancel()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
