from typing import Any, Dict, List

from mcp.types import Tool

SERVER_PROPERTY = {
    "type": "string",
    "description": "Server name or ID (optional if bot is only in one server or a default is configured)",
}


def _schema(properties: Dict[str, Any], required: List[str]) -> Dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


TOOLS: List[Tool] = [
    Tool(
        name="send-message",
        description="Send a message to a Discord text channel or thread",
        inputSchema=_schema(
            {
                "server": SERVER_PROPERTY,
                "channel": {
                    "type": "string",
                    "description": 'Channel name (e.g., "general"), channel ID or thread ID',
                },
                "message": {"type": "string", "description": "Message content to send"},
            },
            ["channel", "message"],
        ),
    ),
    Tool(
        name="read-messages",
        description="Read recent messages from a Discord channel or thread",
        inputSchema=_schema(
            {
                "server": SERVER_PROPERTY,
                "channel": {
                    "type": "string",
                    "description": 'Channel name (e.g., "general"), channel ID or thread ID',
                },
                "limit": {
                    "type": "number",
                    "description": "Number of messages to fetch (max 100)",
                    "minimum": 1,
                    "maximum": 100,
                    "default": 50,
                },
                "before": {
                    "type": "string",
                    "description": "Message ID to fetch messages before (for pagination)",
                },
            },
            ["channel"],
        ),
    ),
    Tool(
        name="read-forum-threads",
        description="Read active threads and their latest posts from a Discord forum channel",
        inputSchema=_schema(
            {
                "server": SERVER_PROPERTY,
                "channel": {"type": "string", "description": "Forum channel name or ID"},
                "limit": {
                    "type": "number",
                    "description": "Number of threads to fetch (max 50)",
                    "minimum": 1,
                    "maximum": 50,
                    "default": 10,
                },
                "before": {
                    "type": "string",
                    "description": "Message ID to fetch messages before in each thread (for pagination)",
                },
            },
            ["channel"],
        ),
    ),
    Tool(
        name="list-threads",
        description="List forum thread information without messages",
        inputSchema=_schema(
            {
                "server": SERVER_PROPERTY,
                "channel": {"type": "string", "description": "Forum channel name or ID"},
                "limit": {
                    "type": "number",
                    "description": "Maximum number of threads to return (max 100)",
                    "minimum": 1,
                    "maximum": 100,
                    "default": 50,
                },
                "includeArchived": {
                    "type": "boolean",
                    "description": "Include archived threads",
                    "default": False,
                },
            },
            ["channel"],
        ),
    ),
    Tool(
        name="search-threads",
        description="Search forum threads by title, including archived threads by default",
        inputSchema=_schema(
            {
                "server": SERVER_PROPERTY,
                "channel": {"type": "string", "description": "Forum channel name or ID"},
                "query": {
                    "type": "string",
                    "description": "Search query to match against thread names",
                },
                "limit": {
                    "type": "number",
                    "description": "Maximum number of threads to return (max 100)",
                    "minimum": 1,
                    "maximum": 100,
                    "default": 50,
                },
                "includeArchived": {
                    "type": "boolean",
                    "description": "Include archived threads in search",
                    "default": True,
                },
                "exactMatch": {
                    "type": "boolean",
                    "description": "Match the whole title instead of a substring",
                    "default": False,
                },
            },
            ["channel", "query"],
        ),
    ),
    Tool(
        name="add-thread-tags",
        description="Add tags to a Discord forum thread",
        inputSchema=_schema(
            {
                "server": SERVER_PROPERTY,
                "channel": {"type": "string", "description": "Forum channel name or ID"},
                "threadId": {"type": "string", "description": "Thread ID to add tags to"},
                "tagNames": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Tag names to add to the thread",
                },
            },
            ["channel", "threadId", "tagNames"],
        ),
    ),
    Tool(
        name="unarchive-thread",
        description="Unarchive (reopen) a forum thread",
        inputSchema=_schema(
            {
                "server": SERVER_PROPERTY,
                "threadId": {"type": "string", "description": "Thread ID to unarchive"},
                "reason": {
                    "type": "string",
                    "description": "Optional reason, recorded in the audit log",
                },
            },
            ["threadId"],
        ),
    ),
    Tool(
        name="download-attachment",
        description="Download a Discord attachment URL to the local filesystem",
        inputSchema=_schema(
            {
                "url": {"type": "string", "description": "Discord attachment URL"},
                "filename": {
                    "type": "string",
                    "description": "Optional filename (defaults to the name in the URL)",
                },
                "directory": {
                    "type": "string",
                    "description": "Output directory (default: current working directory)",
                },
            },
            ["url"],
        ),
    ),
]
