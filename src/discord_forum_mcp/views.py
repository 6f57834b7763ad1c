from typing import Any, Dict

from discord_forum_mcp.models import Attachment, Embed, Message


def attachment_view(attachment: Attachment) -> Dict[str, Any]:
    return {
        "id": attachment.id,
        "name": attachment.name,
        "url": attachment.url,
        "proxyUrl": attachment.proxy_url,
        "size": attachment.size,
        "contentType": attachment.content_type,
        "width": attachment.width,
        "height": attachment.height,
    }


def embed_view(embed: Embed) -> Dict[str, Any]:
    return {
        "title": embed.title,
        "description": embed.description,
        "url": embed.url,
        "image": embed.image,
        "thumbnail": embed.thumbnail,
    }


def message_view(message: Message, **context: Any) -> Dict[str, Any]:
    """Project a message; ``context`` keys (channel, server, thread...) lead."""
    return {
        "messageId": message.id,
        **context,
        "author": message.author,
        "content": message.content,
        "timestamp": message.created_at.isoformat(),
        "attachments": [attachment_view(a) for a in message.attachments],
        "embeds": [embed_view(e) for e in message.embeds],
        "reactions": [{"emoji": r.emoji, "count": r.count} for r in message.reactions],
    }
