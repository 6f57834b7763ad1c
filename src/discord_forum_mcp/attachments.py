import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union
from urllib.parse import unquote, urlparse

import aiohttp

from discord_forum_mcp.errors import ExternalApiError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "downloaded_file"


def filename_from_url(url: str) -> str:
    parsed = urlparse(url)
    return unquote(Path(parsed.path).name) or DEFAULT_FILENAME


def safe_filename(filename: str) -> str:
    # never let a caller supplied name escape the target directory
    name = Path(filename.replace("\\", "/")).name
    if name in {"", ".", ".."}:
        raise ValidationError(f"Invalid filename '{filename}'")
    return name


async def download_attachment(
    url: str,
    filename: Optional[str] = None,
    directory: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValidationError(f"url must be an http(s) URL, got '{url}'")

    name = safe_filename(filename or filename_from_url(url))
    target_dir = Path(directory) if directory else Path.cwd()
    target_dir.mkdir(parents=True, exist_ok=True)
    target_path = target_dir / name

    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(url) as response:
                if response.status >= 400:
                    raise ExternalApiError(
                        f"Failed to download attachment: HTTP {response.status} "
                        f"{response.reason or ''}".rstrip()
                    )
                data = await response.read()
    except aiohttp.ClientError as exc:
        raise ExternalApiError(f"Failed to download attachment: {exc}") from exc

    target_path.write_bytes(data)
    logger.info("downloaded %s to %s (%d bytes)", url, target_path, len(data))
    return {"path": str(target_path), "size": len(data), "filename": name}
