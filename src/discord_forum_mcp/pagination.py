"""Bounded pagination over a forum's archived threads.

Discord returns archived threads in batches of at most 100, newest archived
first. Each request passes the last (oldest archived) thread of the previous
batch as the ``before`` cursor; the gateway pages on that thread's archive
time, never its creation time. The scan ends on an empty batch or after
``max_batches`` requests, whichever comes first, so a single call never
issues more than ``max_batches`` requests or returns more than
``max_batches * batch_size`` threads.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from discord_forum_mcp.models import Channel, Thread
from discord_forum_mcp.ports import DiscordGateway

logger = logging.getLogger(__name__)

DEFAULT_MAX_BATCHES = 10
DEFAULT_BATCH_SIZE = 100
MAX_BATCH_SIZE = 100

BatchSource = Callable[[Optional[Thread], int], Awaitable[Sequence[Thread]]]


@dataclass(frozen=True)
class ArchiveScan:
    last: Optional[Thread] = None
    batches_done: int = 0
    collected: Dict[str, Thread] = field(default_factory=dict)
    exhausted: bool = False

    @property
    def cursor(self) -> Optional[str]:
        return self.last.id if self.last is not None else None

    def should_continue(self, max_batches: int) -> bool:
        return not self.exhausted and self.batches_done < max_batches

    def advance(self, batch: Sequence[Thread]) -> "ArchiveScan":
        """Return the state after receiving ``batch``; ``self`` is untouched."""
        if not batch:
            return replace(self, exhausted=True)
        collected = dict(self.collected)
        for thread in batch:
            collected.setdefault(thread.id, thread)
        return ArchiveScan(
            last=batch[-1],
            batches_done=self.batches_done + 1,
            collected=collected,
        )

    @property
    def threads(self) -> List[Thread]:
        return list(self.collected.values())


async def scan_archived(
    source: BatchSource,
    max_batches: int = DEFAULT_MAX_BATCHES,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> ArchiveScan:
    batch_size = max(1, min(batch_size, MAX_BATCH_SIZE))
    scan = ArchiveScan()
    while scan.should_continue(max_batches):
        batch = await source(scan.last, batch_size)
        scan = scan.advance(batch)
        logger.debug(
            "archived batch %d: %d threads, cursor=%s",
            scan.batches_done,
            len(batch),
            scan.cursor,
        )
    if not scan.exhausted:
        logger.info(
            "stopped archived thread scan at %d batches (%d threads)",
            scan.batches_done,
            len(scan.collected),
        )
    return scan


async def fetch_all_archived(
    gateway: DiscordGateway,
    forum: Channel,
    max_batches: int = DEFAULT_MAX_BATCHES,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> List[Thread]:
    async def source(before: Optional[Thread], limit: int) -> Sequence[Thread]:
        return await gateway.fetch_archived_threads(forum, before, limit)

    scan = await scan_archived(source, max_batches=max_batches, batch_size=batch_size)
    return scan.threads
