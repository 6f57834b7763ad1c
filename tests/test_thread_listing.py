from __future__ import annotations

import asyncio

from discord_forum_mcp.models import Tag
from discord_forum_mcp.threads import (
    ThreadFilter,
    list_or_search,
    merge_threads,
    newest_first,
)

from fakes import FakeGateway, make_forum, make_thread

FORUM = make_forum(tags=(Tag("1", "Bug"),))


def _names(listing) -> list[str]:
    return [view["threadName"] for view in listing.threads]


def test_exact_and_substring_filters() -> None:
    threads = [
        make_thread("1", "Library"),
        make_thread("2", "Library2"),
        make_thread("3", "library-notes"),
        make_thread("4", "Other"),
    ]

    exact = ThreadFilter("Library", exact_match=True)
    contains = ThreadFilter("Library")

    assert [t.name for t in threads if exact.matches(t)] == ["Library"]
    assert [t.name for t in threads if contains.matches(t)] == [
        "Library",
        "Library2",
        "library-notes",
    ]


def test_sort_is_newest_first_and_stable() -> None:
    threads = [
        make_thread("a", created=3),
        make_thread("b", created=5),
        make_thread("c", created=1),
        make_thread("d", created=3),
    ]
    ordered = newest_first(threads)
    assert [t.created_timestamp for t in ordered] == [5, 3, 3, 1]
    assert [t.id for t in ordered] == ["b", "a", "d", "c"]


def test_merge_keeps_first_copy() -> None:
    active = make_thread("1", "active copy")
    stale = make_thread("1", "archived copy", archived=True)
    merged = merge_threads([active], [stale, make_thread("2")])
    assert [t.name for t in merged] == ["active copy", "thread"]


def test_active_only_listing_does_not_touch_archive() -> None:
    gateway = FakeGateway()
    gateway.add_thread(make_thread("1", "one", created=1))
    gateway.add_thread(make_thread("2", "two", created=2))
    gateway.archived_batches = [[make_thread("3", "old", archived=True)], []]

    listing = asyncio.run(list_or_search(gateway, FORUM, False, None, 50))

    assert _names(listing) == ["two", "one"]
    assert "fetch_archived_threads" not in gateway.call_names()


def test_search_merges_archived_filters_and_truncates() -> None:
    gateway = FakeGateway()
    gateway.add_thread(make_thread("10", "Library", created=10, tags=("1", "77")))
    gateway.archived_batches = [
        [
            make_thread("9", "library-notes", created=9, archived=True),
            make_thread("8", "Kitchen", created=8, archived=True),
            make_thread("7", "Library2", created=7, archived=True),
        ],
        [],
    ]

    listing = asyncio.run(
        list_or_search(gateway, FORUM, True, ThreadFilter("library"), 2)
    )

    assert _names(listing) == ["Library", "library-notes"]
    assert listing.total_matched == 3
    assert listing.total_scanned == 4
    assert listing.threads[0]["tags"] == [
        {"id": "1", "name": "Bug", "emoji": None},
        {"id": "77", "name": "Unknown Tag", "emoji": None},
    ]


def test_thread_view_shape() -> None:
    gateway = FakeGateway()
    gateway.add_thread(make_thread("10", "Library", created=1_700_000_000_000))

    view = asyncio.run(list_or_search(gateway, FORUM, False, None, 5)).threads[0]

    assert view["threadId"] == "10"
    assert view["createdTimestamp"] == 1_700_000_000_000
    assert view["createdAt"].startswith("2023-11-14T22:13:20")
    assert view["archived"] is False
