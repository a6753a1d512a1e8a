from __future__ import annotations

import logging
from functools import partial
from itertools import count
from typing import AsyncIterator, Iterable

from tqdm import tqdm

from gelbooru_typed.client import GelbooruClient
from gelbooru_typed.consts import DEFAULT_LIMIT
from gelbooru_typed.datamodel import Post, Tag
from gelbooru_typed.inner_types import TrackerFactory
from gelbooru_typed.query import check_limit, check_page


logger = logging.getLogger(__name__)
default_tracker = partial(tqdm, disable=True)


def _pages(start_page: int, max_pages: int | None) -> Iterable[int]:
    check_page(start_page)
    if max_pages is None:
        return count(start_page)
    if max_pages < 0:
        raise ValueError(f"max_pages must not be negative, got {max_pages}")
    return range(start_page, start_page + max_pages)


async def iter_post_pages(client: GelbooruClient,
                          tags: Iterable[str] = (),
                          *,
                          limit: int = DEFAULT_LIMIT,
                          start_page: int = 0,
                          max_pages: int | None = None,
                          ) -> AsyncIterator[list[Post]]:
    """
    Yields pages of posts until the server returns an empty one.

    Any error ends the iteration and propagates: a failed page is never skipped.
    """
    check_limit(limit)
    tags = frozenset(tags)
    for page in _pages(start_page, max_pages):
        posts = await client.list_posts(tags, limit=limit, page=page)
        if not posts:
            logger.debug("Page %s is empty, stop", page)
            return
        yield posts


async def iter_tag_pages(client: GelbooruClient,
                         *,
                         limit: int = DEFAULT_LIMIT,
                         start_page: int = 0,
                         max_pages: int | None = None,
                         ) -> AsyncIterator[list[Tag]]:
    check_limit(limit)
    for page in _pages(start_page, max_pages):
        tags = await client.list_tags(limit=limit, page=page)
        if not tags:
            logger.debug("Page %s has no tags, stop", page)
            return
        yield tags


async def collect_tags(client: GelbooruClient,
                       *,
                       limit: int = DEFAULT_LIMIT,
                       start_page: int = 0,
                       max_pages: int | None = None,
                       tracker: TrackerFactory = default_tracker,
                       ) -> dict[int, Tag]:
    """
    Reads tag pages into a mapping keyed by tag id.

    The tag catalog spans thousands of pages, so pass `max_pages` and resume
    later from `start_page` instead of reading it in one go. Tags repeated on
    overlapping pages are kept once.
    """
    collected: dict[int, Tag] = {}
    with tracker(desc="Tag pages", total=max_pages, unit="page") as progress:
        async for tags in iter_tag_pages(client, limit=limit, start_page=start_page, max_pages=max_pages):
            for tag in tags:
                collected.setdefault(tag.id, tag)
            progress.update(1)
            progress.set_postfix_str(f"{len(collected)} tags")
    logger.info("Collected %s tags", len(collected))
    return collected
