from __future__ import annotations

import asyncio
import logging
from logging import Logger
from typing import Iterable

from aiohttp import ClientError, ClientTimeout
from aiohttp.client import ClientSession
from aiohttp_socks import ProxyConnectionError, ProxyConnector, ProxyError, ProxyTimeoutError

from gelbooru_typed.consts import DEFAULT_LIMIT, DEFAULT_TIMEOUT, GELBOORU_API_URL, RANDOM_SORT_TAG
from gelbooru_typed.datamodel import Post, Tag, load_post_page, load_tag_page
from gelbooru_typed.errors import PostNotFoundError, RequestError, TransportError
from gelbooru_typed.query import check_limit, join_tags, posts_url, tags_url


logger = logging.getLogger(__name__)

# aiohttp_socks errors do not derive from aiohttp.ClientError
_TRANSPORT_ERRORS = (ClientError, ProxyError, ProxyConnectionError, ProxyTimeoutError, asyncio.TimeoutError)


class GelbooruClient:
    """
    Client for the `index.php?page=dapi` JSON API.

    Holds nothing but credentials and transport settings, so one instance
    can be shared by any number of concurrent callers. Pagination is up to
    the caller: every call takes an explicit page index.

    When `session` is given it is used for all requests and left open;
    otherwise every call opens a short-lived session of its own.
    """

    def __init__(self,
                 api_key: str,
                 user_id: str,
                 *,
                 base_url: str = GELBOORU_API_URL,
                 session: ClientSession | None = None,
                 proxy_url: str | None = None,
                 timeout: float | None = DEFAULT_TIMEOUT,
                 logger: Logger = logger,
                 ) -> None:
        self._api_key = api_key
        self._user_id = user_id
        self._base_url = base_url
        self._session = session
        self._proxy_url = proxy_url
        self._timeout = timeout
        self._log = logger

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def user_id(self) -> str:
        return self._user_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(user_id={self._user_id!r}, base_url={self._base_url!r})"

    async def list_posts(self, tags: Iterable[str] = (), *, limit: int = DEFAULT_LIMIT, page: int = 0) -> list[Post]:
        tags = set(tags)
        url = posts_url(self._base_url, self._api_key, self._user_id, tags, limit=limit, page=page)
        self._log.debug("Requesting posts '%s' (limit=%s, pid=%s)", join_tags(tags), limit, page)
        body = await self._get(url)
        return load_post_page(body).posts

    async def list_tags(self, *, limit: int = DEFAULT_LIMIT, page: int = 0) -> list[Tag] | None:
        url = tags_url(self._base_url, self._api_key, self._user_id, limit=limit, page=page)
        self._log.debug("Requesting tags (limit=%s, pid=%s)", limit, page)
        body = await self._get(url)
        return load_tag_page(body).tags

    async def random_post(self, tags: Iterable[str] = ()) -> Post:
        tags = {*tags, RANDOM_SORT_TAG}
        posts = await self.list_posts(tags, limit=1)
        if not posts:
            raise PostNotFoundError(join_tags(tags))
        return posts[0]

    async def _get(self, url: str) -> bytes:
        if self._session is not None:
            return await self._fetch(self._session, url)
        connector = ProxyConnector.from_url(self._proxy_url) if self._proxy_url else None
        timeout = ClientTimeout(total=self._timeout)
        async with ClientSession(connector=connector, timeout=timeout) as session:
            return await self._fetch(session, url)

    async def _fetch(self, session: ClientSession, url: str) -> bytes:
        try:
            async with session.get(url) as response:
                if not 200 <= response.status < 300:
                    self._log.debug("Request failed with status %s", response.status)
                    raise RequestError(response.status)
                return await response.read()
        except _TRANSPORT_ERRORS as exc:
            self._log.debug("Transport error: %r", exc)
            raise TransportError(exc) from exc


def fetch_posts(api_key: str,
                user_id: str,
                tags: Iterable[str] = (),
                *,
                limit: int = DEFAULT_LIMIT,
                page: int = 0,
                proxy_url: str | None = None,
                ) -> list[Post]:
    check_limit(limit)
    client = GelbooruClient(api_key, user_id, proxy_url=proxy_url)
    return asyncio.run(client.list_posts(tags, limit=limit, page=page))


def fetch_tags(api_key: str,
               user_id: str,
               *,
               limit: int = DEFAULT_LIMIT,
               page: int = 0,
               proxy_url: str | None = None,
               ) -> list[Tag] | None:
    check_limit(limit)
    client = GelbooruClient(api_key, user_id, proxy_url=proxy_url)
    return asyncio.run(client.list_tags(limit=limit, page=page))
