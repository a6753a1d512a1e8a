from __future__ import annotations

from typing import Iterable, Mapping
from urllib.parse import quote, unquote

from gelbooru_typed.consts import COMMON_QUERY, MAX_LIMIT, TAG_SAFE_CHARS, TAGS_SEPARATOR
from gelbooru_typed.errors import InvalidLimitError


def check_limit(limit: int) -> None:
    if limit > MAX_LIMIT:
        raise InvalidLimitError(limit)
    if limit < 0:
        raise ValueError(f"Limit must not be negative, got {limit}")


def check_page(page: int) -> None:
    if page < 0:
        raise ValueError(f"Page index must not be negative, got {page}")


def quote_tag(tag: str) -> str:
    """
    Escapes characters that would change the meaning of the query
    (`&`, `#`, `+`, `=`, `%`, spaces). Search syntax such as
    `-rating:explicit` or `hair_(ornament)` stays readable.
    """
    return quote(tag, safe=TAG_SAFE_CHARS)


def join_tags(tags: Iterable[str]) -> str:
    """
    Joins search tags with a raw '+', which the API reads as the separator.
    """
    return TAGS_SEPARATOR.join(sorted(quote_tag(tag) for tag in set(tags)))


def split_tags(query: str) -> set[str]:
    return {unquote(tag) for tag in query.split(TAGS_SEPARATOR) if tag}


def _build(base_url: str, params: Mapping[str, object]) -> str:
    query = "&".join(f"{key}={value}" for key, value in params.items())
    return f"{base_url}?{query}"


def _endpoint_params(endpoint: str, api_key: str, user_id: str) -> dict[str, object]:
    return {**COMMON_QUERY, 's': endpoint, 'api_key': api_key, 'user_id': user_id}


def posts_url(base_url: str,
              api_key: str,
              user_id: str,
              tags: Iterable[str] = (),
              *,
              limit: int,
              page: int,
              ) -> str:
    check_limit(limit)
    check_page(page)
    params = _endpoint_params('post', api_key, user_id)
    params.update(limit=limit, pid=page, tags=join_tags(tags))
    return _build(base_url, params)


def tags_url(base_url: str, api_key: str, user_id: str, *, limit: int, page: int) -> str:
    check_limit(limit)
    check_page(page)
    params = _endpoint_params('tag', api_key, user_id)
    params.update(limit=limit, pid=page)
    return _build(base_url, params)
