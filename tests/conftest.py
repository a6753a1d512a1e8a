"""
Shared fixtures: sample API payloads and a stand-in for aiohttp.ClientSession.
"""

from __future__ import annotations

import json
from typing import Any

import pytest


POST_JSON: dict[str, Any] = {
    "id": 10012345,
    "created_at": "Mon May 27 12:34:56 -0500 2024",
    "score": 42,
    "width": 1200,
    "height": 1600,
    "md5": "d41d8cd98f00b204e9800998ecf8427e",
    "directory": "d4/1d",
    "image": "d41d8cd98f00b204e9800998ecf8427e.png",
    "rating": "general",
    "source": "https://example.com/artwork/1",
    "change": 1716831296,
    "owner": "danbooru",
    "creator_id": 6498,
    "parent_id": 0,
    "sample": 1,
    "preview_height": 250,
    "preview_width": 188,
    "tags": "1girl kagamine_rin solo",
    "title": "",
    "has_notes": "false",
    "has_comments": "true",
    "file_url": "https://img3.gelbooru.com/images/d4/1d/d41d8cd98f00b204e9800998ecf8427e.png",
    "preview_url": "https://img3.gelbooru.com/thumbnails/d4/1d/thumbnail_d41d8cd98f00b204e9800998ecf8427e.jpg",
    "sample_url": "https://img3.gelbooru.com/samples/d4/1d/sample_d41d8cd98f00b204e9800998ecf8427e.jpg",
    "sample_height": 1133,
    "sample_width": 850,
    "status": "active",
    "post_locked": 0,
    "has_children": "false",
}

TAG_JSON: dict[str, Any] = {
    "id": 152532,
    "name": "hair_(ornament)",
    "count": 1024,
    "type": 0,
    "ambiguous": 0,
}


@pytest.fixture
def post_json() -> dict[str, Any]:
    return dict(POST_JSON)


@pytest.fixture
def tag_json() -> dict[str, Any]:
    return dict(TAG_JSON)


def make_post(id: int, **overrides: Any) -> dict[str, Any]:
    return {**POST_JSON, "id": id, **overrides}


def make_tag(id: int, name: str, **overrides: Any) -> dict[str, Any]:
    return {**TAG_JSON, "id": id, "name": name, **overrides}


def post_page(*posts: dict[str, Any], count: int | None = None, pid: int = 0) -> bytes:
    envelope: dict[str, Any] = {"@attributes": {"limit": 100, "offset": pid * 100, "count": count or len(posts)}}
    if posts:
        envelope["post"] = list(posts)
    return json.dumps(envelope).encode()


def tag_page(*tags: dict[str, Any], count: int | None = None) -> bytes:
    envelope: dict[str, Any] = {"@attributes": {"limit": 100, "count": count or len(tags)}}
    if tags:
        envelope["tag"] = list(tags)
    return json.dumps(envelope).encode()


class FakeResponse:
    def __init__(self, status: int = 200, body: bytes = b"") -> None:
        self.status = status
        self._body = body
        self.read_called = False

    async def read(self) -> bytes:
        self.read_called = True
        return self._body

    async def __aenter__(self) -> FakeResponse:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


class FailingRequest:
    def __init__(self, exc: BaseException) -> None:
        self._exc = exc

    async def __aenter__(self) -> FakeResponse:
        raise self._exc

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


class FakeSession:
    """
    Replays prepared responses in order and remembers requested URLs.
    """

    def __init__(self, *responses: FakeResponse | FailingRequest) -> None:
        self._responses = list(responses)
        self.requested: list[str] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse | FailingRequest:
        self.requested.append(str(url))
        if not self._responses:
            raise AssertionError(f"Unexpected request to {url}")
        return self._responses.pop(0)
