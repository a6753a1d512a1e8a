from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Any, Iterable, Sequence

from adaptix import Chain, DebugTrail, P, Retort, loader, name_mapping
from adaptix.load_error import (
    AggregateLoadError, BadVariantLoadError, LoadError, NoRequiredFieldsLoadError, TypeLoadError,
)
from adaptix.struct_trail import get_trail

from gelbooru_typed.consts import GELBOORU_IMAGES_URL, GELBOORU_POST_PAGE_URL, GELBOORU_THUMBNAILS_URL
from gelbooru_typed.consts import PLACEHOLDER_URL
from gelbooru_typed.errors import DecodingError, DecodingErrorKind


CATEGORY_SUFFIX = re.compile(r"_\([^()]*\)$")


class Rating(Enum):
    GENERAL = "general"
    SENSITIVE = "sensitive"
    QUESTIONABLE = "questionable"
    EXPLICIT = "explicit"
    # deprecated, still found in old responses
    SAFE = "safe"

    @classmethod
    def current(cls) -> tuple[Rating, ...]:
        return tuple(rating for rating in cls if rating is not cls.SAFE)

    @property
    def exclusion_tag(self) -> str:
        return f"-rating:{self.value}"


@dataclass(frozen=True, eq=False)
class Post:
    id: int
    created_at: str
    score: int
    width: int
    height: int
    md5: str
    directory: str
    image: str
    rating: Rating
    source: str
    change: int
    owner: str
    creator_id: int
    parent_id: int
    sample: int
    preview_height: int
    preview_width: int
    tags: frozenset[str]
    has_notes: str | None
    has_comments: str | None
    file_url: str
    preview_url: str
    sample_url: str | None
    sample_height: int
    sample_width: int
    status: str | None
    post_locked: int
    has_children: str | None
    title: str | None = None

    @classmethod
    def placeholder(cls,
                    id: int,
                    tags: Iterable[str] = (),
                    file_url: str = PLACEHOLDER_URL,
                    rating: Rating = Rating.GENERAL,
                    ) -> Post:
        """
        Minimal post for previews and default states.
        Everything but the arguments is zeroed.
        """
        return cls(
            id=id, created_at="", score=0, width=0, height=0, md5="",
            directory="", image="", rating=rating, source="", change=0, owner="",
            creator_id=0, parent_id=0, sample=0, preview_height=0, preview_width=0,
            tags=frozenset(tags), has_notes="", has_comments="",
            file_url=file_url, preview_url="", sample_url="", sample_height=0, sample_width=0,
            status="", post_locked=0, has_children="", title="",
        )

    @cached_property
    def url(self) -> str:
        return GELBOORU_POST_PAGE_URL.format(id=self.id)

    @cached_property
    def image_url(self) -> str:
        return f"{GELBOORU_IMAGES_URL}/{self.directory}/{self.image}"

    @cached_property
    def preview_image_url(self) -> str:
        return f"{GELBOORU_THUMBNAILS_URL}/{self.directory}/thumbnail_{self.image}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Post):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True, eq=False)
class Tag:
    id: int
    name: str
    count: int
    type: int
    ambiguous: int

    @cached_property
    def name_without_category(self) -> str:
        return CATEGORY_SUFFIX.sub("", self.name)

    @cached_property
    def category(self) -> str | None:
        match = CATEGORY_SUFFIX.search(self.name)
        if match is None:
            return None
        return match.group(0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True)
class Attributes:
    count: int
    limit: int
    pid: int | None = None
    offset: int | None = None


@dataclass(frozen=True)
class PostPage:
    attributes: Attributes
    posts: list[Post] = field(default_factory=list)


@dataclass(frozen=True)
class TagPage:
    attributes: Attributes
    tags: list[Tag] | None = None


def tag_names(tags: Iterable[Tag]) -> set[str]:
    return {tag.name for tag in tags}


def _split_tags(data: Any) -> frozenset[str]:
    if not isinstance(data, str):
        raise TypeLoadError(str, data)
    return frozenset(tag for tag in data.split(" ") if tag)


def _false_as_none(data: str | None) -> str | None:
    '''
    The API sends the string "false" instead of null for has_* flags.
    '''
    if data == "false":
        return None
    return data


def _empty_as_none(data: str | None) -> str | None:
    return data or None


_retort = Retort(
    recipe=[
        loader(P[Post].tags, _split_tags),
        loader(P[Post].has_notes, _false_as_none, Chain.LAST),
        loader(P[Post].has_comments, _false_as_none, Chain.LAST),
        loader(P[Post].has_children, _false_as_none, Chain.LAST),
        loader(P[Post].sample_url, _empty_as_none, Chain.LAST),
        name_mapping(PostPage, map={'attributes': '@attributes', 'posts': 'post'}),
        name_mapping(TagPage, map={'attributes': '@attributes', 'tags': 'tag'}),
    ],
    strict_coercion=True,
    debug_trail=DebugTrail.FIRST,
)


def _render_path(path: Sequence[Any]) -> str | None:
    if not path:
        return None
    return ".".join(str(element) for element in path)


def _to_decoding_error(exc: LoadError) -> DecodingError:
    path = list(get_trail(exc))
    leaf: BaseException = exc
    while isinstance(leaf, AggregateLoadError) and leaf.exceptions:
        leaf = leaf.exceptions[0]
        path.extend(get_trail(leaf))

    if isinstance(leaf, NoRequiredFieldsLoadError):
        missing = sorted(leaf.fields)
        return DecodingError(DecodingErrorKind.MISSING_FIELD, _render_path([*path, *missing[:1]]),
                             detail=f"missing {', '.join(missing)}")
    if isinstance(leaf, BadVariantLoadError):
        return DecodingError(DecodingErrorKind.INVALID_ENUM_VALUE, _render_path(path),
                             detail=f"unexpected value {leaf.input_value!r}")
    if isinstance(leaf, TypeLoadError):
        return DecodingError(DecodingErrorKind.TYPE_MISMATCH, _render_path(path),
                             detail=f"got {leaf.input_value!r}")
    return DecodingError(DecodingErrorKind.MALFORMED, _render_path(path), detail=str(leaf))


def _parse_body(data: Any) -> Any:
    if not isinstance(data, (bytes, bytearray, str)):
        return data
    try:
        return json.loads(data)
    except ValueError as exc:
        raise DecodingError(DecodingErrorKind.MALFORMED, detail=str(exc)) from exc


def _load(data: Any, tp: type):
    try:
        return _retort.load(_parse_body(data), tp)
    except LoadError as exc:
        raise _to_decoding_error(exc) from exc


def load_post(data: Any) -> Post:
    return _load(data, Post)


def load_tag(data: Any) -> Tag:
    return _load(data, Tag)


def load_post_page(data: Any) -> PostPage:
    return _load(data, PostPage)


def load_tag_page(data: Any) -> TagPage:
    return _load(data, TagPage)
