r"""Split content files into a typed metadata record and a markdown body.

Content files may open with a YAML block fenced by ``---`` lines or a TOML
block fenced by ``+++`` lines. Files without a block are accepted and yield an
empty metadata record. Anything else that looks like a block but cannot be
parsed (an unterminated fence, invalid YAML/TOML, a non-mapping document, or a
value of the wrong type) raises :class:`~sitegraph.errors.ParseError`; invalid
sort or pagination settings in a section block raise
:class:`~sitegraph.errors.ConfigError`.

Example
-------
>>> from sitegraph.content.front_matter import parse_front_matter
>>> meta, body = parse_front_matter("---\ntitle: Hello\n---\nBody", "hello.md")
>>> meta["title"], body
('Hello', 'Body')
"""

from __future__ import annotations

import datetime as dt
import logging
import re
import tomllib
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from sitegraph.errors import ConfigError, ParseError

from .models import PageMeta, SectionMeta, SortBy

if typ.TYPE_CHECKING:
    from pathlib import Path

FRONT_MATTER_PATTERN = re.compile(
    r"\A(?P<fence>---|\+\+\+)[ \t]*\r?\n(?P<block>.*?)^(?P=fence)[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)
OPENING_FENCE_PATTERN = re.compile(r"\A(---|\+\+\+)[ \t]*\r?\n")

logger = logging.getLogger(__name__)

PAGE_KEYS = frozenset(
    {
        "title",
        "description",
        "date",
        "order",
        "weight",
        "tags",
        "category",
        "template",
        "draft",
        "slug",
        "url",
        "extra",
    }
)
SECTION_KEYS = frozenset(
    {
        "title",
        "description",
        "sort_by",
        "paginate_by",
        "paginate_path",
        "render",
        "template",
        "extra",
    }
)


def parse_front_matter(
    text: str, path: Path | str
) -> tuple[dict[str, typ.Any], str]:
    """Return the raw metadata mapping and the body of a content file.

    Parameters
    ----------
    text : str
        Full file contents.
    path : Path or str
        Source path used in error messages.

    Returns
    -------
    tuple[dict[str, Any], str]
        The metadata mapping (empty when the file has no block) and the body
        text following the closing fence.

    Raises
    ------
    ParseError
        If the block is unterminated, unparsable, or not a mapping.
    """
    text = text.removeprefix("\ufeff")
    match = FRONT_MATTER_PATTERN.match(text)
    if match is None:
        if OPENING_FENCE_PATTERN.match(text):
            msg = "front matter block is not terminated"
            raise ParseError(msg, path=path)
        return {}, text

    block = match.group("block")
    body = text[match.end() :]
    if match.group("fence") == "+++":
        loaded = _load_toml(block, path)
    else:
        loaded = _load_yaml(block, path)
    return loaded, body


def _load_yaml(block: str, path: Path | str) -> dict[str, typ.Any]:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(block)
    except YAMLError as exc:
        msg = f"invalid YAML front matter: {exc}"
        raise ParseError(msg, path=path) from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        msg = "front matter must be a mapping"
        raise ParseError(msg, path=path)
    return dict(loaded)


def _load_toml(block: str, path: Path | str) -> dict[str, typ.Any]:
    try:
        return tomllib.loads(block)
    except tomllib.TOMLDecodeError as exc:
        msg = f"invalid TOML front matter: {exc}"
        raise ParseError(msg, path=path) from exc


def page_meta_from_mapping(
    raw: typ.Mapping[str, typ.Any], path: Path | str
) -> PageMeta:
    """Validate a raw mapping and build a :class:`PageMeta`."""
    _warn_unknown_keys(raw, PAGE_KEYS, path)
    reader = _FieldReader(raw, path)
    return PageMeta(
        title=reader.optional_str("title"),
        description=reader.optional_str("description"),
        date=reader.optional_date("date"),
        order=reader.optional_int("order"),
        weight=reader.optional_int("weight"),
        tags=reader.string_set("tags"),
        category=reader.optional_str("category"),
        template=reader.optional_str("template"),
        draft=reader.boolean("draft", default=False),
        slug=reader.optional_str("slug"),
        url=reader.optional_str("url"),
        extra=reader.mapping("extra"),
    )


def section_meta_from_mapping(
    raw: typ.Mapping[str, typ.Any], path: Path | str
) -> SectionMeta:
    """Validate a raw mapping and build a :class:`SectionMeta`.

    Raises
    ------
    ParseError
        If a value has the wrong type.
    ConfigError
        If ``sort_by`` names an unknown mode, ``paginate_by`` is negative, or
        ``paginate_path`` is not a single URL segment.
    """
    _warn_unknown_keys(raw, SECTION_KEYS, path)
    reader = _FieldReader(raw, path)
    sort_by = _parse_sort_by(raw.get("sort_by"), path)

    paginate_by = reader.optional_int("paginate_by")
    if paginate_by is not None and paginate_by < 0:
        msg = f"{path}: 'paginate_by' must not be negative, got {paginate_by}"
        raise ConfigError(msg)

    paginate_path = reader.optional_str("paginate_path")
    if paginate_path is not None:
        paginate_path = paginate_path.strip("/")
        if not paginate_path or "/" in paginate_path:
            msg = f"{path}: 'paginate_path' must be a single path segment"
            raise ConfigError(msg)

    return SectionMeta(
        title=reader.optional_str("title"),
        description=reader.optional_str("description"),
        sort_by=sort_by,
        paginate_by=paginate_by,
        paginate_path=paginate_path,
        render=reader.boolean("render", default=True),
        template=reader.optional_str("template"),
        extra=reader.mapping("extra"),
    )


def _warn_unknown_keys(
    raw: typ.Mapping[str, typ.Any], known: frozenset[str], path: Path | str
) -> None:
    unknown = sorted(str(key) for key in raw if key not in known)
    if unknown:
        logger.warning(
            "%s: ignoring unknown front matter keys: %s", path, ", ".join(unknown)
        )


def _parse_sort_by(value: object, path: Path | str) -> SortBy:
    if value is None:
        return SortBy.NONE
    if not isinstance(value, str):
        msg = f"{path}: 'sort_by' must be a string, got {value!r}"
        raise ConfigError(msg)
    try:
        return SortBy(value.strip().lower())
    except ValueError:
        allowed = ", ".join(mode.value for mode in SortBy)
        msg = f"{path}: unknown sort_by {value!r} (expected one of {allowed})"
        raise ConfigError(msg) from None


class _FieldReader:
    """Typed accessors over a raw front-matter mapping."""

    def __init__(self, raw: typ.Mapping[str, typ.Any], path: Path | str) -> None:
        self.raw = raw
        self.path = path

    def _fail(self, key: str, expected: str) -> typ.NoReturn:
        value = self.raw.get(key)
        msg = f"'{key}' must be {expected}, got {value!r}"
        raise ParseError(msg, path=self.path)

    def optional_str(self, key: str) -> str | None:
        value = self.raw.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            self._fail(key, "a string")
        return value

    def optional_int(self, key: str) -> int | None:
        value = self.raw.get(key)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            self._fail(key, "an integer")
        return value

    def boolean(self, key: str, *, default: bool) -> bool:
        value = self.raw.get(key)
        if value is None:
            return default
        if not isinstance(value, bool):
            self._fail(key, "true or false")
        return value

    def string_set(self, key: str) -> frozenset[str]:
        value = self.raw.get(key)
        if value is None:
            return frozenset()
        if not isinstance(value, list) or not all(
            isinstance(item, str) for item in value
        ):
            self._fail(key, "a list of strings")
        return frozenset(item.strip() for item in value if item.strip())

    def mapping(self, key: str) -> dict[str, typ.Any]:
        value = self.raw.get(key)
        if value is None:
            return {}
        if not isinstance(value, dict):
            self._fail(key, "a mapping")
        return dict(value)

    def optional_date(self, key: str) -> dt.datetime | None:
        value = self.raw.get(key)
        parsed = _coerce_datetime(value)
        if value is not None and parsed is None:
            self._fail(key, "a date (YYYY-MM-DD) or RFC 3339 datetime")
        return parsed


def _coerce_datetime(value: object) -> dt.datetime | None:
    """Normalize a front-matter date into a timezone-aware UTC datetime."""
    match value:
        case dt.datetime():
            parsed = value
        case dt.date():
            parsed = dt.datetime(value.year, value.month, value.day)
        case str() as text:
            sanitized = text.strip()
            if not sanitized:
                return None
            if sanitized.endswith("Z"):
                sanitized = sanitized[:-1] + "+00:00"
            try:
                parsed = dt.datetime.fromisoformat(sanitized)
            except ValueError:
                return None
        case _:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)


__all__ = [
    "PAGE_KEYS",
    "SECTION_KEYS",
    "page_meta_from_mapping",
    "parse_front_matter",
    "section_meta_from_mapping",
]
