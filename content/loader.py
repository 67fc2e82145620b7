"""Content loader: discover post sources and order them newest-first.

Each direct child of the posts directory is one post, either
``<name>.md`` or a ``<name>/`` directory holding ``index.md``.  Loading is
all-or-nothing: a single bad entry aborts the load, because the feeds must
list every post.
"""

from __future__ import annotations

import logging
from pathlib import Path

import aiofiles

from config import ConfigurationError
from content.post import PostRecord, parse_post
from errors import SiteBuildError

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".md"
DIRECTORY_INDEX = "index.md"


class ContentParseError(SiteBuildError):
    """Raised when one content source cannot be turned into a post."""

    def __init__(self, source: Path, reason: str) -> None:
        super().__init__(f"Failed to parse post source {source}: {reason}")
        self.source = source
        self.reason = reason


def discover_sources(source_dir: Path) -> list[tuple[Path, str]]:
    """Return ``(file, default_slug)`` for every entry, in name order.

    Name order is the discovery order used to break timestamp ties, so it
    must not depend on the filesystem's listing order.
    """
    if not source_dir.is_dir():
        raise ConfigurationError(f"Posts directory not found: {source_dir}")
    try:
        entries = sorted(source_dir.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise ConfigurationError(
            f"Posts directory is not readable: {source_dir}: {exc}"
        ) from exc

    sources: list[tuple[Path, str]] = []
    for entry in entries:
        if entry.name.startswith("."):
            continue
        if entry.is_dir():
            index = entry / DIRECTORY_INDEX
            if not index.is_file():
                raise ContentParseError(entry, f"directory has no {DIRECTORY_INDEX}")
            sources.append((index, entry.name))
        elif entry.suffix == SOURCE_SUFFIX:
            sources.append((entry, entry.stem))
        else:
            raise ContentParseError(entry, "unsupported content source")
    return sources


async def read_post(path: Path, default_slug: str) -> PostRecord:
    """Read and parse a single content source."""
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            text = await f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ContentParseError(path, str(exc)) from exc

    try:
        return parse_post(text, default_slug, source_path=path)
    except ValueError as exc:
        raise ContentParseError(path, str(exc)) from exc


def order_posts(posts: list[PostRecord]) -> list[PostRecord]:
    """Sort newest-first by creation time.

    ``sorted`` is stable even with ``reverse=True``, so posts sharing a
    timestamp keep their discovery order.
    """
    return sorted(posts, key=lambda p: p.created, reverse=True)


async def load_posts(source_dir: Path) -> list[PostRecord]:
    """Load every post under *source_dir* and return them newest-first."""
    source_dir = Path(source_dir)
    posts: list[PostRecord] = []
    seen: dict[str, Path] = {}

    for path, default_slug in discover_sources(source_dir):
        post = await read_post(path, default_slug)
        if post.slug in seen:
            raise ContentParseError(
                path, f"slug {post.slug!r} already used by {seen[post.slug]}"
            )
        seen[post.slug] = path
        posts.append(post)
        logger.debug("Parsed %s as %s", path, post.slug)

    logger.info("Loaded %d post(s) from %s", len(posts), source_dir)
    return order_posts(posts)
