"""Post artifact writer: one post's HTML page and preview image."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import aiofiles

from config import BuildConfig
from content.post import PostRecord
from errors import SiteBuildError
from render.markup import render_post_page
from render.og_image import PreviewCard, render_og_image

logger = logging.getLogger(__name__)


class ArtifactWriteError(SiteBuildError):
    """Raised when a post's page or preview image cannot be produced."""

    def __init__(self, slug: str, reason: str, path: Path | None = None) -> None:
        where = f" ({path})" if path else ""
        super().__init__(f"Failed to write artifacts for post {slug!r}{where}: {reason}")
        self.slug = slug
        self.path = path


def ensure_dir(path: Path) -> None:
    """Create *path* and its parents; an existing directory is fine.

    Never checks for existence first, so concurrent writers sharing a
    parent cannot trip over each other.
    """
    path.mkdir(parents=True, exist_ok=True)


async def write_bytes(path: Path, data: bytes) -> None:
    ensure_dir(path.parent)
    async with aiofiles.open(path, "wb") as f:
        await f.write(data)


async def write_text(path: Path, text: str) -> None:
    ensure_dir(path.parent)
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(text)


def artifact_paths(post: PostRecord, config: BuildConfig) -> tuple[Path, Path]:
    """Return ``(page_path, og_image_path)`` for *post*."""
    return (
        config.blog_dir / post.relative_path,
        config.blog_dir / post.relative_og_image_path,
    )


async def write_post_artifacts(post: PostRecord, config: BuildConfig) -> None:
    """Render and write both artifacts for *post*.

    Returns only once both files are on disk.  Any failure is re-raised as
    :class:`ArtifactWriteError` naming the post.
    """
    page_path, image_path = artifact_paths(post, config)
    hostname = config.hostname

    try:
        page_html = render_post_page(post, hostname, config.blog_url)
        image = await asyncio.to_thread(
            render_og_image, PreviewCard.for_post(post, hostname)
        )
    except Exception as exc:
        raise ArtifactWriteError(post.slug, f"render failed: {exc}") from exc

    logger.info("Writing post og image to %s", image_path)
    try:
        await write_bytes(image_path, image)
    except OSError as exc:
        raise ArtifactWriteError(post.slug, str(exc), image_path) from exc

    logger.info('Writing post "%s" to %s', post.title, page_path)
    try:
        await write_text(page_path, page_html)
    except OSError as exc:
        raise ArtifactWriteError(post.slug, str(exc), page_path) from exc
