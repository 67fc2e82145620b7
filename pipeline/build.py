"""Site build orchestration.

Loads posts from the posts directory, writes every post's page and preview
image concurrently, then the blog index, the Atom feed, and the homepage.
Any failure aborts the build; there is no partial publish.
"""

from __future__ import annotations

import asyncio
import enum
import logging

from blog.feed import assemble_atom_feed, assemble_html_feed
from blog.writer import write_post_artifacts, write_text
from config import BuildConfig
from content.loader import load_posts
from content.post import PostRecord
from errors import SiteBuildError
from render.markup import render_home_page

logger = logging.getLogger(__name__)

BLOG_INDEX = "index.html"
ATOM_FILENAME = "atom.xml"
HOMEPAGE = "index.html"


class BuildStage(enum.Enum):
    INIT = "init"
    LOADED = "loaded"
    POSTS_WRITTEN = "posts_written"
    FEEDS_WRITTEN = "feeds_written"
    HOMEPAGE_WRITTEN = "homepage_written"
    DONE = "done"
    FAILED = "failed"


class BuildError(SiteBuildError):
    """Raised when a site-level artifact (feed, homepage) cannot be written."""

    def __init__(self, stage: BuildStage, reason: str) -> None:
        super().__init__(f"Build failed before reaching {stage.value}: {reason}")
        self.stage = stage


class SiteBuilder:
    """Drives one build through its stages.

    Parameters
    ----------
    config:
        Resolved :class:`BuildConfig`.  Nothing below this class reads the
        environment.
    """

    def __init__(self, config: BuildConfig) -> None:
        self.config = config
        self.stage = BuildStage.INIT
        self.failed_stage: BuildStage | None = None
        self.posts: list[PostRecord] = []

    def _advance(self, stage: BuildStage) -> None:
        logger.debug("Build stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    async def load(self) -> list[PostRecord]:
        self.posts = await load_posts(self.config.posts_dir)
        logger.info("Found %d posts", len(self.posts))
        self._advance(BuildStage.LOADED)
        return self.posts

    async def write_posts(self) -> None:
        """Write all posts concurrently and wait for every writer to settle.

        The first failure in feed order is raised once all writers are done.
        """
        results = await asyncio.gather(
            *(write_post_artifacts(post, self.config) for post in self.posts),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.error("%d of %d post(s) failed to write", len(failures), len(self.posts))
            raise failures[0]
        self._advance(BuildStage.POSTS_WRITTEN)

    async def write_feeds(self) -> None:
        cfg = self.config
        blog_index = cfg.blog_dir / BLOG_INDEX
        atom_path = cfg.blog_dir / ATOM_FILENAME

        html_feed = assemble_html_feed(self.posts, cfg.hostname, cfg.blog_url)
        atom_feed = assemble_atom_feed(
            self.posts,
            cfg.atom_feed_url,
            cfg.base_url,
            blog_url=cfg.blog_url,
            title=cfg.display_title,
            author=cfg.display_author,
        )

        try:
            logger.info("Writing blog feed to %s", blog_index)
            await write_text(blog_index, html_feed)
            logger.info("Writing atom feed to %s", atom_path)
            await write_text(atom_path, atom_feed)
        except OSError as exc:
            raise BuildError(BuildStage.FEEDS_WRITTEN, str(exc)) from exc
        self._advance(BuildStage.FEEDS_WRITTEN)

    async def write_homepage(self) -> None:
        cfg = self.config
        output_path = cfg.output_dir / HOMEPAGE
        html = render_home_page(
            cfg.base_url, cfg.blog_url, cfg.atom_feed_url, cfg.display_title
        )
        logger.info("Writing homepage to %s", output_path)
        try:
            await write_text(output_path, html)
        except OSError as exc:
            raise BuildError(BuildStage.HOMEPAGE_WRITTEN, str(exc)) from exc
        self._advance(BuildStage.HOMEPAGE_WRITTEN)

    async def run(self) -> None:
        """Run every stage in order; on failure record it and re-raise."""
        cfg = self.config
        logger.info(
            "=== Building site: base_url=%s posts_dir=%s output_dir=%s blog_path=%s ===",
            cfg.base_url, cfg.posts_dir, cfg.output_dir, cfg.blog_path,
        )
        try:
            await self.load()
            await self.write_posts()
            await self.write_feeds()
            await self.write_homepage()
        except Exception:
            self.failed_stage = self.stage
            self.stage = BuildStage.FAILED
            logger.error("Build aborted after stage %s", self.failed_stage.value)
            raise
        self._advance(BuildStage.DONE)
        logger.info("=== Build complete: %d post(s) ===", len(self.posts))


async def run_build(config: BuildConfig) -> SiteBuilder:
    """Build the whole site described by *config*."""
    builder = SiteBuilder(config)
    await builder.run()
    return builder
