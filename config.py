"""Centralized build configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from errors import SiteBuildError

DEFAULT_BASE_URL = "https://shreyb.dev"


class ConfigurationError(SiteBuildError):
    """Raised when the build cannot start from the given configuration."""


@dataclass(frozen=True)
class BuildConfig:
    """Resolved run parameters with sensible defaults.

    Built once at the entry point and passed to every component.  The base
    URL is validated at construction time so a malformed value fails before
    anything is rendered.
    """

    # --- Site ---
    base_url: str = DEFAULT_BASE_URL
    site_title: str = ""
    author: str = ""

    # --- Paths ---
    posts_dir: Path = field(default_factory=lambda: Path("posts"))
    output_dir: Path = field(default_factory=lambda: Path("_site"))
    blog_path: str = "/blog/"

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        object.__setattr__(self, "posts_dir", Path(self.posts_dir))
        object.__setattr__(self, "output_dir", Path(self.output_dir))

        segments = [s for s in self.blog_path.split("/") if s]
        if not segments:
            raise ConfigurationError(
                "BLOG_PATH must name a sub-path; the output root holds the homepage"
            )
        if any(s in (".", "..") for s in segments):
            raise ConfigurationError(
                f"BLOG_PATH must stay inside the output directory, got {self.blog_path!r}"
            )
        object.__setattr__(self, "blog_path", "/" + "/".join(segments) + "/")

        # Parse eagerly so a bad base URL aborts before any writes
        self._parsed_base_url()

    @classmethod
    def from_env(cls) -> BuildConfig:
        """Build config from environment variables."""
        return cls(
            base_url=os.getenv("BASE_URL", DEFAULT_BASE_URL),
            site_title=os.getenv("SITE_TITLE", ""),
            author=os.getenv("AUTHOR", ""),
            posts_dir=Path(os.getenv("POSTS_DIR", "posts")),
            output_dir=Path(os.getenv("OUTPUT_DIR", "_site")),
            blog_path=os.getenv("BLOG_PATH", "/blog/"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def _parsed_base_url(self) -> httpx.URL:
        try:
            url = httpx.URL(self.base_url)
        except httpx.InvalidURL as exc:
            raise ConfigurationError(
                f"Malformed BASE_URL {self.base_url!r}: {exc}"
            ) from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(
                f"BASE_URL must be an absolute http(s) URL, got {self.base_url!r}"
            )
        return url

    @property
    def hostname(self) -> str:
        return self._parsed_base_url().host

    @property
    def blog_url(self) -> str:
        """Absolute URL of the blog root, always ending in a slash."""
        return str(self._parsed_base_url().join(self.blog_path))

    @property
    def atom_feed_url(self) -> str:
        return str(httpx.URL(self.blog_url).join("atom.xml"))

    @property
    def blog_dir(self) -> Path:
        return self.output_dir / self.blog_path.strip("/")

    @property
    def display_title(self) -> str:
        return self.site_title or self.hostname

    @property
    def display_author(self) -> str:
        return self.author or self.hostname
