"""Tests for post parsing and the content loader."""

from __future__ import annotations

import asyncio
import textwrap
from datetime import datetime, timezone
from pathlib import Path

import pytest

from config import ConfigurationError
from content.loader import ContentParseError, discover_sources, load_posts, order_posts
from content.post import (
    PostRecord,
    parse_frontmatter,
    parse_post,
    parse_timestamp,
    slugify,
    summarize,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SAMPLE_MD = textwrap.dedent("""\
    ---
    title: Hello, World
    date: 2021-06-01
    ---
    # Intro

    This is the **first** paragraph with [a link](https://example.com).

    Second paragraph.
""")


def write_post(directory: Path, name: str, title: str, date: str, body: str = "Body.") -> Path:
    path = directory / name
    path.write_text(f"---\ntitle: {title}\ndate: {date}\n---\n{body}\n", encoding="utf-8")
    return path


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Frontmatter and field parsing
# ---------------------------------------------------------------------------

class TestParseFrontmatter:
    def test_valid_frontmatter(self):
        meta, body = parse_frontmatter(SAMPLE_MD)
        assert meta["title"] == "Hello, World"
        assert "first" in body

    def test_missing_frontmatter(self):
        with pytest.raises(ValueError, match="frontmatter"):
            parse_frontmatter("Just plain markdown.\n")

    def test_invalid_yaml(self):
        with pytest.raises(ValueError, match="YAML"):
            parse_frontmatter("---\ntitle: [unclosed\n---\nBody\n")

    def test_non_mapping(self):
        with pytest.raises(ValueError, match="mapping"):
            parse_frontmatter("---\n- a\n- b\n---\nBody\n")


class TestParseTimestamp:
    def test_yaml_date(self):
        from datetime import date

        assert parse_timestamp(date(2020, 1, 1)) == utc(2020, 1, 1)

    def test_naive_datetime_is_utc(self):
        assert parse_timestamp(datetime(2020, 1, 1, 12, 30)) == utc(2020, 1, 1, 12, 30)

    def test_iso_string_with_offset(self):
        assert parse_timestamp("2021-06-01T10:00:00+02:00") == utc(2021, 6, 1, 8)

    def test_unparseable(self):
        with pytest.raises(ValueError, match="unparseable"):
            parse_timestamp("last tuesday")

    def test_unsupported_type(self):
        with pytest.raises(ValueError):
            parse_timestamp(12345)


class TestSlugify:
    def test_basic(self):
        assert slugify("Hello World Post") == "hello-world-post"

    def test_special_characters(self):
        assert slugify("A & B: The (Remix)!") == "a-b-the-remix"

    def test_truncation(self):
        assert len(slugify("a" * 100)) <= 60


class TestSummarize:
    def test_skips_headings_and_strips_markup(self):
        assert summarize(SAMPLE_MD.split("---\n", 2)[2]) == (
            "This is the first paragraph with a link."
        )

    def test_truncates_long_paragraph(self):
        text = summarize("word " * 100)
        assert len(text) == 200
        assert text.endswith("…")

    def test_empty_body(self):
        assert summarize("") == ""


class TestParsePost:
    def test_basic_post(self):
        post = parse_post(SAMPLE_MD, "hello-world")
        assert post.slug == "hello-world"
        assert post.title == "Hello, World"
        assert post.created == utc(2021, 6, 1)
        assert post.description == "This is the first paragraph with a link."
        assert post.updated is None

    def test_output_paths(self):
        post = parse_post(SAMPLE_MD, "hello-world")
        assert post.relative_path == "hello-world/index.html"
        assert post.relative_og_image_path == "hello-world/og-image.png"

    def test_frontmatter_overrides(self):
        text = textwrap.dedent("""\
            ---
            title: Custom
            created: "2020-02-02T08:00:00Z"
            slug: My Custom Slug
            description: Hand written.
            updated: 2020-03-01
            ---
            Body.
        """)
        post = parse_post(text, "ignored")
        assert post.slug == "my-custom-slug"
        assert post.created == utc(2020, 2, 2, 8)
        assert post.updated == utc(2020, 3, 1)
        assert post.last_modified == utc(2020, 3, 1)
        assert post.description == "Hand written."

    def test_missing_title(self):
        with pytest.raises(ValueError, match="title"):
            parse_post("---\ndate: 2020-01-01\n---\nBody\n", "x")

    def test_missing_date(self):
        with pytest.raises(ValueError, match="date"):
            parse_post("---\ntitle: T\n---\nBody\n", "x")

    def test_record_is_immutable(self):
        post = parse_post(SAMPLE_MD, "hello")
        with pytest.raises(AttributeError):
            post.title = "changed"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

class TestDiscoverSources:
    def test_files_and_directories(self, tmp_path: Path):
        write_post(tmp_path, "b-post.md", "B", "2020-01-01")
        (tmp_path / "a-post").mkdir()
        write_post(tmp_path / "a-post", "index.md", "A", "2020-01-01")
        (tmp_path / ".DS_Store").write_text("")

        sources = discover_sources(tmp_path)
        assert [slug for _, slug in sources] == ["a-post", "b-post"]
        assert sources[0][0] == tmp_path / "a-post" / "index.md"

    def test_unsupported_entry(self, tmp_path: Path):
        (tmp_path / "notes.txt").write_text("hi")
        with pytest.raises(ContentParseError, match="notes.txt"):
            discover_sources(tmp_path)

    def test_directory_without_index(self, tmp_path: Path):
        (tmp_path / "draft").mkdir()
        with pytest.raises(ContentParseError, match="index.md"):
            discover_sources(tmp_path)

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(ConfigurationError):
            discover_sources(tmp_path / "nope")


class TestLoadPosts:
    def test_newest_first(self, tmp_path: Path):
        write_post(tmp_path, "a.md", "A", "2020-01-01")
        write_post(tmp_path, "b.md", "B", "2021-06-01")
        write_post(tmp_path, "c.md", "C", "2020-07-15")

        posts = asyncio.run(load_posts(tmp_path))
        assert [p.slug for p in posts] == ["b", "c", "a"]

    def test_ties_keep_discovery_order(self, tmp_path: Path):
        write_post(tmp_path, "zeta.md", "Z", "2020-01-01")
        write_post(tmp_path, "alpha.md", "A", "2020-01-01")
        write_post(tmp_path, "beta.md", "B", "2020-01-01")
        write_post(tmp_path, "newest.md", "N", "2022-01-01")

        first = asyncio.run(load_posts(tmp_path))
        second = asyncio.run(load_posts(tmp_path))
        assert [p.slug for p in first] == ["newest", "alpha", "beta", "zeta"]
        assert [p.slug for p in second] == [p.slug for p in first]

    def test_empty_directory(self, tmp_path: Path):
        assert asyncio.run(load_posts(tmp_path)) == []

    def test_bad_entry_aborts_load(self, tmp_path: Path):
        write_post(tmp_path, "a.md", "A", "2020-01-01")
        (tmp_path / "b.md").write_text("---\ntitle: Broken\n---\nNo date.\n")
        write_post(tmp_path, "c.md", "C", "2020-01-03")

        with pytest.raises(ContentParseError) as exc_info:
            asyncio.run(load_posts(tmp_path))
        assert exc_info.value.source == tmp_path / "b.md"
        assert "date" in str(exc_info.value)

    def test_duplicate_slug(self, tmp_path: Path):
        write_post(tmp_path, "a.md", "A", "2020-01-01")
        (tmp_path / "b.md").write_text("---\ntitle: B\ndate: 2020-01-02\nslug: a\n---\n")

        with pytest.raises(ContentParseError, match="already used"):
            asyncio.run(load_posts(tmp_path))

    @pytest.mark.asyncio
    async def test_source_path_recorded(self, tmp_path: Path):
        path = write_post(tmp_path, "a.md", "A", "2020-01-01")
        (post,) = await load_posts(tmp_path)
        assert isinstance(post, PostRecord)
        assert post.source_path == path


class TestOrderPosts:
    def test_stable_reverse_sort(self):
        def make(slug: str, day: int) -> PostRecord:
            return PostRecord(slug=slug, title=slug, created=utc(2020, 1, day), body="")

        posts = [make("x", 1), make("y", 2), make("z", 1), make("w", 2)]
        assert [p.slug for p in order_posts(posts)] == ["y", "w", "x", "z"]
