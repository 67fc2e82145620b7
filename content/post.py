"""Post records and the Markdown + YAML frontmatter source format."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Any

import yaml

PAGE_FILENAME = "index.html"
OG_IMAGE_FILENAME = "og-image.png"
DESCRIPTION_MAX_LEN = 200

_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n?(.*)$", re.DOTALL)
_LINK_RE = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")


@dataclass(frozen=True)
class PostRecord:
    """One blog post, immutable once loaded."""

    slug: str
    title: str
    created: datetime
    body: str
    description: str = ""
    updated: datetime | None = None
    source_path: Path | None = None

    @property
    def relative_path(self) -> str:
        """Page path relative to the blog root."""
        return f"{self.slug}/{PAGE_FILENAME}"

    @property
    def relative_og_image_path(self) -> str:
        return f"{self.slug}/{OG_IMAGE_FILENAME}"

    @property
    def last_modified(self) -> datetime:
        return self.updated or self.created


def slugify(text: str) -> str:
    """Generate a URL-safe slug from a title or file name."""
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_]+", "-", slug)
    return slug[:60].strip("-")


def parse_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split YAML frontmatter from Markdown body.

    Expected format:
        ---
        title: ...
        date: 2021-06-01
        ---
        Body text here.

    Raises ``ValueError`` when the frontmatter block is missing or is not a
    mapping.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        raise ValueError("missing '---' frontmatter block")
    try:
        meta = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML frontmatter: {exc}") from exc
    if not isinstance(meta, dict):
        raise ValueError("frontmatter must be a mapping")
    return meta, match.group(2)


def parse_timestamp(value: Any) -> datetime:
    """Coerce a frontmatter date value to an aware UTC datetime.

    YAML already turns unquoted dates into ``date``/``datetime`` objects;
    quoted values go through ``datetime.fromisoformat``.  Naive values are
    taken to be UTC so every timestamp compares with every other.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValueError(f"unparseable date {value!r}") from exc
    else:
        raise ValueError(f"unsupported date value {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def summarize(body: str) -> str:
    """Return the first prose paragraph of *body* as plain text."""
    for block in re.split(r"\n\s*\n", body.strip()):
        block = block.strip()
        if not block or block.startswith(("#", "```", "<", "|", "---")):
            continue
        text = _LINK_RE.sub(r"\1", block)
        text = re.sub(r"[*_`>]", "", text)
        text = " ".join(text.split())
        if len(text) > DESCRIPTION_MAX_LEN:
            text = text[: DESCRIPTION_MAX_LEN - 1].rstrip() + "…"
        return text
    return ""


def parse_post(text: str, default_slug: str, source_path: Path | None = None) -> PostRecord:
    """Build a :class:`PostRecord` from the raw text of one content source.

    *default_slug* is used when the frontmatter does not set ``slug``.
    Raises ``ValueError`` describing the first problem found.
    """
    meta, body = parse_frontmatter(text)

    title = str(meta.get("title") or "").strip()
    if not title:
        raise ValueError("frontmatter is missing 'title'")

    raw_created = meta.get("date", meta.get("created"))
    if raw_created is None:
        raise ValueError("frontmatter is missing 'date'")
    created = parse_timestamp(raw_created)

    updated = None
    if meta.get("updated") is not None:
        updated = parse_timestamp(meta["updated"])

    slug = slugify(str(meta.get("slug") or default_slug))
    if not slug:
        raise ValueError("could not derive a slug")

    description = str(meta.get("description") or meta.get("summary") or "").strip()
    if not description:
        description = summarize(body)

    return PostRecord(
        slug=slug,
        title=title,
        created=created,
        body=body,
        description=description,
        updated=updated,
        source_path=source_path,
    )
