"""Feed assembly: the blog index page and the Atom feed.

Both take the already-ordered post list and emit entries in exactly that
order, so readers of either feed see the same sequence.
"""

from __future__ import annotations

from datetime import datetime, timezone
from html import escape
from xml.sax.saxutils import escape as xml_escape

from content.post import PostRecord
from render.markup import absolute_url, format_date, md_to_html, post_url, render_page

ATOM_NS = "http://www.w3.org/2005/Atom"
GENERATOR = "sitegen"


def _attr(value: str) -> str:
    return xml_escape(value, {'"': "&quot;"})


def atom_timestamp(value: datetime) -> str:
    """RFC 3339 timestamp in UTC, as Atom requires."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


# ---------------------------------------------------------------------------
# HTML feed
# ---------------------------------------------------------------------------

def _html_entry(post: PostRecord, blog_url: str) -> str:
    description = (
        f'\n    <p class="description">{escape(post.description)}</p>'
        if post.description else ""
    )
    return f"""\
  <li class="post">
    <a href="{escape(post_url(post, blog_url))}">{escape(post.title)}</a>
    <time datetime="{post.created.isoformat()}">{format_date(post.created)}</time>{description}
  </li>"""


def assemble_html_feed(posts: list[PostRecord], hostname: str, blog_url: str) -> str:
    """Render the blog index listing *posts* in the given order."""
    if posts:
        entries = "\n".join(_html_entry(p, blog_url) for p in posts)
        listing = f'<ul class="posts">\n{entries}\n</ul>'
    else:
        listing = '<ul class="posts"></ul>\n<p class="empty">No posts yet.</p>'

    content = f"<h1>Blog</h1>\n{listing}"
    return render_page(
        f"Blog | {hostname}",
        content,
        canonical_url=blog_url,
        feed_url=absolute_url(blog_url, "atom.xml"),
        nav=((hostname, absolute_url(blog_url, "/")),),
    )


# ---------------------------------------------------------------------------
# Atom feed
# ---------------------------------------------------------------------------

def build_atom_entry(post: PostRecord, blog_url: str) -> str:
    """Generate one Atom <entry> element."""
    link = post_url(post, blog_url)
    content_html = md_to_html(post.body)
    return f"""\
  <entry>
    <id>{xml_escape(link)}</id>
    <title>{xml_escape(post.title)}</title>
    <link rel="alternate" type="text/html" href="{_attr(link)}"/>
    <published>{atom_timestamp(post.created)}</published>
    <updated>{atom_timestamp(post.last_modified)}</updated>
    <summary>{xml_escape(post.description)}</summary>
    <content type="html">{xml_escape(content_html)}</content>
  </entry>"""


def assemble_atom_feed(
    posts: list[PostRecord],
    feed_url: str,
    base_url: str,
    *,
    blog_url: str | None = None,
    title: str = "",
    author: str = "",
    now: datetime | None = None,
) -> str:
    """Render an Atom 1.0 document for *posts*, newest-first.

    Parameters
    ----------
    feed_url:
        Absolute URL the feed is served from (``rel="self"``).
    base_url:
        Site root; used for the alternate link when *blog_url* is not given.
    now:
        ``updated`` value for an empty feed.  Defaults to the current time.
    """
    site_link = blog_url or base_url
    if posts:
        updated = max(p.last_modified for p in posts)
    else:
        updated = now or datetime.now(timezone.utc)

    feed_title = title or base_url
    feed_author = author or feed_title
    entries = "".join("\n" + build_atom_entry(p, site_link) for p in posts)

    return f"""\
<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="{ATOM_NS}">
  <id>{xml_escape(site_link)}</id>
  <title>{xml_escape(feed_title)}</title>
  <updated>{atom_timestamp(updated)}</updated>
  <link rel="self" type="application/atom+xml" href="{_attr(feed_url)}"/>
  <link rel="alternate" type="text/html" href="{_attr(site_link)}"/>
  <author>
    <name>{xml_escape(feed_author)}</name>
  </author>
  <generator>{GENERATOR}</generator>{entries}
</feed>
"""
