"""HTML renderers for site pages.

Pure functions of their arguments: no filesystem access, so the build
decides where the markup ends up.
"""

from __future__ import annotations

from datetime import datetime
from html import escape

import httpx
import markdown

from content.post import PostRecord

# Markdown extensions for richer HTML output
_MD = markdown.Markdown(extensions=["extra", "smarty", "toc"])


def md_to_html(body: str) -> str:
    """Convert a Markdown string to HTML."""
    _MD.reset()
    return _MD.convert(body)


def absolute_url(base: str, relative: str) -> str:
    return str(httpx.URL(base).join(relative))


def post_url(post: PostRecord, blog_url: str) -> str:
    return absolute_url(blog_url, post.relative_path)


def og_image_url(post: PostRecord, blog_url: str) -> str:
    return absolute_url(blog_url, post.relative_og_image_path)


def format_date(value: datetime) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def render_page(
    title: str,
    content_html: str,
    *,
    canonical_url: str,
    description: str = "",
    og_image: str | None = None,
    feed_url: str | None = None,
    nav: tuple[tuple[str, str], ...] = (),
) -> str:
    """Wrap *content_html* in the shared page chrome.

    *nav* is a sequence of ``(label, href)`` pairs rendered in the header.
    """
    meta = [
        f'<meta name="description" content="{escape(description)}">' if description else "",
        f'<meta property="og:title" content="{escape(title)}">',
        f'<meta property="og:url" content="{escape(canonical_url)}">',
        f'<meta property="og:description" content="{escape(description)}">' if description else "",
        f'<meta property="og:image" content="{escape(og_image)}">' if og_image else "",
        '<meta name="twitter:card" content="summary_large_image">' if og_image else "",
        (
            f'<link rel="alternate" type="application/atom+xml" href="{escape(feed_url)}">'
            if feed_url else ""
        ),
    ]
    head_extra = "\n    ".join(m for m in meta if m)
    nav_html = " ".join(
        f'<a href="{escape(href)}">{escape(label)}</a>' for label, href in nav
    )

    return f"""\
<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{escape(title)}</title>
    <link rel="canonical" href="{escape(canonical_url)}">
    {head_extra}
  </head>
  <body>
    <header><nav>{nav_html}</nav></header>
    <main>
{content_html}
    </main>
  </body>
</html>
"""


def render_post_page(post: PostRecord, hostname: str, blog_url: str) -> str:
    """Render the full HTML page for one post."""
    created = post.created
    body_html = md_to_html(post.body)
    content = f"""\
<article class="blog-post">
  <header>
    <h1>{escape(post.title)}</h1>
    <div class="meta">
      <time datetime="{created.isoformat()}">{format_date(created)}</time>
    </div>
  </header>
  <div class="content">
{body_html}
  </div>
</article>"""

    return render_page(
        f"{post.title} | {hostname}",
        content,
        canonical_url=post_url(post, blog_url),
        description=post.description,
        og_image=og_image_url(post, blog_url),
        feed_url=absolute_url(blog_url, "atom.xml"),
        nav=((hostname, absolute_url(blog_url, "/")), ("Blog", blog_url)),
    )


def render_home_page(base_url: str, blog_url: str, atom_feed_url: str, title: str) -> str:
    content = f"""\
<section class="home">
  <h1>{escape(title)}</h1>
  <ul class="links">
    <li><a href="{escape(blog_url)}">Blog</a></li>
    <li><a href="{escape(atom_feed_url)}">Atom feed</a></li>
  </ul>
</section>"""

    return render_page(
        title,
        content,
        canonical_url=base_url,
        feed_url=atom_feed_url,
        nav=(("Blog", blog_url),),
    )
