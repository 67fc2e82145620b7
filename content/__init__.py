"""Blog content: post records and the loader that discovers them."""

from content.loader import ContentParseError, load_posts
from content.post import PostRecord, parse_post

__all__ = ["PostRecord", "parse_post", "load_posts", "ContentParseError"]
