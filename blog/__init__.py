"""Blog output: per-post artifacts and feeds."""

from blog.feed import assemble_atom_feed, assemble_html_feed
from blog.writer import ArtifactWriteError, write_post_artifacts

__all__ = [
    "write_post_artifacts",
    "ArtifactWriteError",
    "assemble_html_feed",
    "assemble_atom_feed",
]
