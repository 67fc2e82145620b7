"""Page and preview-image renderers used by the build."""

from render.markup import render_home_page, render_page, render_post_page
from render.og_image import PreviewCard, render_og_image

__all__ = [
    "render_page",
    "render_post_page",
    "render_home_page",
    "PreviewCard",
    "render_og_image",
]
