"""Open Graph preview image rasterizer."""

from __future__ import annotations

import io
import textwrap
from dataclasses import dataclass

from PIL import Image, ImageDraw, ImageFont

from content.post import PostRecord
from render.markup import format_date

WIDTH = 1200
HEIGHT = 630
MARGIN = 80

BACKGROUND = (24, 24, 27)
FOREGROUND = (244, 244, 245)
DIM = (161, 161, 170)

TITLE_SIZE = 72
FOOTER_SIZE = 36
TITLE_WRAP = 28  # characters per line at TITLE_SIZE
TITLE_MAX_LINES = 4


@dataclass(frozen=True)
class PreviewCard:
    """Everything drawn on a preview image."""

    title: str
    hostname: str
    subtitle: str = ""

    @classmethod
    def for_post(cls, post: PostRecord, hostname: str) -> PreviewCard:
        return cls(title=post.title, hostname=hostname, subtitle=format_date(post.created))


def _title_lines(title: str) -> list[str]:
    lines = textwrap.wrap(title, width=TITLE_WRAP) or [""]
    if len(lines) > TITLE_MAX_LINES:
        lines = lines[:TITLE_MAX_LINES]
        lines[-1] = lines[-1].rstrip(".,;: ") + "…"
    return lines


def render_og_image(card: PreviewCard) -> bytes:
    """Rasterize *card* to PNG bytes."""
    title_font = ImageFont.load_default(size=TITLE_SIZE)
    footer_font = ImageFont.load_default(size=FOOTER_SIZE)

    image = Image.new("RGB", (WIDTH, HEIGHT), BACKGROUND)
    draw = ImageDraw.Draw(image)

    y = MARGIN
    for line in _title_lines(card.title):
        draw.text((MARGIN, y), line, font=title_font, fill=FOREGROUND)
        y += int(TITLE_SIZE * 1.25)

    footer_y = HEIGHT - MARGIN - FOOTER_SIZE
    draw.text((MARGIN, footer_y), card.hostname, font=footer_font, fill=DIM)
    if card.subtitle:
        width = draw.textlength(card.subtitle, font=footer_font)
        draw.text(
            (WIDTH - MARGIN - width, footer_y),
            card.subtitle,
            font=footer_font,
            fill=DIM,
        )

    buf = io.BytesIO()
    image.save(buf, "PNG")
    return buf.getvalue()
