"""
Sticker generation: lays out a message on a square canvas, draws it with
inline emoji and encodes the result as a WebP sticker.
"""

import asyncio
import io
import logging
from dataclasses import dataclass, replace
from functools import partial

import aiohttp
from PIL import Image

from font_manager import get_sticker_font, measure_text, prepare_text
from text_rendering import (
    FONT_SIZE_STEP,
    LINE_HEIGHT_FACTOR,
    MARGIN_FRACTION,
    MIN_FONT_SIZE,
    START_FONT_SIZE,
    fetch_emoji_glyph,
    render_line,
    solve_layout,
)

_LOGGER = logging.getLogger(__name__)

STICKER_SIZE = 512
STICKER_FORMAT = "WEBP"
STICKER_MIME_TYPE = "image/webp"
BACKGROUND_COLOR = "#fff"


class StickerGenerationError(Exception):
    """Raised when a sticker could not be produced."""


@dataclass(frozen=True)
class StickerRequest:
    text: str
    width: int = STICKER_SIZE
    height: int = STICKER_SIZE
    margin_fraction: float = MARGIN_FRACTION
    start_font_size: int = START_FONT_SIZE
    min_font_size: int = MIN_FONT_SIZE
    font_size_step: int = FONT_SIZE_STEP
    line_height_factor: float = LINE_HEIGHT_FACTOR

    @property
    def margin(self):
        return self.width * self.margin_fraction


def encode_sticker(image, width, height):
    """
    Encode a rendered canvas as a WebP sticker of exactly width x height.

    :param image: PIL Image
    :param width: Output width in pixels
    :param height: Output height in pixels
    :return: WebP bytes
    """
    if image.size != (width, height):
        image = image.resize((width, height))
    buffer = io.BytesIO()
    image.save(buffer, format=STICKER_FORMAT)
    return buffer.getvalue()


async def draw_sticker(request, fetch_glyph, measure=measure_text, font_loader=get_sticker_font):
    """
    Lay out and draw the sticker text on a fresh canvas.

    :param request: StickerRequest
    :param fetch_glyph: async (emoji, size) -> RGBA PIL Image
    :param measure: Width-of-string-at-size function for the layout solver
    :param font_loader: (size, text) -> PIL ImageFont for drawing
    :return: (PIL Image, LayoutSolution), or (None, None) for blank text
    """
    # font discovery and measuring run off the event loop
    layout = await asyncio.to_thread(
        solve_layout,
        request.text,
        measure,
        canvas_width=request.width,
        canvas_height=request.height,
        margin_fraction=request.margin_fraction,
        start_font_size=request.start_font_size,
        min_font_size=request.min_font_size,
        step=request.font_size_step,
        line_height_factor=request.line_height_factor,
    )
    if layout is None:
        return None, None

    image = Image.new("RGB", (request.width, request.height), BACKGROUND_COLOR)

    margin = request.margin
    start_y = margin + layout.font_size
    for i, line in enumerate(layout.lines):
        y = start_y + i * layout.line_height
        await render_line(
            image,
            line.text,
            margin,
            y,
            layout.font_size,
            fetch_glyph,
            font_loader,
            prepare_text=prepare_text,
        )

    return image, layout


async def create_sticker(text, request=None, fetch_glyph=None, measure=measure_text, font_loader=get_sticker_font):
    """
    Render text as a square WebP sticker.

    Blank text is a no-op and returns None. Emoji that cannot be fetched are
    drawn as placeholders; any other failure is raised as
    StickerGenerationError.

    :param text: Sticker text, may contain emoji
    :param request: Optional StickerRequest overriding canvas and font parameters
    :param fetch_glyph: Optional async (emoji, size) -> RGBA image; Twemoji over HTTP by default
    :param measure: Width-of-string-at-size function for the layout solver
    :param font_loader: (size, text) -> PIL ImageFont for drawing
    :return: WebP bytes, or None for blank text
    """
    if not text or not text.strip():
        _LOGGER.info("Empty sticker text, nothing to render")
        return None

    if request is None:
        request = StickerRequest(text)
    elif request.text != text:
        request = replace(request, text=text)

    try:
        if fetch_glyph is None:
            async with aiohttp.ClientSession() as session:
                image, layout = await draw_sticker(
                    request, partial(fetch_emoji_glyph, session=session), measure, font_loader
                )
        else:
            image, layout = await draw_sticker(request, fetch_glyph, measure, font_loader)

        data = await asyncio.to_thread(encode_sticker, image, request.width, request.height)
    except Exception as e:
        _LOGGER.error(f"Error creating sticker: {e}")
        raise StickerGenerationError("Sticker generation failed") from e

    _LOGGER.info(
        f"Sticker created for text: {text[:50]}... "
        f"(Font size: {layout.font_size}px, {len(layout.lines)} lines, {len(data)} bytes)"
    )
    return data
