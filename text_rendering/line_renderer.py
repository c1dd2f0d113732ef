"""
Draws one line of mixed text and emoji onto a Pillow image.
"""

import logging

from PIL import ImageDraw

from .emoji_handler import GlyphRun, split_runs

_LOGGER = logging.getLogger(__name__)

TEXT_COLOR = "#000"
PLACEHOLDER_GLYPH = "□"

# Emoji geometry relative to the font size
EMOJI_SCALE = 0.9
EMOJI_RISE = 0.7
EMOJI_ADVANCE = 0.8


def _draw_text(draw, text, x, y, font_size, font_loader, prepare=None):
    """Draw text with its left baseline at (x, y) and return its advance width."""
    font = font_loader(font_size, text)
    if prepare is not None:
        text = prepare(text)
    draw.text((x, y), text, font=font, fill=TEXT_COLOR, anchor="ls")
    return font.getlength(text)


async def render_line(image, line_text, x, y, font_size, fetch_glyph, font_loader, prepare_text=None):
    """
    Render a line of text with inline emoji images, left to right.

    Text runs are drawn with the sticker font on the baseline y. Each emoji
    run is fetched, scaled to 0.9 x font_size and lifted by 0.7 x font_size
    so it sits on the visual centre of the text. A glyph that cannot be
    fetched is replaced by a placeholder box and the line carries on.

    Runs are handled strictly in order since each advance depends on the
    previous run's rendered size.

    :param image: PIL Image to draw on
    :param line_text: Line content
    :param x: Starting cursor position
    :param y: Text baseline
    :param font_size: Font size in pixels
    :param fetch_glyph: async (emoji, size) -> RGBA PIL Image
    :param font_loader: (size, text) -> PIL ImageFont
    :param prepare_text: Optional shaping applied to text runs before drawing
    :return: Final cursor x position
    """
    draw = ImageDraw.Draw(image)
    cursor_x = x

    for run in split_runs(line_text):
        if not isinstance(run, GlyphRun):
            cursor_x += _draw_text(draw, run.text, cursor_x, y, font_size, font_loader, prepare_text)
            continue

        emoji_size = round(font_size * EMOJI_SCALE)
        try:
            glyph = await fetch_glyph(run.text, emoji_size)
            if glyph.size != (emoji_size, emoji_size):
                glyph = glyph.resize((emoji_size, emoji_size))
            glyph = glyph.convert("RGBA")
            emoji_y = y - font_size * EMOJI_RISE
            image.paste(glyph, (round(cursor_x), round(emoji_y)), glyph)
            cursor_x += emoji_size * EMOJI_ADVANCE
        except Exception as e:
            _LOGGER.warning(f"Could not render emoji {run.text!r}, using placeholder: {e}")
            _draw_text(draw, PLACEHOLDER_GLYPH, cursor_x, y, font_size, font_loader)
            cursor_x += font_size * EMOJI_ADVANCE

    return cursor_x
