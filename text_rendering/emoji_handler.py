"""
Emoji handling utilities for sticker generation.
Provides emoji run detection and Twemoji SVG fetching/rasterization.
"""

import asyncio
import io
import os
import re
import logging
from dataclasses import dataclass

import emoji
from PIL import Image

_LOGGER = logging.getLogger(__name__)

# Twemoji SVG assets (MIT code, CC BY 4.0 graphics)
TWEMOJI_BASE_URL = os.getenv(
    "TWEMOJI_BASE_URL", "https://cdn.jsdelivr.net/gh/twitter/twemoji@14.0.2/assets/svg"
)

VARIATION_SELECTOR_16 = "\ufe0f"
ZERO_WIDTH_JOINER = "\u200d"

SVG_ROOT_TAG = re.compile(r"<svg\b[^>]*>")
SVG_SIZE_ATTRIBUTE = re.compile(r"\s(?:width|height)\s*=")


class GlyphFetchError(Exception):
    """Raised when an emoji glyph cannot be downloaded or decoded."""


@dataclass(frozen=True)
class TextRun:
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class GlyphRun:
    text: str
    start: int
    end: int


def split_runs(text):
    """
    Split a line into alternating plain-text and emoji runs.

    Every character of the input ends up in exactly one run, in the original
    order, so joining the run texts gives back the input.

    :param text: Line of text, possibly containing emoji
    :return: List of TextRun / GlyphRun
    """
    runs = []
    position = 0
    for item in emoji.emoji_list(text):
        start = item["match_start"]
        end = item["match_end"]
        if start < position:
            # variation selector already absorbed by the previous glyph
            continue

        # A trailing U+FE0F belongs to the emoji it decorates
        if end < len(text) and text[end] == VARIATION_SELECTOR_16:
            end += 1

        if start > position:
            runs.append(TextRun(text[position:start], position, start))
        runs.append(GlyphRun(text[start:end], start, end))
        position = end

    if position < len(text):
        runs.append(TextRun(text[position:], position, len(text)))
    return runs


def twemoji_codepoint(emoji_char):
    """
    Build the Twemoji asset name for an emoji sequence, e.g. '1f600' or
    '1f468-200d-1f4bb'.

    Twemoji drops U+FE0F from the filename unless the sequence is joined
    with a ZWJ.
    """
    if ZERO_WIDTH_JOINER not in emoji_char:
        emoji_char = emoji_char.replace(VARIATION_SELECTOR_16, "")
    return "-".join(f"{ord(c):x}" for c in emoji_char)


def get_emoji_svg_url(emoji_char):
    return f"{TWEMOJI_BASE_URL}/{twemoji_codepoint(emoji_char)}.svg"


def ensure_svg_dimensions(svg_string, size):
    """
    Inject explicit pixel width/height into the root <svg> tag.

    Twemoji assets only carry a viewBox, which leaves the rasterizer without
    an intrinsic size. Markup whose root tag already declares a width or
    height is returned unchanged; attributes of child elements such as
    stroke-width do not count.

    :param svg_string: SVG markup
    :param size: Width and height in pixels
    :return: SVG markup with explicit dimensions
    """
    root = SVG_ROOT_TAG.search(svg_string)
    if root is None or SVG_SIZE_ATTRIBUTE.search(root.group(0)):
        return svg_string
    start = root.start() + len("<svg")
    return f'{svg_string[:start]} width="{size}" height="{size}"{svg_string[start:]}'


def rasterize_svg(svg_string, size):
    """
    Render SVG markup to a square RGBA image.

    :param svg_string: SVG markup
    :param size: Output width and height in pixels
    :return: PIL Image in RGBA mode
    """
    import cairosvg

    png_bytes = cairosvg.svg2png(
        bytestring=svg_string.encode("utf-8"),
        output_width=size,
        output_height=size,
    )
    return Image.open(io.BytesIO(png_bytes)).convert("RGBA")


async def fetch_emoji_glyph(emoji_char, size, session):
    """
    Download the Twemoji SVG for an emoji and rasterize it.

    One attempt per call: no retry, no cache.

    :param emoji_char: Emoji sequence as found in the text
    :param size: Glyph size in pixels
    :param session: aiohttp.ClientSession used for the request
    :return: PIL Image (RGBA, size x size)
    :raises GlyphFetchError: on HTTP, network or decode failure
    """
    url = get_emoji_svg_url(emoji_char)
    _LOGGER.debug("Fetching emoji %s from %s", emoji_char, url)
    try:
        async with session.get(url) as response:
            if response.status != 200:
                raise GlyphFetchError(f"HTTP {response.status} for {url}")
            svg_string = await response.text()
    except GlyphFetchError:
        raise
    except Exception as e:
        raise GlyphFetchError(f"Could not download emoji {emoji_char}: {e}") from e

    svg_string = ensure_svg_dimensions(svg_string, size)
    try:
        return await asyncio.to_thread(rasterize_svg, svg_string, size)
    except Exception as e:
        raise GlyphFetchError(f"Could not decode emoji {emoji_char}: {e}") from e
