"""
Text rendering utilities package.
Modular components for sticker layout and drawing.
"""

from .emoji_handler import (
    GlyphFetchError,
    GlyphRun,
    TextRun,
    split_runs,
    ensure_svg_dimensions,
    get_emoji_svg_url,
    fetch_emoji_glyph,
)
from .language_support import contains_arabic, contains_cjk, process_arabic_text
from .text_fitting import (
    START_FONT_SIZE,
    MIN_FONT_SIZE,
    FONT_SIZE_STEP,
    MARGIN_FRACTION,
    LINE_HEIGHT_FACTOR,
    LineLayout,
    LayoutSolution,
    wrap_words_to_width,
    solve_layout,
)
from .line_renderer import PLACEHOLDER_GLYPH, render_line

__all__ = [
    # Emoji handling
    'GlyphFetchError',
    'GlyphRun',
    'TextRun',
    'split_runs',
    'ensure_svg_dimensions',
    'get_emoji_svg_url',
    'fetch_emoji_glyph',
    # Language support
    'contains_arabic',
    'contains_cjk',
    'process_arabic_text',
    # Text fitting
    'START_FONT_SIZE',
    'MIN_FONT_SIZE',
    'FONT_SIZE_STEP',
    'MARGIN_FRACTION',
    'LINE_HEIGHT_FACTOR',
    'LineLayout',
    'LayoutSolution',
    'wrap_words_to_width',
    'solve_layout',
    # Line drawing
    'PLACEHOLDER_GLYPH',
    'render_line',
]
