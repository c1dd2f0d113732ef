"""
Text fitting and font sizing utilities for sticker generation.
Finds the largest font size at which the words of a message can be greedily
wrapped into the usable area of a square canvas.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

_LOGGER = logging.getLogger(__name__)

# Constants
START_FONT_SIZE = 120
MIN_FONT_SIZE = 10
FONT_SIZE_STEP = 2
MARGIN_FRACTION = 0.05
LINE_HEIGHT_FACTOR = 1.2

# (text, font_size) -> width in pixels
MeasureFunc = Callable[[str, int], float]


@dataclass(frozen=True)
class LineLayout:
    words: Tuple[str, ...]
    width: float

    @property
    def text(self) -> str:
        return " ".join(self.words)


@dataclass(frozen=True)
class LayoutSolution:
    font_size: int
    lines: Tuple[LineLayout, ...]
    line_height: float
    overflow: bool = False

    @property
    def total_height(self) -> float:
        return len(self.lines) * self.line_height

    @property
    def words(self) -> Tuple[str, ...]:
        return tuple(word for line in self.lines for word in line.words)


def usable_extent(size: float, margin_fraction: float) -> float:
    """Canvas dimension minus the margin on both sides."""
    return size * (1 - 2 * margin_fraction)


def wrap_words_to_width(
    words: Sequence[str],
    max_width: float,
    font_size: int,
    measure: MeasureFunc,
    reject_oversized_words: bool = True,
) -> Optional[Tuple[LineLayout, ...]]:
    """
    Greedily pack words into lines no wider than max_width.

    Each word placed on a line adds its own width plus one space to the
    line's running width. A word starts a new line only when the current
    line already holds something and the word would push it past max_width.
    Words are never broken.

    :param words: Words in reading order
    :param max_width: Usable width in pixels
    :param font_size: Font size used for measuring
    :param measure: Width-of-string-at-size function
    :param reject_oversized_words: Give up (return None) when a single word is wider than max_width
    :return: Tuple of LineLayout, or None when a word does not fit on its own
    """
    space_width = measure(" ", font_size)
    lines = []
    current_line = []
    current_width = 0.0

    for word in words:
        word_width = measure(word, font_size)

        if reject_oversized_words and word_width > max_width:
            _LOGGER.debug(f"  Font size {font_size}px: word {word!r} is {word_width:.1f}px wide - TOO LARGE")
            return None

        if not current_line or current_width + word_width <= max_width:
            current_line.append(word)
            current_width += word_width + space_width
        else:
            lines.append(LineLayout(tuple(current_line), current_width - space_width))
            current_line = [word]
            current_width = word_width + space_width

    if current_line:
        lines.append(LineLayout(tuple(current_line), current_width - space_width))

    return tuple(lines)


def solve_layout(
    text: str,
    measure: MeasureFunc,
    canvas_width: int = 512,
    canvas_height: int = 512,
    margin_fraction: float = MARGIN_FRACTION,
    start_font_size: int = START_FONT_SIZE,
    min_font_size: int = MIN_FONT_SIZE,
    step: int = FONT_SIZE_STEP,
    line_height_factor: float = LINE_HEIGHT_FACTOR,
) -> Optional[LayoutSolution]:
    """
    Find the largest font size at which the whole text fits the canvas.

    Sizes are tried from start_font_size downwards in steps of `step` while
    they stay above min_font_size; the first size where every word fits the
    usable width and the wrapped block fits the usable height wins. When no
    size qualifies, the text is wrapped at min_font_size and returned even if
    it overflows the canvas.

    :param text: Message to lay out
    :param measure: Width-of-string-at-size function
    :param canvas_width: Canvas width in pixels
    :param canvas_height: Canvas height in pixels
    :param margin_fraction: Margin on each side, as a fraction of the canvas size
    :param start_font_size: Largest font size to try
    :param min_font_size: Fallback font size
    :param step: Decrement between tried sizes
    :param line_height_factor: Line height as a multiple of the font size
    :return: LayoutSolution, or None for empty/whitespace-only text
    """
    words = text.split()
    if not words:
        return None

    if step <= 0:
        raise ValueError(f"Font size step must be positive, got {step}")

    max_width = usable_extent(canvas_width, margin_fraction)
    max_height = usable_extent(canvas_height, margin_fraction)

    font_size = start_font_size
    while font_size > min_font_size:
        lines = wrap_words_to_width(words, max_width, font_size, measure)
        if lines is not None:
            line_height = font_size * line_height_factor
            total_height = len(lines) * line_height
            if total_height <= max_height:
                _LOGGER.debug(f"  Font size {font_size}px: {len(lines)} lines, height={total_height:.1f}px - FITS")
                return LayoutSolution(font_size, lines, line_height)
            _LOGGER.debug(f"  Font size {font_size}px: {len(lines)} lines, height={total_height:.1f}px - TOO LARGE")
        font_size -= step

    lines = wrap_words_to_width(words, max_width, min_font_size, measure, reject_oversized_words=False)
    line_height = min_font_size * line_height_factor
    overflow = len(lines) * line_height > max_height or any(line.width > max_width for line in lines)
    if overflow:
        _LOGGER.warning(
            f"Text does not fit the canvas even at {min_font_size}px "
            f"({len(words)} words, {len(lines)} lines); rendering with overflow"
        )
    return LayoutSolution(min_font_size, lines, line_height, overflow)
