"""
Language support utilities for sticker rendering.
Handles Arabic shaping and CJK detection for plain-text runs.
"""

import re
import logging

import arabic_reshaper
from bidi.algorithm import get_display

_LOGGER = logging.getLogger(__name__)

# U+0600-U+06FF Arabic, U+0750-U+077F Supplement, U+08A0-U+08FF Extended-A,
# U+FB50-U+FDFF and U+FE70-U+FEFF Presentation Forms
ARABIC_PATTERN = re.compile(
    r"[\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF\uFB50-\uFDFF\uFE70-\uFEFF]"
)

# CJK Unified Ideographs (+ Extension A), Hiragana, Katakana, Hangul
CJK_PATTERN = re.compile(
    r"[\u4E00-\u9FFF\u3400-\u4DBF\u3040-\u309F\u30A0-\u30FF\uAC00-\uD7AF\u1100-\u11FF]"
)


def contains_arabic(text):
    """
    Check if text contains Arabic characters.

    :param text: Text to check
    :return: True if text contains Arabic characters
    """
    return bool(ARABIC_PATTERN.search(text))


def contains_cjk(text):
    """
    Check if text contains CJK (Chinese, Japanese, Korean) characters.

    :param text: Text to check
    :return: True if text contains CJK characters
    """
    return bool(CJK_PATTERN.search(text))


def process_arabic_text(text):
    """
    Reshape and reorder Arabic text so Pillow draws it left-to-right correctly.

    :param text: Text potentially containing Arabic
    :return: Processed text ready for drawing
    """
    if not contains_arabic(text):
        return text

    try:
        reshaped_text = arabic_reshaper.reshape(text)
        return get_display(reshaped_text)
    except Exception as e:
        _LOGGER.warning(f"Failed to process Arabic text: {e}")
        return text
