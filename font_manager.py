"""
Font Manager for sticker rendering

This module handles detection, download and loading of the bold condensed
font used to draw sticker text, plus a CJK-capable fallback for text runs
the main font cannot cover.
"""

import os
import platform
import urllib.request
import logging
from functools import lru_cache

from PIL import ImageFont

from text_rendering.language_support import contains_arabic, contains_cjk, process_arabic_text

_LOGGER = logging.getLogger(__name__)

# Open source bold condensed fonts, downloaded when no system font is present
STICKER_FONTS = {
    "RobotoCondensed": {
        "url": "https://github.com/google/fonts/raw/main/ofl/robotocondensed/RobotoCondensed%5Bwght%5D.ttf",
        "filename": "RobotoCondensed.ttf",
        "description": "Roboto Condensed (variable weight) - close match for Arial Narrow",
    },
    "ArchivoNarrow": {
        "url": "https://github.com/google/fonts/raw/main/ofl/archivonarrow/ArchivoNarrow%5Bwght%5D.ttf",
        "filename": "ArchivoNarrow.ttf",
        "description": "Archivo Narrow (variable weight)",
    },
}

CJK_FONTS = {
    "NotoSansSC": {
        "url": "https://github.com/google/fonts/raw/main/ofl/notosanssc/NotoSansSC%5Bwght%5D.ttf",
        "filename": "NotoSansSC.ttf",
        "description": "Noto Sans Simplified Chinese - comprehensive CJK support",
    },
}

# System font locations by platform
SYSTEM_FONT_PATHS = {
    "windows": ["C:/Windows/Fonts", os.path.expandvars("%WINDIR%/Fonts")],
    "linux": ["/usr/share/fonts/truetype", "/usr/share/fonts", "/usr/local/share/fonts", "~/.fonts"],
    "darwin": ["/Library/Fonts", "/System/Library/Fonts/Supplemental", "/System/Library/Fonts", "~/Library/Fonts"],
}

# Bold narrow faces, best match first
SYSTEM_STICKER_FONTS = [
    "ARIALNB.TTF",
    "arialnb.ttf",
    "Arial Narrow Bold.ttf",
    "Arial_Narrow_Bold.ttf",
    "LiberationSansNarrow-Bold.ttf",
    "DejaVuSansCondensed-Bold.ttf",
    "ARIALN.TTF",
    "arialn.ttf",
    "Arial Narrow.ttf",
    "LiberationSansNarrow-Regular.ttf",
    "arialbd.ttf",
    "Arial Bold.ttf",
    "LiberationSans-Bold.ttf",
    "DejaVuSans-Bold.ttf",
]

SYSTEM_CJK_FONTS = [
    "msyh.ttc",
    "simsun.ttc",
    "PingFang.ttc",
    "Hiragino Sans GB.ttc",
    "NotoSansCJK-Bold.ttc",
    "NotoSansCJK-Regular.ttc",
    "wqy-microhei.ttc",
    "DroidSansFallbackFull.ttf",
]


def get_fonts_directory():
    """Directory where downloaded fonts are stored (created on demand)."""
    fonts_dir = os.getenv("STICKER_FONTS_DIR") or os.path.join(os.path.dirname(__file__), "fonts")
    os.makedirs(fonts_dir, exist_ok=True)
    return fonts_dir


def _find_system_font(font_list, font_type="font"):
    """
    Generic function to find a font in system fonts.

    :param font_list: List of font filenames to search for, best first
    :param font_type: Type of font for logging purposes
    :return: Path to font file or None if not found
    """
    system = platform.system().lower()
    search_paths = SYSTEM_FONT_PATHS.get(system)
    if search_paths is None:
        _LOGGER.warning(f"Unknown platform: {system}")
        return None

    search_paths = [os.path.expanduser(p) for p in search_paths]

    for font_name in font_list:
        for search_path in search_paths:
            if not os.path.isdir(search_path):
                continue

            font_path = os.path.join(search_path, font_name)
            if os.path.exists(font_path):
                _LOGGER.info(f"Found system {font_type} font: {font_path}")
                return font_path

            # Linux distributions nest fonts in per-family folders
            for root, dirs, files in os.walk(search_path):
                if font_name in files:
                    font_path = os.path.join(root, font_name)
                    _LOGGER.info(f"Found system {font_type} font: {font_path}")
                    return font_path

    _LOGGER.debug(f"No system {font_type} font found")
    return None


def _find_downloaded_font(font_dict):
    fonts_dir = get_fonts_directory()
    for font_info in font_dict.values():
        local_path = os.path.join(fonts_dir, font_info["filename"])
        if os.path.exists(local_path):
            return local_path
    return None


def download_font(font_dict, font_name, fonts_dir=None):
    """
    Download a font from a font dictionary (STICKER_FONTS, CJK_FONTS).

    :param font_dict: Dictionary containing font information
    :param font_name: Name of the font to download
    :param fonts_dir: Directory to save fonts (default: ./fonts)
    :return: Path to downloaded font file or None if failed
    """
    if fonts_dir is None:
        fonts_dir = get_fonts_directory()

    if font_name not in font_dict:
        _LOGGER.error(f"Unknown font: {font_name}. Available fonts: {list(font_dict.keys())}")
        return None

    font_info = font_dict[font_name]
    font_path = os.path.join(fonts_dir, font_info["filename"])

    if os.path.exists(font_path):
        _LOGGER.info(f"Font already exists: {font_path}")
        return font_path

    try:
        _LOGGER.info(f"Downloading {font_name} font ({font_info['description']})")
        _LOGGER.info(f"  URL: {font_info['url']}")
        urllib.request.urlretrieve(font_info["url"], font_path)
        _LOGGER.info(f"✓ Successfully downloaded: {font_path}")
        return font_path
    except Exception as e:
        _LOGGER.error(f"Failed to download font {font_name}: {e}")
        return None


def download_sticker_font(font_name="RobotoCondensed", fonts_dir=None):
    return download_font(STICKER_FONTS, font_name, fonts_dir)


def download_cjk_font(font_name="NotoSansSC", fonts_dir=None):
    return download_font(CJK_FONTS, font_name, fonts_dir)


@lru_cache(maxsize=None)
def find_sticker_font_path():
    """
    Locate the bold condensed sticker font.

    Strategies, in order:
    1. STICKER_FONT_PATH environment variable
    2. System fonts (Arial Narrow Bold, Liberation Sans Narrow Bold, ...)
    3. Fonts previously downloaded into ./fonts

    :return: Path to font file or None (Pillow's default font is used then)
    """
    env_path = os.getenv("STICKER_FONT_PATH")
    if env_path:
        if os.path.exists(env_path):
            return env_path
        _LOGGER.warning(f"STICKER_FONT_PATH does not exist: {env_path}")

    font_path = _find_system_font(SYSTEM_STICKER_FONTS, "sticker") or _find_downloaded_font(STICKER_FONTS)
    if not font_path:
        _LOGGER.warning(
            "No bold condensed font found, falling back to Pillow's default font. "
            "Run download_sticker_fonts.py to fetch one."
        )
    return font_path


@lru_cache(maxsize=None)
def find_cjk_font_path():
    return _find_system_font(SYSTEM_CJK_FONTS, "CJK") or _find_downloaded_font(CJK_FONTS)


BOLD_WEIGHT = 700


def _set_bold_weight(font):
    """Move the weight axis of a variable font to bold; static fonts are left alone."""
    try:
        axes = font.get_variation_axes()
    except OSError:
        return
    values = []
    for axis in axes:
        name = axis.get("name")
        if name in (b"Weight", "Weight"):
            values.append(min(max(BOLD_WEIGHT, axis["minimum"]), axis["maximum"]))
        else:
            values.append(axis["default"])
    font.set_variation_by_axes(values)


@lru_cache(maxsize=256)
def _load_font(font_path, size):
    if font_path is None:
        return ImageFont.load_default(size=size)
    font = ImageFont.truetype(font_path, size)
    _set_bold_weight(font)
    return font


def get_sticker_font(size, text=""):
    """
    Get the font used to draw sticker text at a given pixel size.

    CJK text gets a CJK-capable font when one is installed or downloaded.

    :param size: Font size in pixels
    :param text: Text that will be drawn with the font
    :return: PIL ImageFont
    """
    font_path = find_sticker_font_path()
    if text and contains_cjk(text):
        font_path = find_cjk_font_path() or font_path
    return _load_font(font_path, int(size))


def prepare_text(text):
    """Apply script-specific shaping (Arabic) before drawing or measuring."""
    if contains_arabic(text):
        return process_arabic_text(text)
    return text


def measure_text(text, size):
    """
    Width in pixels of text drawn with the sticker font.

    :param text: Text to measure
    :param size: Font size in pixels
    :return: Advance width in pixels
    """
    if not text:
        return 0.0
    return get_sticker_font(size, text).getlength(prepare_text(text))
