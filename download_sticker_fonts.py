#!/usr/bin/env python3
"""
Script to download the open source sticker fonts and save them locally.
This gives consistent sticker rendering on hosts without Arial Narrow.
"""

import argparse
import logging

from font_manager import (
    CJK_FONTS,
    STICKER_FONTS,
    download_cjk_font,
    download_sticker_font,
    get_fonts_directory,
)


def main():
    parser = argparse.ArgumentParser(description="Download fonts used for sticker rendering")
    parser.add_argument("--fonts-dir", help="Target directory (default: ./fonts)")
    parser.add_argument("--with-cjk", action="store_true", help="Also download a CJK font (large)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    fonts_dir = args.fonts_dir or get_fonts_directory()
    print(f"Downloading sticker fonts to: {fonts_dir}")

    wanted = [(download_sticker_font, name) for name in STICKER_FONTS]
    if args.with_cjk:
        wanted += [(download_cjk_font, name) for name in CJK_FONTS]

    success_count = 0
    for download, name in wanted:
        if download(name, fonts_dir):
            success_count += 1

    print(f"\nDownload complete: {success_count}/{len(wanted)} fonts downloaded successfully")
    return 0 if success_count == len(wanted) else 1


if __name__ == "__main__":
    raise SystemExit(main())
