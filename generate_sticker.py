#!/usr/bin/env python3
"""
Render a text sticker to a WebP file.

Example:
    python generate_sticker.py "Halo dunia 👋" -o halo.webp
"""

import argparse
import asyncio
import logging
import sys

from sticker_generator import STICKER_SIZE, StickerGenerationError, StickerRequest, create_sticker


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render text (with emoji) as a square WebP sticker")
    parser.add_argument("text", help="Sticker text")
    parser.add_argument("-o", "--output", default="sticker.webp", help="Output file (default: sticker.webp)")
    parser.add_argument("--size", type=int, default=STICKER_SIZE, help="Canvas width and height in pixels")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log font size search")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    request = StickerRequest(args.text, width=args.size, height=args.size)
    try:
        data = asyncio.run(create_sticker(args.text, request))
    except StickerGenerationError as e:
        print(f"✗ {e}: {e.__cause__}", file=sys.stderr)
        return 1

    if data is None:
        print("✗ Nothing to render: text is empty", file=sys.stderr)
        return 2

    with open(args.output, "wb") as f:
        f.write(data)
    print(f"✓ Sticker saved to {args.output} ({len(data)} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
