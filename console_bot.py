#!/usr/bin/env python3
"""
Run the command handler against the terminal instead of a chat session.

Each input line is one incoming message. A reply to an earlier message is
written as `<quoted text> >> <message>`, e.g. `Selamat pagi >> /mkstr`.
Stickers are saved as WebP files in the output directory.
"""

import argparse
import asyncio
import logging
import os
import sys

from bot_config import ConfigError, load_config
from command_handler import CommandHandler, IncomingMessage
from groq_client import GroqClient

_LOGGER = logging.getLogger(__name__)

REPLY_SEPARATOR = " >> "
CONSOLE_CHAT_ID = "console"


class ConsoleClient:
    """MessagingClient that prints replies and writes stickers to disk."""

    def __init__(self, output_dir):
        self.output_dir = output_dir
        self.sticker_count = 0
        os.makedirs(output_dir, exist_ok=True)

    async def send_text(self, chat_id, text):
        print(f"\n[{chat_id}] {text}\n")

    async def send_sticker(self, chat_id, data, mimetype):
        self.sticker_count += 1
        extension = mimetype.split("/")[-1]
        path = os.path.join(self.output_dir, f"sticker_{self.sticker_count:03d}.{extension}")
        with open(path, "wb") as f:
            f.write(data)
        print(f"\n[{chat_id}] <sticker saved to {path}>\n")

    async def send_presence(self, chat_id, state):
        _LOGGER.debug(f"Presence {state} for {chat_id}")


def parse_line(line):
    if REPLY_SEPARATOR in line:
        quoted, text = line.split(REPLY_SEPARATOR, 1)
        return IncomingMessage(CONSOLE_CHAT_ID, text.strip(), quoted_text=quoted.strip(), is_reply=True)
    return IncomingMessage(CONSOLE_CHAT_ID, line.strip())


async def run(args):
    config = load_config(args.env_file)

    ai_client = GroqClient.from_config(config)
    ai_available = False if args.no_ai else await asyncio.to_thread(ai_client.check_connection)
    if ai_available:
        _LOGGER.info("Groq API available, AI features enabled")
    else:
        _LOGGER.warning("Groq API not available, AI features disabled")

    handler = CommandHandler(config, ConsoleClient(args.output_dir), ai_client, ai_available)
    print(f"{config.bot_name} ready. Type /menu, Ctrl-D to quit.")

    while True:
        try:
            line = await asyncio.to_thread(input, "> ")
        except EOFError:
            break
        if line.strip():
            await handler.handle(parse_line(line))


def main(argv=None):
    parser = argparse.ArgumentParser(description="Chat with the sticker bot in the terminal")
    parser.add_argument("--env-file", help="Path to .env file")
    parser.add_argument("--output-dir", default="stickers", help="Where stickers are written")
    parser.add_argument("--no-ai", action="store_true", help="Skip the Groq connection test and disable /msg")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(run(args))
    except ConfigError as e:
        _LOGGER.error(str(e))
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
