"""
Slash-command dispatch for incoming chat messages.

The messaging session itself lives outside this project; it is reached
through the small MessagingClient protocol below.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from daily_verse import fetch_daily_verse
from sticker_generator import STICKER_MIME_TYPE, StickerGenerationError, create_sticker

_LOGGER = logging.getLogger(__name__)

EMPTY_QUOTE_TEXT = "Teks kosong"

MSG_STICKER_USAGE = "❌ Gunakan: /mkstr <teks> atau reply pesan dengan /mkstr"
MSG_STICKER_FAILED = "❌ Gagal membuat stiker."
MSG_VERSE_FAILED = "❌ Gagal mengambil ayat hari ini."
MSG_AI_FAILED = "❌ Maaf, terjadi kesalahan saat memproses permintaan AI. Silakan coba lagi."
MSG_AI_UNAVAILABLE = (
    "❌ Fitur AI sedang tidak tersedia.\n\n"
    "Kemungkinan penyebab:\n"
    "• API key Groq tidak valid\n"
    "• Quota API telah habis\n"
    "• Koneksi internet bermasalah\n\n"
    "Silakan hubungi administrator atau coba lagi nanti."
)


class MessagingClient(Protocol):
    async def send_text(self, chat_id: str, text: str) -> None: ...
    async def send_sticker(self, chat_id: str, data: bytes, mimetype: str) -> None: ...
    async def send_presence(self, chat_id: str, state: str) -> None: ...


class ChatClient(Protocol):
    def chat(self, prompt: str) -> str: ...


@dataclass(frozen=True)
class IncomingMessage:
    chat_id: str
    text: Optional[str]
    quoted_text: Optional[str] = None
    is_reply: bool = False
    from_me: bool = False


def strip_command(text, command):
    """Remove the first occurrence of a command word and surrounding blanks."""
    return text.replace(command, "", 1).strip()


class CommandHandler:
    def __init__(self, config, client: MessagingClient, ai_client: Optional[ChatClient] = None,
                 ai_available=False, sticker_factory=create_sticker, verse_fetcher=fetch_daily_verse):
        self.config = config
        self.client = client
        self.ai_client = ai_client
        self.ai_available = ai_available and ai_client is not None
        self.sticker_factory = sticker_factory
        self.verse_fetcher = verse_fetcher

    @property
    def bot_name(self):
        return self.config.bot_name

    async def handle(self, message: IncomingMessage):
        """
        Answer a single incoming message.

        :param message: IncomingMessage
        :return: Name of the command that handled the message, or None
        """
        if message.from_me or not message.text:
            return None

        text = message.text
        lowered = text.lower()
        _LOGGER.info(f"Incoming message from {message.chat_id}: {text[:100]}")

        if lowered == "/hai":
            await self.send_greeting(message)
            return "hai"
        if lowered == "/menu":
            await self.send_menu(message)
            return "menu"
        if text.startswith("/mkstr"):
            await self.make_sticker(message)
            return "mkstr"
        if lowered == "/ayat":
            await self.send_daily_verse(message)
            return "ayat"
        if text.startswith("/msg"):
            await self.ask_ai(message)
            return "msg"
        if lowered == "bot" or lowered == self.bot_name.lower():
            await self.client.send_text(
                message.chat_id,
                f"Hai! Saya {self.bot_name}. Ketik /menu untuk melihat apa yang bisa saya bantu! 🤖",
            )
            return "mention"
        return None

    async def send_greeting(self, message):
        await self.client.send_text(
            message.chat_id,
            f"Halo! Saya {self.bot_name} 🤖\n\n"
            "Saya dilengkapi dengan AI yang powerful untuk membantu Anda.\n"
            "Ketik /menu untuk melihat daftar perintah.",
        )

    async def send_menu(self, message):
        ai_status = "🟢 AKTIF" if self.ai_available else "🔴 NON-AKTIF"
        await self.client.send_text(
            message.chat_id,
            f"📌 Menu {self.bot_name}:\n\n"
            f"🤖 Status AI: {ai_status}\n\n"
            "1. /hai - Sambutan bot\n"
            "2. /menu - Menu ini\n"
            "3. /mkstr <teks> - Buat stiker dari teks\n"
            "4. /ayat - Kata-kata Hari Ini dari Alkitab\n"
            "5. /msg <pertanyaan> - Chat dengan AI\n"
            "6. Reply pesan dengan '/msg' atau '/msg <pertanyaan>' - Chat dengan AI\n\n"
            "💡 AI menggunakan Groq dengan model Llama 3.1 yang sangat cepat!",
        )

    async def make_sticker(self, message):
        sticker_text = strip_command(message.text, "/mkstr")
        if not sticker_text and message.is_reply:
            sticker_text = message.quoted_text or EMPTY_QUOTE_TEXT

        if not sticker_text.strip():
            await self.client.send_text(message.chat_id, MSG_STICKER_USAGE)
            return

        try:
            data = await self.sticker_factory(sticker_text)
        except StickerGenerationError as e:
            _LOGGER.error(f"Error creating sticker: {e.__cause__ or e}")
            await self.client.send_text(message.chat_id, MSG_STICKER_FAILED)
            return

        if data:
            await self.client.send_sticker(message.chat_id, data, STICKER_MIME_TYPE)

    async def send_daily_verse(self, message):
        try:
            verse = await asyncio.to_thread(self.verse_fetcher)
        except Exception as e:
            _LOGGER.error(f"Failed to fetch daily verse: {e}")
            await self.client.send_text(message.chat_id, MSG_VERSE_FAILED)
            return
        await self.client.send_text(message.chat_id, f"📖 Kata-kata Hari Ini:\n\n{verse}")

    def build_prompt(self, message):
        prompt = strip_command(message.text, "/msg")
        if message.is_reply and message.quoted_text:
            prompt = f"{message.quoted_text} {prompt}" if prompt else message.quoted_text
        return prompt

    async def ask_ai(self, message):
        if not self.ai_available:
            await self.client.send_text(message.chat_id, MSG_AI_UNAVAILABLE)
            return

        prompt = self.build_prompt(message)
        if not prompt:
            await self.client.send_text(message.chat_id, self.ai_usage())
            return

        await self.client.send_presence(message.chat_id, "composing")
        try:
            _LOGGER.info(f"AI request: {prompt[:100]}")
            answer = await asyncio.to_thread(self.ai_client.chat, prompt)
            await self.client.send_presence(message.chat_id, "paused")
            await self.client.send_text(
                message.chat_id,
                f"🤖 {self.bot_name} AI:\n\n{answer}\n\n💡 Powered by Groq + Llama 3.1",
            )
            _LOGGER.info(f"AI response sent ({len(answer)} characters)")
        except Exception as e:
            _LOGGER.error(f"Error in AI chat: {e}")
            await self.client.send_presence(message.chat_id, "paused")
            await self.client.send_text(message.chat_id, MSG_AI_FAILED)

    def ai_usage(self):
        return (
            f"🤖 Cara menggunakan AI Chat {self.bot_name}:\n\n"
            "1. Ketik: /msg <pertanyaan Anda>\n"
            "   Contoh: /msg jelaskan tentang artificial intelligence\n\n"
            "2. Reply pesan dengan: /msg atau /msg <pertanyaan>\n"
            "   - /msg: Gunakan teks pesan yang di-reply\n"
            "   - /msg <pertanyaan>: Gabungkan teks yang di-reply dengan pertanyaan\n\n"
            "💡 Dibuat oleh atmint"
        )
