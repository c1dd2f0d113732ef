"""
Chat completion client for the Groq API (OpenAI-compatible endpoint).

Every failure is turned into a short apology text for the chat user; callers
never see an exception from `chat`.
"""

import logging

import requests

_LOGGER = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "Anda adalah asisten AI yang membantu pengguna WhatsApp. Berikan respon yang ramah, "
    "informatif, dan mudah dipahami. Gunakan bahasa Indonesia yang baik dan santun."
)

CONNECTION_TEST_PROMPT = "Halo, balas dengan 'OK' jika kamu bisa mendengar saya."

APOLOGY_MARKER = "Maaf"
MSG_UNKNOWN_FORMAT = "Maaf, saya mengalami kesalahan dalam memproses permintaan Anda."
MSG_INVALID_KEY = "Maaf, API key Groq tidak valid. Silakan periksa konfigurasi."
MSG_RATE_LIMIT = "Maaf, rate limit telah tercapai. Silakan coba lagi nanti."
MSG_SERVER_ERROR = "Maaf, server Groq sedang mengalami masalah. Silakan coba lagi nanti."
MSG_MODEL_DECOMMISSIONED = (
    "Maaf, model AI yang digunakan telah didepresiasi. Silakan hubungi administrator untuk update."
)
MSG_CONNECTION_ERROR = "Maaf, terjadi kesalahan koneksi ke AI service. Silakan coba lagi."

REQUEST_TIMEOUT = 60


class GroqClient:
    def __init__(self, api_key, model, api_url, session=None, timeout=REQUEST_TIMEOUT):
        self.api_key = api_key
        self.model = model
        self.api_url = api_url
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(config.groq_api_key, config.groq_model, config.groq_api_url)

    def build_payload(self, prompt):
        return {
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "model": self.model,
            "temperature": 0.7,
            "max_tokens": 1024,
            "top_p": 1,
            "stream": False,
        }

    def chat(self, prompt):
        """
        Send one prompt and return the model's answer.

        :param prompt: User prompt
        :return: Answer text, or an apology text on failure
        """
        _LOGGER.info("Sending request to Groq API...")
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            response = self.session.post(
                self.api_url, headers=headers, json=self.build_payload(prompt), timeout=self.timeout
            )
            if not response.ok:
                _LOGGER.error(f"HTTP Error: {response.status_code} {response.text}")
                return error_message(response.status_code, response.text)
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            _LOGGER.error(f"Error calling Groq API: {e}")
            return MSG_CONNECTION_ERROR

        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            _LOGGER.error(f"Unrecognised response format: {data}")
            return MSG_UNKNOWN_FORMAT

    def check_connection(self):
        """
        Probe the API once; the result decides whether AI commands are enabled.

        :return: True if the API answered with a real reply
        """
        _LOGGER.info("Testing Groq API connection...")
        reply = self.chat(CONNECTION_TEST_PROMPT)
        if reply and APOLOGY_MARKER not in reply:
            _LOGGER.info(f"Groq API test response: {reply[:100]}")
            return True
        _LOGGER.error(f"Groq API test failed: {reply}")
        return False


def error_message(status_code, body=""):
    """Map an HTTP error to the apology shown to the user."""
    if "model_decommissioned" in (body or ""):
        return MSG_MODEL_DECOMMISSIONED
    if status_code == 401:
        return MSG_INVALID_KEY
    if status_code == 429:
        return MSG_RATE_LIMIT
    if status_code >= 500:
        return MSG_SERVER_ERROR
    return MSG_CONNECTION_ERROR
