"""
Daily Bible verse lookup via bible-api.com.
"""

import logging
from datetime import date
from urllib.parse import quote

import requests

_LOGGER = logging.getLogger(__name__)

BIBLE_API_URL = "https://bible-api.com"
TRANSLATION = "kjv"

VERSES = [
    "John 3:16",
    "Psalm 23:1",
    "Philippians 4:13",
    "Jeremiah 29:11",
    "Psalm 119:105",
    "Romans 8:28",
    "Proverbs 3:5-6",
    "Matthew 6:33",
    "Isaiah 41:10",
    "Romans 12:2",
]


def verse_for_day(today=None):
    """Pick the verse reference for a day; the same day always gets the same verse."""
    today = today or date.today()
    day_of_year = today.timetuple().tm_yday
    return VERSES[day_of_year % len(VERSES)]


def format_verse(data):
    return f'{data["reference"]}\n"{data["verses"][0]["text"]}"\n({data["translation_name"]})'


def fetch_daily_verse(today=None, session=None, timeout=15):
    """
    Fetch and format today's verse.

    :param today: Date to pick the verse for (default: today)
    :param session: Optional requests session
    :param timeout: Request timeout in seconds
    :return: Formatted verse text
    :raises requests.RequestException, KeyError, ValueError: on lookup failure
    """
    reference = verse_for_day(today)
    url = f"{BIBLE_API_URL}/{quote(reference)}?translation={TRANSLATION}"
    _LOGGER.info(f"Fetching daily verse {reference}")
    response = (session or requests).get(url, timeout=timeout)
    response.raise_for_status()
    return format_verse(response.json())
