import threading

import pytest
from PIL import Image

from text_rendering import emoji_handler
from text_rendering.emoji_handler import (
    GlyphFetchError,
    GlyphRun,
    TextRun,
    ensure_svg_dimensions,
    fetch_emoji_glyph,
    get_emoji_svg_url,
    split_runs,
    twemoji_codepoint,
)

TWEMOJI_SVG = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 36 36"><circle cx="18" cy="18" r="18"/></svg>'


class FakeResponse:
    def __init__(self, status, body):
        self.status = status
        self.body = body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def text(self):
        return self.body


class FakeSession:
    def __init__(self, status=200, body=TWEMOJI_SVG, error=None):
        self.status = status
        self.body = body
        self.error = error
        self.urls = []

    def get(self, url):
        self.urls.append(url)
        if self.error:
            raise self.error
        return FakeResponse(self.status, self.body)


def test_split_runs_plain_text():
    assert split_runs("Hello World") == [TextRun("Hello World", 0, 11)]


def test_split_runs_text_emoji_text():
    runs = split_runs("ab 😀 cd")

    assert [type(run) for run in runs] == [TextRun, GlyphRun, TextRun]
    assert runs[1].text == "😀"
    assert "".join(run.text for run in runs) == "ab 😀 cd"


def test_split_runs_keeps_variation_selector_with_emoji():
    text = "I ❤️ you"
    runs = split_runs(text)

    assert runs[1] == GlyphRun("❤️", 2, 4)
    assert "".join(run.text for run in runs) == text


def test_split_runs_adjacent_emoji():
    runs = split_runs("😀😎")
    assert [run.text for run in runs] == ["😀", "😎"]
    assert all(isinstance(run, GlyphRun) for run in runs)


def test_split_runs_spans_cover_text():
    text = "go 🚀 now 👨‍💻!"
    runs = split_runs(text)

    position = 0
    for run in runs:
        assert run.start == position
        assert text[run.start:run.end] == run.text
        position = run.end
    assert position == len(text)


def test_twemoji_codepoint():
    assert twemoji_codepoint("😀") == "1f600"
    assert twemoji_codepoint("❤️") == "2764"
    assert twemoji_codepoint("👨‍💻") == "1f468-200d-1f4bb"
    assert get_emoji_svg_url("😀").endswith("/1f600.svg")


def test_ensure_svg_dimensions_injects_size():
    svg = ensure_svg_dimensions(TWEMOJI_SVG, 108)
    assert svg.startswith('<svg width="108" height="108" ')


def test_ensure_svg_dimensions_keeps_existing_size():
    svg = '<svg width="36" viewBox="0 0 36 36"></svg>'
    assert ensure_svg_dimensions(svg, 108) == svg


def test_ensure_svg_dimensions_ignores_child_attributes():
    svg = '<svg viewBox="0 0 36 36"><path stroke-width="2" d="M0 0h36"/><rect width="4" height="4"/></svg>'

    sized = ensure_svg_dimensions(svg, 72)

    assert sized.startswith('<svg width="72" height="72" viewBox="0 0 36 36">')
    assert sized.endswith('<rect width="4" height="4"/></svg>')


def test_ensure_svg_dimensions_after_xml_prolog():
    svg = '<?xml version="1.0"?>\n<svg viewBox="0 0 36 36"></svg>'
    assert ensure_svg_dimensions(svg, 36) == '<?xml version="1.0"?>\n<svg width="36" height="36" viewBox="0 0 36 36"></svg>'


@pytest.mark.asyncio
async def test_fetch_emoji_glyph(monkeypatch):
    rendered = []

    def fake_rasterize(svg_string, size):
        rendered.append(svg_string)
        return Image.new("RGBA", (size, size), (255, 0, 0, 255))

    monkeypatch.setattr(emoji_handler, "rasterize_svg", fake_rasterize)
    session = FakeSession()

    glyph = await fetch_emoji_glyph("😀", 54, session)

    assert glyph.size == (54, 54)
    assert session.urls == [get_emoji_svg_url("😀")]
    assert 'width="54"' in rendered[0]


@pytest.mark.asyncio
async def test_fetch_emoji_glyph_http_error():
    with pytest.raises(GlyphFetchError):
        await fetch_emoji_glyph("😀", 54, FakeSession(status=404, body=""))


@pytest.mark.asyncio
async def test_fetch_emoji_glyph_network_error():
    session = FakeSession(error=OSError("connection reset"))
    with pytest.raises(GlyphFetchError):
        await fetch_emoji_glyph("😀", 54, session)
    assert len(session.urls) == 1


@pytest.mark.asyncio
async def test_fetch_emoji_glyph_decode_error(monkeypatch):
    def broken_rasterize(svg_string, size):
        raise ValueError("not an svg")

    monkeypatch.setattr(emoji_handler, "rasterize_svg", broken_rasterize)
    with pytest.raises(GlyphFetchError):
        await fetch_emoji_glyph("😀", 54, FakeSession(body="garbage"))


@pytest.mark.asyncio
async def test_fetch_emoji_glyph_rasterizes_off_the_event_loop(monkeypatch):
    loop_thread = threading.get_ident()
    raster_threads = []

    def fake_rasterize(svg_string, size):
        raster_threads.append(threading.get_ident())
        return Image.new("RGBA", (size, size), (255, 0, 0, 255))

    monkeypatch.setattr(emoji_handler, "rasterize_svg", fake_rasterize)
    await fetch_emoji_glyph("😀", 54, FakeSession())

    assert len(raster_threads) == 1
    assert raster_threads[0] != loop_thread
