import asyncio
import io
import threading

import pytest
from PIL import Image, ImageFont

import sticker_generator
from sticker_generator import (
    STICKER_SIZE,
    StickerGenerationError,
    StickerRequest,
    create_sticker,
    draw_sticker,
    encode_sticker,
)


def default_font(size, text=""):
    return ImageFont.load_default(size=size)


def default_measure(text, size):
    return default_font(size).getlength(text)


class GlyphRecorder:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    async def __call__(self, emoji_char, size):
        self.calls.append(emoji_char)
        if self.fail:
            raise OSError("offline")
        return Image.new("RGBA", (size, size), (255, 0, 0, 255))


async def run_sticker(text, **kwargs):
    kwargs.setdefault("fetch_glyph", GlyphRecorder())
    kwargs.setdefault("measure", default_measure)
    kwargs.setdefault("font_loader", default_font)
    return await create_sticker(text, **kwargs)


@pytest.mark.asyncio
async def test_sticker_is_512_square_webp():
    data = await run_sticker("Hello World")

    image = Image.open(io.BytesIO(data))
    assert image.format == "WEBP"
    assert image.size == (STICKER_SIZE, STICKER_SIZE)


@pytest.mark.asyncio
async def test_blank_text_is_a_no_op():
    glyphs = GlyphRecorder()
    assert await run_sticker("   \n ", fetch_glyph=glyphs) is None
    assert await run_sticker("", fetch_glyph=glyphs) is None
    assert glyphs.calls == []


@pytest.mark.asyncio
async def test_custom_canvas_size():
    request = StickerRequest("ignored", width=256, height=256)
    data = await run_sticker("Hai 👋", request=request)

    assert Image.open(io.BytesIO(data)).size == (256, 256)


@pytest.mark.asyncio
async def test_emoji_failures_still_produce_a_sticker():
    glyphs = GlyphRecorder(fail=True)
    data = await run_sticker("semangat 💪 terus", fetch_glyph=glyphs)

    assert data
    assert glyphs.calls == ["💪"]


@pytest.mark.asyncio
async def test_lines_start_at_margin_and_step_by_line_height(monkeypatch):
    request = StickerRequest("one two three four five six seven eight nine ten")
    baselines = []

    async def fake_render_line(image, line_text, x, y, font_size, fetch_glyph, font_loader, prepare_text=None):
        baselines.append((x, y, font_size))
        return x

    monkeypatch.setattr(sticker_generator, "render_line", fake_render_line)
    image, layout = await draw_sticker(request, GlyphRecorder(), default_measure, default_font)

    margin = STICKER_SIZE * 0.05
    assert len(baselines) == len(layout.lines)
    for i, (x, y, font_size) in enumerate(baselines):
        assert x == pytest.approx(margin)
        assert y == pytest.approx(margin + layout.font_size + i * layout.line_height)
        assert font_size == layout.font_size
    assert image.getpixel((0, 0)) == (255, 255, 255)


def test_encode_resizes_to_exact_dimensions():
    data = encode_sticker(Image.new("RGB", (100, 80), "#fff"), 512, 512)
    assert Image.open(io.BytesIO(data)).size == (512, 512)


@pytest.mark.asyncio
async def test_drawing_failure_becomes_generation_error():
    def broken_font(size, text=""):
        raise OSError("cannot open resource")

    with pytest.raises(StickerGenerationError) as excinfo:
        await run_sticker("Hello", font_loader=broken_font)
    assert isinstance(excinfo.value.__cause__, OSError)


@pytest.mark.asyncio
async def test_encoding_failure_becomes_generation_error(monkeypatch):
    def broken_encode(image, width, height):
        raise KeyError("WEBP")

    monkeypatch.setattr(sticker_generator, "encode_sticker", broken_encode)
    with pytest.raises(StickerGenerationError):
        await run_sticker("Hello")


@pytest.mark.asyncio
async def test_concurrent_stickers_do_not_interfere():
    first, second = await asyncio.gather(
        run_sticker("first 🚀"),
        run_sticker("second", fetch_glyph=GlyphRecorder(fail=True)),
    )
    assert Image.open(io.BytesIO(first)).size == (512, 512)
    assert Image.open(io.BytesIO(second)).size == (512, 512)


@pytest.mark.asyncio
async def test_layout_and_encoding_run_off_the_event_loop(monkeypatch):
    loop_thread = threading.get_ident()
    threads = {"measure": set(), "encode": set()}

    def tracking_measure(text, size):
        threads["measure"].add(threading.get_ident())
        return default_measure(text, size)

    real_encode = sticker_generator.encode_sticker

    def tracking_encode(image, width, height):
        threads["encode"].add(threading.get_ident())
        return real_encode(image, width, height)

    monkeypatch.setattr(sticker_generator, "encode_sticker", tracking_encode)
    data = await run_sticker("Hello World", measure=tracking_measure)

    assert data
    assert threads["measure"] and loop_thread not in threads["measure"]
    assert threads["encode"] and loop_thread not in threads["encode"]
