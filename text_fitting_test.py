import pytest

from text_rendering.text_fitting import (
    MIN_FONT_SIZE,
    START_FONT_SIZE,
    LayoutSolution,
    solve_layout,
    usable_extent,
    wrap_words_to_width,
)


def narrow_measure(text, size):
    """Every character is 0.3 em wide."""
    return len(text) * size * 0.3


def half_em_measure(text, size):
    return len(text) * size * 0.5


USABLE = usable_extent(512, 0.05)


def test_empty_text_has_no_layout():
    assert solve_layout("", narrow_measure) is None
    assert solve_layout("  \n\t ", narrow_measure) is None


def test_hello_world_fits_on_one_line_at_start_size():
    layout = solve_layout("Hello World", narrow_measure)

    assert layout.font_size == START_FONT_SIZE
    assert [line.words for line in layout.lines] == [("Hello", "World")]
    assert layout.line_height == pytest.approx(START_FONT_SIZE * 1.2)
    assert not layout.overflow


def test_narrow_canvas_splits_at_word_boundary():
    layout = solve_layout("Hello World", narrow_measure, canvas_width=300)

    assert layout.font_size == START_FONT_SIZE
    assert [line.text for line in layout.lines] == ["Hello", "World"]


def test_largest_fitting_size_wins():
    text = " ".join(["word"] * 40)
    layout = solve_layout(text, half_em_measure)

    assert MIN_FONT_SIZE < layout.font_size < START_FONT_SIZE
    assert layout.total_height <= USABLE

    # the next larger size must have failed
    bigger = layout.font_size + 2
    lines = wrap_words_to_width(text.split(), USABLE, bigger, half_em_measure)
    assert lines is None or len(lines) * bigger * 1.2 > USABLE


def test_sizes_step_down_from_start():
    tried = []

    def recording_measure(text, size):
        tried.append(size)
        return len(text) * size * 50

    solve_layout("xx", recording_measure, start_font_size=20, min_font_size=10, step=4)

    assert sorted(set(tried), reverse=True) == [20, 16, 12, 10]


def test_oversized_word_falls_back_to_minimum_size():
    def wide_measure(text, size):
        return len(text) * size * 5

    layout = solve_layout("Supercalifragilistic ok", wide_measure)

    assert layout.font_size == MIN_FONT_SIZE
    assert layout.line_height == pytest.approx(12)
    assert layout.overflow
    assert layout.lines[0].words == ("Supercalifragilistic",)
    assert layout.words == ("Supercalifragilistic", "ok")


def test_overflowing_text_is_returned_not_rejected():
    text = " ".join(["overflow"] * 2000)
    layout = solve_layout(text, half_em_measure)

    assert layout.font_size == MIN_FONT_SIZE
    assert layout.overflow
    assert layout.total_height > USABLE


def test_word_order_is_preserved():
    words = [f"w{i}" * (i % 5 + 1) for i in range(60)]
    layout = solve_layout(" ".join(words), half_em_measure)

    assert list(layout.words) == words


def test_fitting_text_stays_within_height():
    for count in (1, 5, 20, 80, 200):
        layout = solve_layout(" ".join(["abc"] * count), half_em_measure)
        assert layout.total_height <= USABLE, count
        assert not layout.overflow


def test_greedy_packing_counts_space_after_each_word():
    # 'aa' = 20px, space = 10px at size 20 with half-em measure
    lines = wrap_words_to_width(["aa", "aa", "aa"], 50, 20, half_em_measure)

    # 20 + 10 + 20 = 50 fits, third word would need 80
    assert [line.words for line in lines] == [("aa", "aa"), ("aa",)]
    assert lines[0].width == pytest.approx(50)


def test_oversized_word_rejected_only_when_asked():
    assert wrap_words_to_width(["toolong"], 10, 20, half_em_measure) is None

    lines = wrap_words_to_width(["toolong", "a"], 10, 20, half_em_measure, reject_oversized_words=False)
    assert [line.words for line in lines] == [("toolong",), ("a",)]


def test_solution_is_immutable():
    layout = solve_layout("Hello", narrow_measure)
    assert isinstance(layout, LayoutSolution)
    with pytest.raises(AttributeError):
        layout.font_size = 1


def test_invalid_step():
    with pytest.raises(ValueError):
        solve_layout("Hello", narrow_measure, step=0)
