import pytest

from dewpointfan.display import Display, TerminalDisplay


@pytest.fixture
def display():
    return TerminalDisplay()


def test_display_is_abstract():
    with pytest.raises(TypeError):
        Display()


def test_geometry(display):
    assert display.chars_per_line == 20
    assert display.row_range == (0, 3)
    low, high = display.row_range
    assert len(display.rows) == high - low + 1


def test_new_display_rows_are_empty(display):
    assert all(row == "" for row in display.rows)


def test_short_text_is_padded(display):
    display.print_line(1, "hello")
    assert display.rows[1] == "hello".ljust(display.chars_per_line)
    assert len(display.rows[1]) == display.chars_per_line


def test_long_text_is_cut_at_end_without_scroll(display):
    text = "abcdefghijklmnopqrstuvwxyz"
    display.print_line(0, text, False)
    assert display.rows[0] == text[: display.chars_per_line]


def test_long_text_keeps_tail_with_scroll(display):
    text = "abcdefghijklmnopqrstuvwxyz"
    display.print_line(2, text, True)
    assert display.rows[2] == text[-display.chars_per_line:]


def test_out_of_range_line_is_ignored(display):
    before = display.rows
    display.print_line(4, "ignored")
    display.print_line(-1, "ignored")
    assert display.rows == before


def test_clear_fills_rows_with_blanks(display):
    display.print_line(0, "something")
    display.clear()
    assert display.rows == tuple(" " * display.chars_per_line for _ in display.rows)


def test_clear_line_only_touches_that_line(display):
    display.print_line(0, "keep")
    display.print_line(3, "drop")
    display.clear_line(3)
    assert display.rows[3] == " " * display.chars_per_line
    assert display.rows[0] == "keep".ljust(display.chars_per_line)


def test_clear_line_out_of_range_is_ignored(display):
    display.print_line(0, "keep")
    before = display.rows
    display.clear_line(7)
    assert display.rows == before


def test_backlight_toggles(display):
    assert display.backlight is False
    display.set_backlight(True)
    assert display.backlight is True
    display.set_backlight(False)
    assert display.backlight is False