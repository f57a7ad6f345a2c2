"""Tests for key decoding, screen layout and terminal setup."""

import io
import os
import unittest

from render import Frame, InputField, Row
from models import Mode
from terminal import (
    Terminal, TerminalError, fit, incomplete_escape, layout_frame, parse_keys,
    visible_window,
)
import theme
from theme import Palette, build_palette

PLAIN = Palette(header='', done='', selected='', insert='', dim='')


class TestParseKeys(unittest.TestCase):

    def test_plain_characters(self):
        self.assertEqual(parse_keys("ab é"), ["a", "b", " ", "é"])

    def test_control_characters(self):
        self.assertEqual(parse_keys("\r\n\t\x7f\x08\x03\x17"),
                         ["enter", "enter", "tab", "backspace", "backspace", "ctrl+c", "ctrl+w"])

    def test_arrow_keys(self):
        self.assertEqual(parse_keys("\x1b[A\x1b[B\x1b[C\x1b[D"), ["up", "down", "right", "left"])
        self.assertEqual(parse_keys("\x1bOA\x1bOB"), ["up", "down"])

    def test_tilde_sequences(self):
        self.assertEqual(parse_keys("\x1b[3~\x1b[1~\x1b[4~\x1b[5~\x1b[6~"),
                         ["delete", "home", "end", "pgup", "pgdn"])

    def test_modified_arrow_is_plain_arrow(self):
        self.assertEqual(parse_keys("\x1b[1;5A"), ["up"])

    def test_lone_escape(self):
        self.assertEqual(parse_keys("\x1b"), ["esc"])
        self.assertEqual(parse_keys("\x1b\x1b"), ["esc", "esc"])
        self.assertEqual(parse_keys("a\x1b"), ["a", "esc"])

    def test_escape_prefixed_key_is_alt_chord(self):
        self.assertEqual(parse_keys("\x1bd"), ["alt+d"])
        self.assertEqual(parse_keys("\x1bq\x1bx"), ["alt+q", "alt+x"])
        self.assertEqual(parse_keys("\x1b\r"), ["alt+enter"])
        self.assertEqual(parse_keys("\x1b\x1b[A"), ["esc", "up"])

    def test_unknown_sequence_dropped(self):
        self.assertEqual(parse_keys("\x1b[200~x"), ["x"])
        self.assertEqual(parse_keys("\x1bOP"), [])

    def test_incomplete_escape(self):
        self.assertTrue(incomplete_escape("\x1b"))
        self.assertTrue(incomplete_escape("a\x1b["))
        self.assertTrue(incomplete_escape("\x1b[1;5"))
        self.assertFalse(incomplete_escape("\x1b[A"))
        self.assertFalse(incomplete_escape("\x1bq"))
        self.assertFalse(incomplete_escape("abc"))


class TestLayout(unittest.TestCase):

    def frame(self, count=3, selected=0, active=False, notice=None):
        rows = [Row(text=f"task {i}  ", done=(i == 1), selected=(i == selected))
                for i in range(count)]
        return Frame(
            title=" Todo ",
            mode=Mode.INSERT if active else Mode.NORMAL,
            rows=rows,
            selected=selected if count else None,
            input=InputField("abc", 3, active),
            footer="help",
            notice=notice,
        )

    def test_visible_window(self):
        self.assertEqual(visible_window(5, 4, 10), 0)
        self.assertEqual(visible_window(20, 0, 5), 0)
        self.assertEqual(visible_window(20, 7, 5), 3)
        self.assertEqual(visible_window(20, 7, 5, offset=6), 6)
        self.assertEqual(visible_window(20, 2, 5, offset=6), 2)
        self.assertEqual(visible_window(20, None, 5, offset=30), 15)

    def test_fit_pads_and_truncates(self):
        self.assertEqual(fit("abc", 5), "abc  ")
        self.assertEqual(fit("abcdef", 3), "abc")
        self.assertEqual(fit("日本", 3), "日 ")

    def test_screen_fills_height(self):
        lines, cursor, offset = layout_frame(self.frame(), 40, 12, PLAIN)
        self.assertEqual(len(lines), 12)
        self.assertIsNone(cursor)
        self.assertEqual(offset, 0)
        self.assertTrue(all(len(line) == 40 or line == '' for line in lines))

    def test_selected_row_has_marker(self):
        lines, _, _ = layout_frame(self.frame(selected=1), 40, 12, PLAIN)
        self.assertTrue(lines[3].startswith(">> task 1"))
        self.assertTrue(lines[2].startswith("   task 0"))

    def test_scrolls_to_selection(self):
        lines, _, offset = layout_frame(self.frame(count=30, selected=25), 40, 12, PLAIN)
        self.assertEqual(offset, 20)
        self.assertTrue(lines[-5].startswith(">> task 25"))

    def test_cursor_in_input_field(self):
        lines, cursor, _ = layout_frame(self.frame(active=True), 40, 12, PLAIN)
        row, col = cursor
        self.assertTrue(lines[row].startswith(" Input: abc"))
        self.assertEqual(col, len(" Input: ") + 3)

    def test_notice_and_empty_list(self):
        lines, _, _ = layout_frame(self.frame(count=0, notice="careful"), 40, 10, PLAIN)
        self.assertIn("no tasks", lines[2])
        self.assertTrue(lines[-2].startswith(" careful"))


class TestPalette(unittest.TestCase):

    def test_invalid_override_falls_back_to_default(self):
        self.assertEqual(build_palette({"done": "green", "selected": "#12345"}), build_palette())

    def test_hex_without_hash_is_accepted(self):
        self.assertEqual(build_palette({"done": "A7E399"}), build_palette())

    def test_exports_are_public_and_defined(self):
        for name in theme.__all__:
            self.assertFalse(name.startswith("_"), name)
            self.assertTrue(hasattr(theme, name), name)


class TestTerminal(unittest.TestCase):

    def test_non_tty_is_rejected(self):
        read_fd, write_fd = os.pipe()
        try:
            with os.fdopen(read_fd, "r") as stdin:
                term = Terminal(stdin=stdin, stdout=io.StringIO(), palette=PLAIN)
                with self.assertRaises(TerminalError):
                    with term:
                        pass
        finally:
            os.close(write_fd)

    def test_read_key_decodes_pipe_input(self):
        read_fd, write_fd = os.pipe()
        os.write(write_fd, "x\x1b[Bé".encode("utf-8"))
        os.close(write_fd)
        with os.fdopen(read_fd, "r") as stdin:
            term = Terminal(stdin=stdin, stdout=io.StringIO(), palette=PLAIN)
            self.assertEqual([term.read_key() for _ in range(3)], ["x", "down", "é"])
            with self.assertRaises(EOFError):
                term.read_key()

    def test_paint_writes_frame(self):
        out = io.StringIO()
        read_fd, write_fd = os.pipe()
        try:
            with os.fdopen(read_fd, "r") as stdin:
                term = Terminal(stdin=stdin, stdout=out, palette=PLAIN)
                term.paint(Frame(title="T", mode=Mode.NORMAL, rows=[Row("A  ", False, True)],
                                 selected=0, footer="help"))
        finally:
            os.close(write_fd)
        self.assertIn(">> A", out.getvalue())
        self.assertTrue(out.getvalue().startswith("\033[H"))


if __name__ == "__main__":
    unittest.main()
