from __future__ import annotations

import unittest

from redisnav.render.ansi import clip_ansi_line, display_width, fit_ansi_line, wrap_ansi_line


class AnsiLineTests(unittest.TestCase):
    def test_display_width_ignores_escapes_and_counts_wide_chars(self) -> None:
        self.assertEqual(display_width("\033[31mab\033[0m"), 2)
        self.assertEqual(display_width("日本"), 4)

    def test_clip_keeps_escapes(self) -> None:
        self.assertEqual(clip_ansi_line("\033[31mabcdef\033[0m", 3), "\033[31mabc")
        self.assertEqual(clip_ansi_line("abc", 0), "")

    def test_clip_does_not_split_wide_chars(self) -> None:
        self.assertEqual(clip_ansi_line("a日b", 2), "a")

    def test_fit_pads_and_resets(self) -> None:
        self.assertEqual(fit_ansi_line("ab", 4), "ab  ")
        self.assertEqual(fit_ansi_line("\033[1mab", 3), "\033[1mab\033[0m ")

    def test_wrap(self) -> None:
        self.assertEqual(wrap_ansi_line("abcdef", 4), ["abcd", "ef"])
        self.assertEqual(wrap_ansi_line("", 4), [""])

    def test_tabs_expand_to_stops(self) -> None:
        self.assertEqual(clip_ansi_line("a\tb", 10), "a       b")


if __name__ == "__main__":
    unittest.main()
