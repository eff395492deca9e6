"""
Unit tests for text normalization.
"""

import unittest

from text_cleaner import normalize_lines, normalize_text, split_lines

MESSY_TEXT = "  Jane\u200b  Doe \r\nSenior   Developer\u2013Backend\r\n\r\n\r\n\r\n\ufb01nance  team\t\t"


class TestNormalizeLines(unittest.TestCase):

    def test_empty_input(self):
        self.assertEqual(normalize_lines(""), "")
        self.assertEqual(normalize_lines(None), "")

    def test_zero_width_characters_removed(self):
        self.assertEqual(normalize_lines("x\u200by\ufeffz"), "xyz")

    def test_word_joiner_and_soft_hyphen_removed(self):
        self.assertEqual(normalize_lines("jo\u2060hn\u00ad"), "john")
        self.assertEqual(normalize_lines("Py\u00adthon"), "Python")

    def test_each_dash_variant_becomes_one_hyphen(self):
        self.assertEqual(normalize_lines("a\u2013b"), "a-b")
        self.assertEqual(normalize_lines("a\u2013\u2014b"), "a--b")
        self.assertEqual(normalize_lines("2019 \u2212 2021"), "2019 - 2021")

    def test_ascii_hyphen_runs_kept(self):
        self.assertEqual(normalize_lines("john--doe@gmail.com"), "john--doe@gmail.com")

    def test_blank_line_runs_are_capped(self):
        self.assertEqual(normalize_lines("line1\r\n\r\n\r\n\r\nline2"), "line1\n\nline2")

    def test_horizontal_whitespace_collapsed_per_line(self):
        self.assertEqual(normalize_lines("  a   b  \n  c "), "a b\nc")

    def test_compatibility_characters_folded(self):
        self.assertEqual(normalize_lines("\ufb01le"), "file")

    def test_idempotent(self):
        once = normalize_lines(MESSY_TEXT)
        self.assertEqual(normalize_lines(once), once)
        self.assertEqual(once, "Jane Doe\nSenior Developer-Backend\n\nfinance team")


class TestNormalizeText(unittest.TestCase):

    def test_single_line_view(self):
        self.assertEqual(normalize_text("a\n\nb   c"), "a b c")

    def test_idempotent(self):
        once = normalize_text(MESSY_TEXT)
        self.assertEqual(normalize_text(once), once)


class TestSplitLines(unittest.TestCase):

    def test_empty_text_has_no_lines(self):
        self.assertEqual(split_lines(""), [])

    def test_lines_are_cleaned(self):
        self.assertEqual(split_lines(" one \n\n two"), ["one", "", "two"])


if __name__ == '__main__':
    unittest.main()
