"""
Unit tests for the question filter and text cleanup.
"""

import os
import sys
import unittest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from qcluster.filters import clean_text, filter_questions, is_question, to_filtered_items
from qcluster.models import Item


def _item(title, body="", item_id="p1"):
    return Item(id=item_id, title=title, body=body)


class TestIsQuestion(unittest.TestCase):
    """Default (title-only) heuristic."""

    def test_question_mark_anywhere_in_title(self):
        self.assertTrue(is_question(_item("Battery life after update?")))
        self.assertTrue(is_question(_item("Honest take? Still on the fence")))

    def test_lead_words_case_insensitive(self):
        for title in ["What is the best case", "HOW do I reset it", "Anyone tried the beta",
                      "Where to buy in EU", "Which model for travel", "Does it fit glasses"]:
            with self.subTest(title=title):
                self.assertTrue(is_question(_item(title)))

    def test_literal_prefix_match(self):
        """Lead words match as plain prefixes, not whole words."""
        self.assertTrue(is_question(_item("Isolated audio review")))

    def test_statements_rejected(self):
        self.assertFalse(is_question(_item("Just got mine today")))
        self.assertFalse(is_question(_item("Great purchase, highly recommend")))

    def test_body_ignored_in_default_mode(self):
        self.assertFalse(is_question(_item("Day one impressions", "Can anyone help?")))


class TestStrictMode(unittest.TestCase):
    """Body-aware heuristic."""

    def test_question_mark_in_body(self):
        self.assertTrue(is_question(_item("Day one impressions", "Is this normal?"), strict=True))

    def test_request_words_whole_word(self):
        self.assertTrue(is_question(_item("Need advice on sizing"), strict=True))
        self.assertTrue(is_question(_item("Review", "Looking for thoughts from owners"), strict=True))

    def test_request_words_need_word_boundary(self):
        self.assertFalse(is_question(_item("Helpful accessories list"), strict=True))

    def test_lead_word_needs_following_space(self):
        self.assertTrue(is_question(_item("how I set mine up"), strict=True))
        self.assertFalse(is_question(_item("Isolated audio review"), strict=True))


class TestFilterQuestions(unittest.TestCase):

    def setUp(self):
        self.items = [
            _item("Is it worth it?", item_id="1"),
            _item("Unboxing photos", item_id="2"),
            _item("Why does it overheat", item_id="3"),
            _item("My review", "Any advice for new owners", item_id="4"),
        ]

    def test_preserves_order(self):
        kept = filter_questions(self.items)
        self.assertEqual([item.id for item in kept], ["1", "3"])

    def test_empty_input(self):
        self.assertEqual(filter_questions([]), [])
        self.assertEqual(filter_questions([], strict=True), [])

    def test_idempotent(self):
        for strict in (False, True):
            with self.subTest(strict=strict):
                once = filter_questions(self.items, strict=strict)
                self.assertEqual(filter_questions(once, strict=strict), once)


class TestCleanText(unittest.TestCase):

    def test_removes_urls_mentions_and_markdown(self):
        text = "**Is** this https://example.com/x legit u/some_user in r/gadgets?"
        self.assertEqual(clean_text(text), "Is this legit in ?")

    def test_collapses_whitespace(self):
        self.assertEqual(clean_text("  what   about\n\nwarranty  "), "what about warranty")

    def test_filtered_text_falls_back_to_body(self):
        filtered = to_filtered_items([_item("", "Should I wait for v2?")])
        self.assertEqual(filtered[0].text, "Should I wait for v2?")
        self.assertEqual(filtered[0].item.body, "Should I wait for v2?")


if __name__ == '__main__':
    unittest.main()
