from __future__ import annotations

import unittest

from hashnode_publisher.tags import NormalizedTag, normalize_tags, slugify_tag


class TestSlugifyTag(unittest.TestCase):
    def test_strips_symbols_and_hyphenates_spaces(self) -> None:
        self.assertEqual(slugify_tag("Hello World!"), "hello-world")
        self.assertEqual(slugify_tag("  C++ / Rust  "), "c-rust")
        self.assertEqual(slugify_tag("--a---b--"), "a-b")
        self.assertEqual(slugify_tag("Node.js"), "nodejs")

    def test_non_string_values_are_coerced(self) -> None:
        self.assertEqual(slugify_tag(2024), "2024")


class TestNormalizeTags(unittest.TestCase):
    def test_keeps_order_and_trimmed_display_name(self) -> None:
        tags = normalize_tags(["Hello World!", " cli "])
        self.assertEqual(
            tags,
            [
                NormalizedTag(slug="hello-world", name="Hello World!"),
                NormalizedTag(slug="cli", name="cli"),
            ],
        )
        self.assertEqual(tags[0].as_input(), {"slug": "hello-world", "name": "Hello World!"})

    def test_drops_tags_without_alphanumerics(self) -> None:
        tags = normalize_tags(["!!!", "   ", "python"])
        self.assertEqual([t.slug for t in tags], ["python"])

    def test_all_symbol_tags_yield_empty_list(self) -> None:
        self.assertEqual(normalize_tags(["!!!", "@#$"]), [])

    def test_non_sequence_input_fails_soft(self) -> None:
        self.assertEqual(normalize_tags("python"), [])
        self.assertEqual(normalize_tags(None), [])
        self.assertEqual(normalize_tags({"a": 1}), [])

    def test_normalizing_slugs_is_idempotent(self) -> None:
        raw = ["Hello World!", "Machine  Learning", "a--b", "Déjà vu", "x_y"]
        first = [t.slug for t in normalize_tags(raw)]
        second = [t.slug for t in normalize_tags(first)]
        self.assertEqual(first, second)

    def test_alphanumeric_input_always_has_slug(self) -> None:
        for raw in ["A", "!a!", "  9 ", "__z__", "-- q --"]:
            with self.subTest(raw=raw):
                tags = normalize_tags([raw])
                self.assertEqual(len(tags), 1)
                self.assertTrue(tags[0].slug)


if __name__ == "__main__":
    unittest.main()
